################################################################################
#  Licensed to the Apache Software Foundation (ASF) under one
#  or more contributor license agreements.  See the NOTICE file
#  distributed with this work for additional information
#  regarding copyright ownership.  The ASF licenses this file
#  to you under the Apache License, Version 2.0 (the
#  "License"); you may not use this file except in compliance
#  with the License.  You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
# limitations under the License.
################################################################################

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import pyarrow
from pyarrow import types


class DataType(ABC):
    def __init__(self, nullable: bool = True):
        self.nullable = nullable

    @abstractmethod
    def is_atomic(self) -> bool:
        """Whether values of this type are scalars rather than nested structures."""

    def _null_suffix(self) -> str:
        return "" if self.nullable else " NOT NULL"


@dataclass
class AtomicType(DataType):
    """A scalar type named by its SQL type string, e.g. BIGINT or DECIMAL(10, 2)."""
    type: str

    def __init__(self, type: str, nullable: bool = True):
        super().__init__(nullable)
        self.type = type

    def is_atomic(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.type + self._null_suffix()


@dataclass
class ArrayType(DataType):
    element: DataType

    def __init__(self, nullable: bool, element_type: DataType):
        super().__init__(nullable)
        self.element = element_type

    def is_atomic(self) -> bool:
        return False

    def __str__(self) -> str:
        return "ARRAY<{}>{}".format(self.element, self._null_suffix())


@dataclass
class MapType(DataType):
    key: DataType
    value: DataType

    def __init__(self, nullable: bool, key_type: DataType, value_type: DataType):
        super().__init__(nullable)
        self.key = key_type
        self.value = value_type

    def is_atomic(self) -> bool:
        return False

    def __str__(self) -> str:
        return "MAP<{}, {}>{}".format(self.key, self.value, self._null_suffix())


@dataclass
class DataField:
    """A named column of a relation, `id` is its position in the relation schema."""
    id: int
    name: str
    type: DataType
    description: Optional[str] = None

    def __str__(self) -> str:
        comment = " COMMENT {}".format(self.description) if self.description else ""
        return "{}: {}{}".format(self.name, self.type, comment)


@dataclass
class RowType(DataType):
    fields: List[DataField]

    def __init__(self, nullable: bool, fields: List[DataField]):
        super().__init__(nullable)
        self.fields = list(fields or [])

    def is_atomic(self) -> bool:
        return False

    def __str__(self) -> str:
        return "ROW<{}>{}".format(", ".join(str(f) for f in self.fields), self._null_suffix())


def simple_string(fields: List[DataField], max_fields: int = 5) -> str:
    """Short schema rendering for log lines, truncated after max_fields fields."""
    shown = ["{}:{}".format(f.name, f.type) for f in fields[:max_fields]]
    if len(fields) > max_fields:
        shown.append("... {} more fields".format(len(fields) - max_fields))
    return "struct<{}>".format(",".join(shown))


_ATOMIC_TO_ARROW: Dict[str, Callable[[], pyarrow.DataType]] = {
    'TINYINT': pyarrow.int8,
    'SMALLINT': pyarrow.int16,
    'INT': pyarrow.int32,
    'BIGINT': pyarrow.int64,
    'FLOAT': pyarrow.float32,
    'DOUBLE': pyarrow.float64,
    'BOOLEAN': pyarrow.bool_,
    'STRING': pyarrow.string,
    'BYTES': pyarrow.binary,
    'DATE': pyarrow.date32,
}

_TIMESTAMP_UNITS = {0: 's', 3: 'ms', 6: 'us', 9: 'ns'}

_ARROW_TO_ATOMIC = [
    (types.is_int8, 'TINYINT'),
    (types.is_int16, 'SMALLINT'),
    (types.is_int32, 'INT'),
    (types.is_int64, 'BIGINT'),
    (types.is_float32, 'FLOAT'),
    (types.is_float64, 'DOUBLE'),
    (types.is_boolean, 'BOOLEAN'),
    (types.is_string, 'STRING'),
    (types.is_large_string, 'STRING'),
    (types.is_binary, 'BYTES'),
    (types.is_large_binary, 'BYTES'),
    (types.is_date32, 'DATE'),
]


class PyarrowFieldParser:
    """Converts between relation schemas and pyarrow schemas."""

    @staticmethod
    def from_scan_type(data_type: DataType) -> pyarrow.DataType:
        if isinstance(data_type, ArrayType):
            return pyarrow.list_(PyarrowFieldParser.from_scan_type(data_type.element))
        if isinstance(data_type, MapType):
            return pyarrow.map_(PyarrowFieldParser.from_scan_type(data_type.key),
                                PyarrowFieldParser.from_scan_type(data_type.value))
        if isinstance(data_type, RowType):
            return pyarrow.struct([PyarrowFieldParser.from_scan_field(f) for f in data_type.fields])
        if not isinstance(data_type, AtomicType):
            raise ValueError("Unsupported data type: {}".format(data_type))

        type_name = data_type.type.upper()
        factory = _ATOMIC_TO_ARROW.get(type_name)
        if factory is not None:
            return factory()
        if type_name.startswith('CHAR') or type_name.startswith('VARCHAR'):
            return pyarrow.string()
        if type_name.startswith('DECIMAL'):
            match = re.fullmatch(r'DECIMAL\((\d+),\s*(\d+)\)', type_name)
            precision, scale = map(int, match.groups()) if match else (10, 0)
            return pyarrow.decimal128(precision, scale)
        if type_name.startswith('TIMESTAMP'):
            match = re.fullmatch(r'TIMESTAMP\((\d+)\)', type_name)
            precision = int(match.group(1)) if match else 6
            unit = next(u for p, u in sorted(_TIMESTAMP_UNITS.items()) if precision <= p or p == 9)
            return pyarrow.timestamp(unit)
        raise ValueError("Unsupported data type: {}".format(data_type))

    @staticmethod
    def from_scan_field(data_field: DataField) -> pyarrow.Field:
        metadata = {b'description': data_field.description.encode('utf-8')} if data_field.description else None
        return pyarrow.field(data_field.name, PyarrowFieldParser.from_scan_type(data_field.type),
                             nullable=data_field.type.nullable, metadata=metadata)

    @staticmethod
    def from_scan_schema(data_fields: List[DataField]) -> pyarrow.Schema:
        return pyarrow.schema([PyarrowFieldParser.from_scan_field(f) for f in data_fields])

    @staticmethod
    def to_scan_type(pa_type: pyarrow.DataType, nullable: bool) -> DataType:
        for predicate, type_name in _ARROW_TO_ATOMIC:
            if predicate(pa_type):
                return AtomicType(type_name, nullable)
        if types.is_decimal(pa_type):
            return AtomicType('DECIMAL({}, {})'.format(pa_type.precision, pa_type.scale), nullable)
        if types.is_timestamp(pa_type):
            precision = {u: p for p, u in _TIMESTAMP_UNITS.items()}[pa_type.unit]
            return AtomicType('TIMESTAMP({})'.format(precision), nullable)
        if types.is_list(pa_type) or types.is_large_list(pa_type):
            return ArrayType(nullable, PyarrowFieldParser.to_scan_type(pa_type.value_type, nullable))
        if types.is_map(pa_type):
            return MapType(nullable,
                           PyarrowFieldParser.to_scan_type(pa_type.key_type, nullable),
                           PyarrowFieldParser.to_scan_type(pa_type.item_type, nullable))
        if types.is_struct(pa_type):
            return RowType(nullable, [PyarrowFieldParser.to_scan_field(i, pa_type.field(i))
                                      for i in range(pa_type.num_fields)])
        raise ValueError("Unsupported pyarrow type: {}".format(pa_type))

    @staticmethod
    def to_scan_field(field_idx: int, pa_field: pyarrow.Field) -> DataField:
        description = None
        if pa_field.metadata and b'description' in pa_field.metadata:
            description = pa_field.metadata[b'description'].decode('utf-8')
        return DataField(field_idx, pa_field.name,
                         PyarrowFieldParser.to_scan_type(pa_field.type, pa_field.nullable), description)

    @staticmethod
    def to_scan_schema(pa_schema: pyarrow.Schema, start_id: int = 0) -> List[DataField]:
        return [PyarrowFieldParser.to_scan_field(start_id + i, f) for i, f in enumerate(pa_schema)]
