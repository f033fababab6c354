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

from typing import Dict, List, Optional, Sequence

import pyarrow as pa

from pyfilescan.common.predicate import Predicate
from pyfilescan.format.file_format import FileFormat
from pyfilescan.index.file_index import FileIndex
from pyfilescan.read.file_entry import PartitionDirectory
from pyfilescan.schema.data_types import DataField, PyarrowFieldParser
from pyfilescan.table.bucket_spec import BucketSpec


class FileRelation:
    """
    A relation backed by data files: its data and partition schemas,
    bucketing, reader format, options and the index listing its files.
    """

    def __init__(self,
                 data_fields: List[DataField],
                 file_format: FileFormat,
                 file_index: FileIndex,
                 partition_fields: Optional[List[DataField]] = None,
                 bucket_spec: Optional[BucketSpec] = None,
                 options: Optional[Dict[str, str]] = None):
        self.data_fields = list(data_fields)
        self.partition_fields = list(partition_fields or [])
        self.file_format = file_format
        self.file_index = file_index
        self.bucket_spec = bucket_spec
        self.options: Dict[str, str] = dict(options or {})

        partition_names = {f.name.lower() for f in self.partition_fields}
        # Data schemas may repeat partition columns, their values come from directories only.
        self.file_data_fields: List[DataField] = \
            [f for f in self.data_fields if f.name.lower() not in partition_names]
        self.output_fields: List[DataField] = self.file_data_fields + self.partition_fields
        self.field_names = [f.name for f in self.output_fields]
        self.partition_keys = [f.name for f in self.partition_fields]

    @classmethod
    def from_pyarrow_schema(cls,
                            pa_schema: pa.Schema,
                            file_format: FileFormat,
                            file_index: FileIndex,
                            partition_keys: Optional[List[str]] = None,
                            bucket_spec: Optional[BucketSpec] = None,
                            options: Optional[Dict[str, str]] = None) -> 'FileRelation':
        fields = PyarrowFieldParser.to_scan_schema(pa_schema)
        partition_keys = partition_keys or []
        by_name = {f.name: f for f in fields}
        missing = [k for k in partition_keys if k not in by_name]
        if missing:
            raise ValueError(f"Partition keys {missing} are not in schema {[f.name for f in fields]}")
        data_fields = [f for f in fields if f.name not in partition_keys]
        partition_fields = [by_name[k] for k in partition_keys]
        return cls(data_fields, file_format, file_index, partition_fields, bucket_spec, options)

    def list_files(self, partition_filters: Sequence[Predicate]) -> List[PartitionDirectory]:
        return self.file_index.list_files(partition_filters)

    def new_scan_builder(self):
        from pyfilescan.read.scan_builder import ScanBuilder
        return ScanBuilder(self)

    def __repr__(self) -> str:
        return "FileRelation({}, format={}, partitions={})".format(
            self.field_names, self.file_format.short_name(), self.partition_keys)
