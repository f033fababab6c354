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

from typing import Any, Callable, Dict, Type

from pyfilescan.common.memory_size import MemorySize

_TRUE_VALUES = ('true', '1', 'yes', 'on')
_FALSE_VALUES = ('false', '0', 'no', 'off')


class OptionsUtils:
    """Conversion of raw option values into the types declared by ConfigOptions."""

    @staticmethod
    def convert_value(value: Any, target_type: Type) -> Any:
        """
        Convert a raw option value, usually a string, to the target type.

        Raises:
            ValueError: If the value cannot be converted
        """
        if value is None:
            return None
        converter = _CONVERTERS.get(target_type)
        if converter is None:
            raise ValueError(f"Unsupported type: {target_type}")
        return converter(value)

    @staticmethod
    def convert_to_string(value: Any) -> str:
        if isinstance(value, bool):
            return str(value).lower()
        return str(value)

    @staticmethod
    def convert_to_boolean(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        raise ValueError(f"Cannot convert '{value}' to boolean")

    @staticmethod
    def convert_to_int(value: Any) -> int:
        # bool is a subclass of int, a flag is never a count
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise ValueError(f"Cannot convert {type(value)} to int")
        return int(value.strip()) if isinstance(value, str) else value

    @staticmethod
    def convert_to_memory_size(value: Any) -> MemorySize:
        if isinstance(value, MemorySize):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return MemorySize.of_bytes(value)
        if isinstance(value, str):
            return MemorySize.parse(value)
        raise ValueError(f"Cannot convert {type(value)} to MemorySize")


_CONVERTERS: Dict[Type, Callable[[Any], Any]] = {
    str: OptionsUtils.convert_to_string,
    bool: OptionsUtils.convert_to_boolean,
    int: OptionsUtils.convert_to_int,
    MemorySize: OptionsUtils.convert_to_memory_size,
}
