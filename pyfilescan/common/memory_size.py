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

"""
MemorySize is a number of bytes parsed from option text. A pure number is
interpreted as bytes; otherwise one of the units b, k/kb, m/mb, g/gb, t/tb
(binary multiples) may follow the number.
"""

import re

_UNITS = {
    "": 1,
    "b": 1,
    "bytes": 1,
    "k": 1 << 10,
    "kb": 1 << 10,
    "kibibytes": 1 << 10,
    "m": 1 << 20,
    "mb": 1 << 20,
    "mebibytes": 1 << 20,
    "g": 1 << 30,
    "gb": 1 << 30,
    "gibibytes": 1 << 30,
    "t": 1 << 40,
    "tb": 1 << 40,
    "tebibytes": 1 << 40,
}


class MemorySize:
    """MemorySize is a representation of a number of bytes."""

    def __init__(self, bytes: int):
        if bytes < 0:
            raise ValueError("bytes must be >= 0")
        self.bytes = bytes

    @staticmethod
    def of_mebi_bytes(mebi_bytes: int) -> 'MemorySize':
        return MemorySize(mebi_bytes << 20)

    @staticmethod
    def of_bytes(bytes: int) -> 'MemorySize':
        return MemorySize(bytes)

    def get_bytes(self) -> int:
        return self.bytes

    def __eq__(self, other) -> bool:
        if not isinstance(other, MemorySize):
            return False
        return self.bytes == other.bytes

    def __hash__(self) -> int:
        return hash(self.bytes)

    def __repr__(self) -> str:
        return f"MemorySize({self.bytes})"

    @staticmethod
    def parse(text: str) -> 'MemorySize':
        """
        Parses the given string as a MemorySize.

        Raises:
            ValueError: If the expression cannot be parsed.
        """
        if text is None:
            raise ValueError("text cannot be None")

        trimmed = text.strip()
        if not trimmed:
            raise ValueError("argument is an empty- or whitespace-only string")

        match = re.match(r'^(\d+)\s*([a-zA-Z]*)$', trimmed)
        if not match:
            raise ValueError(f"cannot parse memory size: '{text}'")

        unit = match.group(2).lower()
        if unit not in _UNITS:
            raise ValueError(f"Memory size unit '{unit}' does not match any of the recognized units: "
                             f"{sorted(u for u in _UNITS if u)}")
        return MemorySize(int(match.group(1)) * _UNITS[unit])
