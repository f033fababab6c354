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

from abc import ABC
from enum import Enum
from typing import Dict, List, Sequence

from pyfilescan.common.predicate import Predicate
from pyfilescan.read.file_entry import FileEntry


class FormatKind(str, Enum):
    """
    The closed set of reader capabilities a relation can carry. Format
    selection matches on this exhaustively, a new kind needs its own case.
    """
    PARQUET = "parquet"
    ORC = "orc"
    READ_ONLY_PARQUET = "read-only-parquet"
    READ_ONLY_ORC = "read-only-orc"
    OPTIMIZED_PARQUET = "optimized-parquet"
    OPTIMIZED_ORC = "optimized-orc"
    OTHER = "other"


class FileFormat(ABC):
    """
    Reader capability of a relation: which format family its files belong to
    and whether an index or cache can serve reads.

    `context` arguments are `pyfilescan.read.scan_context.ScanContext`.
    """

    kind: FormatKind = FormatKind.OTHER

    def short_name(self) -> str:
        return self.kind.value

    def is_splittable(self, file: FileEntry) -> bool:
        """Whether byte ranges of the file can be read independently."""
        return True

    def initialize(self, context, options: Dict[str, str], files: List[FileEntry]) -> None:
        """Prepares the format for reading the given files. Plain formats need no preparation."""

    def probe_index_available(self, data_filters: Sequence[Predicate]) -> bool:
        return False

    def is_read_only_maintenance_mode(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "{}()".format(type(self).__name__)


class GenericFileFormat(FileFormat):
    """Any format without an optimized reader, e.g. csv or json."""

    kind = FormatKind.OTHER

    def __init__(self, name: str, splittable: bool = True):
        self.name = name
        self.splittable = splittable

    def short_name(self) -> str:
        return self.name

    def is_splittable(self, file: FileEntry) -> bool:
        return self.splittable

    def __repr__(self) -> str:
        return "GenericFileFormat({})".format(self.name)
