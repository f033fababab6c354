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

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple


@dataclass(frozen=True)
class FileEntry:
    """A data file selected for reading, with the partition values of its directory."""
    path: str
    length: int
    partition_values: Tuple[Any, ...] = ()
    modification_time: Optional[int] = None

    def __post_init__(self):
        if self.length < 0:
            raise ValueError(f"File {self.path} has negative length {self.length}")
        if not isinstance(self.partition_values, tuple):
            object.__setattr__(self, 'partition_values', tuple(self.partition_values))

    @property
    def file_name(self) -> str:
        return self.path.rstrip('/').split('/')[-1]


@dataclass
class PartitionDirectory:
    """All files of one partition directory. Unpartitioned relations have a single directory with no values."""
    values: Tuple[Any, ...]
    files: List[FileEntry] = field(default_factory=list)

    @property
    def total_size(self) -> int:
        return sum(f.length for f in self.files)
