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
from typing import List

from pyfilescan.read.file_entry import FileEntry


@dataclass(frozen=True)
class FileChunk:
    """A byte range [start, start + length) of one file."""
    file: FileEntry
    start: int
    length: int

    @property
    def path(self) -> str:
        return self.file.path

    @property
    def end(self) -> int:
        return self.start + self.length

    def is_whole_file(self) -> bool:
        return self.start == 0 and self.length == self.file.length


@dataclass
class ScanTask:
    """The chunks one parallel reader processes, in reading order."""
    index: int
    chunks: List[FileChunk] = field(default_factory=list)

    @property
    def size(self) -> int:
        return sum(c.length for c in self.chunks)

    @property
    def file_paths(self) -> List[str]:
        return [c.path for c in self.chunks]

    def is_empty(self) -> bool:
        return not self.chunks
