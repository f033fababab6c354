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

from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, FrozenSet, List, Mapping


class IndexType(str, Enum):
    BTREE = "btree"
    BITMAP = "bitmap"

    def supported_methods(self) -> FrozenSet[str]:
        if self == IndexType.BTREE:
            return frozenset(['equal', 'lessThan', 'lessOrEqual', 'greaterThan', 'greaterOrEqual',
                              'between', 'in'])
        return frozenset(['equal', 'in', 'isNull'])


class IndexProvider(ABC):
    """Read access to the metadata of secondary indexes built over data files."""

    @abstractmethod
    def available_indexes(self, file_paths: List[str]) -> Dict[str, IndexType]:
        """
        Returns column name -> index type for the indexes that cover every one
        of the given files. No index is an empty dict, not an error.
        """


class InMemoryIndexProvider(IndexProvider):
    """Index metadata kept in memory, keyed by file path."""

    def __init__(self, indexes: Mapping[str, Mapping[str, IndexType]]):
        self._indexes = {path: {column: IndexType(t) for column, t in columns.items()}
                         for path, columns in indexes.items()}

    def available_indexes(self, file_paths: List[str]) -> Dict[str, IndexType]:
        if not file_paths:
            return {}
        common = None
        for path in file_paths:
            columns = self._indexes.get(path)
            if not columns:
                return {}
            if common is None:
                common = dict(columns)
            else:
                common = {c: t for c, t in common.items() if columns.get(c) == t}
        return common or {}
