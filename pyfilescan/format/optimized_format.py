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

import logging
from typing import Dict, List, Optional, Sequence

from pyfilescan.common.options import ConfigOption, ConfigOptions, Options
from pyfilescan.common.predicate import Predicate
from pyfilescan.format.file_format import FileFormat
from pyfilescan.format.index_provider import IndexType
from pyfilescan.read.file_entry import FileEntry

logger = logging.getLogger(__name__)


class OptimizedFileFormat(FileFormat):
    """
    Reader that can serve a scan from the data cache or skip data through
    secondary indexes. `initialize` loads the index metadata of the files to
    read, `probe_index_available` decides whether any filter can use it.
    """

    INDEX_ENABLED: ConfigOption[bool] = (
        ConfigOptions.key("index.enabled")
        .boolean_type()
        .default_value(True)
        .with_description("Whether secondary indexes of this relation may be used for reading.")
    )

    def __init__(self):
        self.files: List[FileEntry] = []
        self.options: Dict[str, str] = {}
        self.index_enabled = True
        self._indexes: Dict[str, IndexType] = {}
        self._initialized = False

    def initialize(self, context, options: Dict[str, str], files: List[FileEntry]) -> None:
        # Malformed option values raise ScanConfigurationException.
        self.index_enabled = Options(options).get(OptimizedFileFormat.INDEX_ENABLED)
        self.options = dict(options)
        self.files = list(files)
        self._indexes = {}
        provider = getattr(context, 'index_provider', None)
        if self.index_enabled and provider is not None and self.files:
            self._indexes = dict(provider.available_indexes([f.path for f in self.files]))
        self._initialized = True
        logger.debug("%s initialized with %d files, indexed columns: %s",
                     type(self).__name__, len(self.files), sorted(self._indexes))

    @property
    def indexed_columns(self) -> Dict[str, IndexType]:
        return dict(self._indexes)

    def probe_index_available(self, data_filters: Sequence[Predicate]) -> bool:
        if not self._initialized or not self._indexes:
            return False
        return any(self._is_index_applicable(p) for p in data_filters)

    def _is_index_applicable(self, predicate: Predicate) -> bool:
        if predicate.method == 'and':
            return any(self._is_index_applicable(p) for p in predicate.literals)
        if predicate.method == 'or':
            return all(self._is_index_applicable(p) for p in predicate.literals)
        index_type: Optional[IndexType] = self._indexes.get(predicate.field) if predicate.field else None
        return index_type is not None and predicate.method in index_type.supported_methods()

    def __repr__(self) -> str:
        return "{}(files={})".format(type(self).__name__, len(self.files))
