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
from dataclasses import dataclass
from typing import Dict, List, Sequence

from pyfilescan.common.options.scan_options import ScanOptions
from pyfilescan.common.predicate import Predicate
from pyfilescan.format.file_format import FileFormat, FormatKind
from pyfilescan.format.optimized_format import OptimizedFileFormat
from pyfilescan.format.orc_format import OptimizedOrcFileFormat
from pyfilescan.format.parquet_format import OptimizedParquetFileFormat
from pyfilescan.read.file_entry import FileEntry
from pyfilescan.schema.data_types import DataField

logger = logging.getLogger(__name__)


@dataclass
class FormatSelection:
    file_format: FileFormat
    options: Dict[str, str]


class FormatSelector:
    """
    Decides whether the optimized (cache or index backed) reader replaces the
    relation's reader for one scan. Eligibility is checked again on every
    planning call, against the filters and read schema of that scan.

    There are two scenarios that use the optimized parquet reader:
    1. cache: optimized parquet and the data cache are enabled, the
       vectorized reader and whole stage execution are on, and every read
       column has an atomic type.
    2. index: optimized parquet is enabled and an index can serve a data filter.
    Optimized orc is only used for the index scenario. The current reader is
    never replaced in read-only maintenance mode.
    """

    def __init__(self, context):
        self.context = context
        self.options: ScanOptions = context.options

    def select(self,
               current_format: FileFormat,
               options: Dict[str, str],
               candidate_files: List[FileEntry],
               data_filters: Sequence[Predicate],
               read_fields: Sequence[DataField]) -> FormatSelection:
        kind = current_format.kind
        unchanged = FormatSelection(current_format, options)

        if current_format.is_read_only_maintenance_mode() or \
                kind in (FormatKind.READ_ONLY_PARQUET, FormatKind.READ_ONLY_ORC):
            logger.info("index operation for %s, retain %s.", current_format.short_name(),
                        type(current_format).__name__)
            return unchanged

        if kind == FormatKind.PARQUET:
            if not self.options.parquet_optimized_enabled():
                return unchanged
            return self._select_parquet(current_format, options, candidate_files, data_filters, read_fields)

        if kind == FormatKind.ORC:
            if not self.options.orc_optimized_enabled():
                return unchanged
            return self._select_orc(current_format, options, candidate_files, data_filters)

        if kind in (FormatKind.OPTIMIZED_PARQUET, FormatKind.OPTIMIZED_ORC):
            current_format.initialize(self.context, options, candidate_files)
            return unchanged

        if kind == FormatKind.OTHER:
            return unchanged

        raise ValueError(f"Unsupported format kind: {kind}")

    def _select_parquet(self,
                        current_format: FileFormat,
                        options: Dict[str, str],
                        candidate_files: List[FileEntry],
                        data_filters: Sequence[Predicate],
                        read_fields: Sequence[DataField]) -> FormatSelection:
        optimized = OptimizedParquetFileFormat()
        optimized.initialize(self.context, options, candidate_files)

        if self._can_use_cache(read_fields):
            logger.info("data cache enable and suitable for use, "
                        "will replace with OptimizedParquetFileFormat.")
            return FormatSelection(optimized, options)
        if self._can_use_index(optimized, data_filters):
            return FormatSelection(optimized, options)

        logger.info("hasAvailableIndex = false and data cache disable, will retain ParquetFileFormat.")
        return FormatSelection(current_format, options)

    def _select_orc(self,
                    current_format: FileFormat,
                    options: Dict[str, str],
                    candidate_files: List[FileEntry],
                    data_filters: Sequence[Predicate]) -> FormatSelection:
        optimized = OptimizedOrcFileFormat()
        optimized.initialize(self.context, options, candidate_files)

        if self._can_use_index(optimized, data_filters):
            # Relation options take precedence over the session pushdown setting.
            orc_options = {ScanOptions.ORC_FILTER_PUSHDOWN_ENABLED.key():
                           str(self.options.orc_filter_pushdown_enabled()).lower()}
            orc_options.update(options)
            return FormatSelection(optimized, orc_options)

        logger.info("hasAvailableIndex = false, will retain OrcFileFormat.")
        return FormatSelection(current_format, options)

    def _can_use_cache(self, read_fields: Sequence[DataField]) -> bool:
        return (self.options.parquet_data_cache_enabled()
                and self.options.vectorized_reader_enabled()
                and self.options.whole_stage_enabled()
                and all(f.type.is_atomic() for f in read_fields))

    @staticmethod
    def _can_use_index(optimized: OptimizedFileFormat, data_filters: Sequence[Predicate]) -> bool:
        available = optimized.probe_index_available(data_filters)
        if available:
            logger.info("hasAvailableIndex = true, will replace with %s.", type(optimized).__name__)
        return available


def select(current_format: FileFormat,
           context,
           options: Dict[str, str],
           candidate_files: List[FileEntry],
           data_filters: Sequence[Predicate],
           read_fields: Sequence[DataField]) -> FormatSelection:
    return FormatSelector(context).select(current_format, options, candidate_files, data_filters, read_fields)
