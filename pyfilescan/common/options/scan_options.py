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

from typing import Mapping, Optional

from pyfilescan.common.memory_size import MemorySize
from pyfilescan.common.options.config_option import ConfigOption
from pyfilescan.common.options.config_options import ConfigOptions
from pyfilescan.common.options.options import Options


class ScanOptions:
    """Session level options consulted while planning a file scan."""

    PARQUET_OPTIMIZED_ENABLED: ConfigOption[bool] = (
        ConfigOptions.key("scan.parquet.optimized.enabled")
        .boolean_type()
        .default_value(True)
        .with_description("Whether parquet relations may be read through the optimized "
                          "(cache or index backed) reader.")
    )

    PARQUET_DATA_CACHE_ENABLED: ConfigOption[bool] = (
        ConfigOptions.key("scan.parquet.data-cache.enabled")
        .boolean_type()
        .default_value(False)
        .with_description("Whether the data cache may serve parquet column chunks.")
    )

    ORC_OPTIMIZED_ENABLED: ConfigOption[bool] = (
        ConfigOptions.key("scan.orc.optimized.enabled")
        .boolean_type()
        .default_value(True)
        .with_description("Whether orc relations may be read through the index backed reader.")
    )

    VECTORIZED_READER_ENABLED: ConfigOption[bool] = (
        ConfigOptions.key("scan.vectorized-reader.enabled")
        .boolean_type()
        .default_value(True)
        .with_description("Whether columnar batches are decoded by the vectorized reader.")
    )

    WHOLE_STAGE_ENABLED: ConfigOption[bool] = (
        ConfigOptions.key("scan.whole-stage.enabled")
        .boolean_type()
        .default_value(True)
        .with_description("Whether the execution engine fuses operators into whole stages.")
    )

    ORC_FILTER_PUSHDOWN_ENABLED: ConfigOption[bool] = (
        ConfigOptions.key("orc.filter-pushdown.enabled")
        .boolean_type()
        .default_value(False)
        .with_description("Whether filters are pushed down into the orc reader.")
    )

    BUCKETING_ENABLED: ConfigOption[bool] = (
        ConfigOptions.key("scan.bucketing.enabled")
        .boolean_type()
        .default_value(True)
        .with_description("Whether bucketed relations are read as one task per bucket.")
    )

    SOURCE_SPLIT_MAX_BYTES: ConfigOption[MemorySize] = (
        ConfigOptions.key("source.split.max-bytes")
        .memory_type()
        .default_value(MemorySize.of_mebi_bytes(128))
        .with_description("The maximum number of bytes packed into a single read task.")
    )

    SOURCE_SPLIT_OPEN_FILE_COST: ConfigOption[MemorySize] = (
        ConfigOptions.key("source.split.open-file-cost")
        .memory_type()
        .default_value(MemorySize.of_mebi_bytes(4))
        .with_description("The estimated cost to open a file, measured in bytes.")
    )

    DEFAULT_PARALLELISM: ConfigOption[int] = (
        ConfigOptions.key("scan.default-parallelism")
        .int_type()
        .no_default_value()
        .with_description("The number of tasks the engine runs in parallel, used to shrink "
                          "the split size for small inputs.")
    )

    def __init__(self, options: Options):
        self.options = options

    @staticmethod
    def from_dict(options: Optional[Mapping[str, str]] = None) -> 'ScanOptions':
        return ScanOptions(Options(options))

    def parquet_optimized_enabled(self, default=None) -> bool:
        return self.options.get(ScanOptions.PARQUET_OPTIMIZED_ENABLED, default)

    def parquet_data_cache_enabled(self, default=None) -> bool:
        return self.options.get(ScanOptions.PARQUET_DATA_CACHE_ENABLED, default)

    def orc_optimized_enabled(self, default=None) -> bool:
        return self.options.get(ScanOptions.ORC_OPTIMIZED_ENABLED, default)

    def vectorized_reader_enabled(self, default=None) -> bool:
        return self.options.get(ScanOptions.VECTORIZED_READER_ENABLED, default)

    def whole_stage_enabled(self, default=None) -> bool:
        return self.options.get(ScanOptions.WHOLE_STAGE_ENABLED, default)

    def orc_filter_pushdown_enabled(self, default=None) -> bool:
        return self.options.get(ScanOptions.ORC_FILTER_PUSHDOWN_ENABLED, default)

    def bucketing_enabled(self, default=None) -> bool:
        return self.options.get(ScanOptions.BUCKETING_ENABLED, default)

    def source_split_max_bytes(self, default=None) -> int:
        return self.options.get(ScanOptions.SOURCE_SPLIT_MAX_BYTES, default).get_bytes()

    def source_split_open_file_cost(self, default=None) -> int:
        return self.options.get(ScanOptions.SOURCE_SPLIT_OPEN_FILE_COST, default).get_bytes()

    def default_parallelism(self, default=None) -> Optional[int]:
        return self.options.get(ScanOptions.DEFAULT_PARALLELISM, default)

    def __eq__(self, other) -> bool:
        return isinstance(other, ScanOptions) and self.options == other.options

    def __hash__(self) -> int:
        return hash(self.options)
