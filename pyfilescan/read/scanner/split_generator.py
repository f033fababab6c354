"""
Licensed to the Apache Software Foundation (ASF) under one
or more contributor license agreements.  See the NOTICE file
distributed with this work for additional information
regarding copyright ownership.  The ASF licenses this file
to you under the Apache License, Version 2.0 (the
"License"); you may not use this file except in compliance
with the License.  You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""
import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

from pyfilescan.common.options import ConfigOption
from pyfilescan.common.options.scan_options import ScanOptions
from pyfilescan.common.planning_exception import InvalidBucketFileException, ScanConfigurationException
from pyfilescan.format.file_format import FileFormat
from pyfilescan.read.file_entry import FileEntry
from pyfilescan.read.scan_task import FileChunk, ScanTask
from pyfilescan.table.bucket_spec import BucketSpec

logger = logging.getLogger(__name__)


class AbstractSplitGenerator(ABC):
    """
    Abstract base class for packing selected files into read tasks.
    """

    @abstractmethod
    def create_tasks(self, files: List[FileEntry]) -> List[ScanTask]:
        """
        Create read tasks from the selected files.
        """
        pass

    @staticmethod
    def _pack_for_ordered(
            items: List,
            weight_func: Callable,
            target_weight: int
    ) -> List[List]:
        """Pack items, in order, into groups that stay within the target weight."""
        packed = []
        bin_items = []
        bin_weight = 0

        for item in items:
            weight = weight_func(item)
            if bin_weight + weight > target_weight and len(bin_items) > 0:
                packed.append(list(bin_items))
                bin_items.clear()
                bin_weight = 0

            bin_weight += weight
            bin_items.append(item)

        if len(bin_items) > 0:
            packed.append(bin_items)

        return packed


class BucketedSplitGenerator(AbstractSplitGenerator):
    """
    One task per bucket id. Files keep their listing order and are never split.
    """

    def __init__(self, bucket_spec: BucketSpec):
        self.bucket_spec = bucket_spec

    def create_tasks(self, files: List[FileEntry]) -> List[ScanTask]:
        num_buckets = self.bucket_spec.num_buckets
        files_by_bucket: Dict[int, List[FileEntry]] = {}
        for file in files:
            bucket_id = self.bucket_spec.bucket_id(file)
            if bucket_id is None or not 0 <= bucket_id < num_buckets:
                raise InvalidBucketFileException(file.path, bucket_id, num_buckets)
            files_by_bucket.setdefault(bucket_id, []).append(file)

        return [
            ScanTask(bucket_id, [FileChunk(f, 0, f.length) for f in files_by_bucket.get(bucket_id, [])])
            for bucket_id in range(num_buckets)
        ]


class SizeBasedSplitGenerator(AbstractSplitGenerator):
    """
    Files are assigned to tasks using the following algorithm:
     - any splittable file larger than max_split_bytes is cut into pieces of
       max_split_bytes plus a remainder piece,
     - pieces are sorted by decreasing length, then by path and offset,
     - pieces are added to the current task while it stays within
       max_split_bytes, otherwise a new task is opened with the piece.
    """

    def __init__(self, max_split_bytes: int, file_format: Optional[FileFormat] = None):
        if max_split_bytes <= 0:
            raise ValueError(f"max_split_bytes must be positive, but got {max_split_bytes}")
        self.max_split_bytes = max_split_bytes
        self.file_format = file_format

    def create_tasks(self, files: List[FileEntry]) -> List[ScanTask]:
        chunks: List[FileChunk] = []
        for file in files:
            chunks.extend(self._split_file(file))
        chunks.sort(key=lambda c: (-c.length, c.path, c.start))

        packed: List[List[FileChunk]] = self._pack_for_ordered(
            chunks, lambda c: c.length, self.max_split_bytes
        )
        return [ScanTask(i, group) for i, group in enumerate(packed)]

    def _split_file(self, file: FileEntry) -> List[FileChunk]:
        splittable = self.file_format is None or self.file_format.is_splittable(file)
        # Empty files keep one empty chunk so that every selected file is part of a task.
        if not splittable or file.length <= self.max_split_bytes:
            return [FileChunk(file, 0, file.length)]
        return [
            FileChunk(file, offset, min(self.max_split_bytes, file.length - offset))
            for offset in range(0, file.length, self.max_split_bytes)
        ]


def _require_positive(options: ScanOptions, option: ConfigOption, value: int) -> None:
    if value <= 0:
        raw = options.options.to_map().get(option.key(), value)
        raise ScanConfigurationException(option.key(), raw, ValueError(f"must be positive, but got {value}"))


def compute_max_split_bytes(options: ScanOptions, files: List[FileEntry]) -> int:
    """
    Shrinks the split size for small inputs so that every parallel slot gets
    work: min(max bytes, max(open file cost, total bytes / parallelism)), each
    file counting its length plus the open file cost.

    Raises:
        ScanConfigurationException: if the max split bytes or the parallelism is not positive
    """
    max_bytes = options.source_split_max_bytes()
    _require_positive(options, ScanOptions.SOURCE_SPLIT_MAX_BYTES, max_bytes)
    parallelism = options.default_parallelism()
    if parallelism is None:
        return max_bytes
    _require_positive(options, ScanOptions.DEFAULT_PARALLELISM, parallelism)
    open_cost = options.source_split_open_file_cost()
    total_bytes = sum(f.length + open_cost for f in files)
    bytes_per_core = total_bytes // parallelism
    return max(1, min(max_bytes, max(open_cost, bytes_per_core)))


def pack(files: List[FileEntry],
         bucket_spec: Optional[BucketSpec],
         max_split_bytes: int,
         file_format: Optional[FileFormat] = None) -> List[ScanTask]:
    if bucket_spec is not None:
        generator = BucketedSplitGenerator(bucket_spec)
    else:
        generator = SizeBasedSplitGenerator(max_split_bytes, file_format)
    tasks = generator.create_tasks(files)
    logger.info("Packed %d files into %d tasks", len(files), len(tasks))
    return tasks
