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
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import unquote

import pyarrow
import pyarrow.fs as pafs
from pyarrow import compute as pyarrow_compute

from pyfilescan.common.predicate import Predicate
from pyfilescan.read.file_entry import FileEntry, PartitionDirectory
from pyfilescan.schema.data_types import AtomicType, DataField, PyarrowFieldParser

logger = logging.getLogger(__name__)

DEFAULT_PARTITION_NAME = "__HIVE_DEFAULT_PARTITION__"


class FileIndex(ABC):
    """Lists the data files of a relation, pruning partition directories by partition filters."""

    def __init__(self, partition_fields: List[DataField]):
        self.partition_fields = list(partition_fields)
        self.partition_names = [f.name for f in self.partition_fields]

    @abstractmethod
    def directories(self) -> List[PartitionDirectory]:
        """All partition directories of the relation."""

    def all_files(self) -> List[FileEntry]:
        return [f for d in self.directories() for f in d.files]

    def list_files(self, partition_filters: Sequence[Predicate]) -> List[PartitionDirectory]:
        directories = self.directories()
        if not self.partition_fields or not partition_filters:
            return directories
        # Sub-query results are not known at planning time, such filters keep every directory.
        usable = [p for p in partition_filters if not p.has_subquery()]
        selected = [d for d in directories if self._matches(d, usable)]
        logger.debug("Selected %d of %d partition directories", len(selected), len(directories))
        return selected

    def _matches(self, directory: PartitionDirectory, filters: List[Predicate]) -> bool:
        row = dict(zip(self.partition_names, directory.values))
        return all(p.test(row) for p in filters)


class InMemoryFileIndex(FileIndex):
    """File index over a listing that is already known."""

    def __init__(self, partition_fields: List[DataField], directories: List[PartitionDirectory]):
        super().__init__(partition_fields)
        for directory in directories:
            if len(directory.values) != len(self.partition_fields):
                raise ValueError(
                    f"Partition values {directory.values} do not match partition columns {self.partition_names}")
        self._directories = list(directories)

    @classmethod
    def from_files(cls, partition_fields: List[DataField], files: List[FileEntry]) -> 'InMemoryFileIndex':
        """Groups files into directories by their partition values, keeping first-seen order."""
        grouped: Dict[tuple, PartitionDirectory] = {}
        for file in files:
            directory = grouped.get(file.partition_values)
            if directory is None:
                directory = grouped[file.partition_values] = PartitionDirectory(file.partition_values)
            directory.files.append(file)
        return cls(partition_fields, list(grouped.values()))

    def directories(self) -> List[PartitionDirectory]:
        return self._directories


def _is_data_file_name(name: str) -> bool:
    """Exclude hidden and metadata files."""
    return bool(name) and not name.startswith(".") and not name.startswith("_")


def cast_partition_value(raw: str, data_field: DataField) -> Any:
    """
    Converts an escaped directory value into a value of the partition column
    type, parsed by pyarrow the same way readers parse the column.
    """
    value = unquote(raw)
    if value == DEFAULT_PARTITION_NAME:
        return None
    data_type = data_field.type
    if not isinstance(data_type, AtomicType):
        raise ValueError(f"Partition column {data_field.name} must have an atomic type, got {data_type}")
    target_type = PyarrowFieldParser.from_scan_type(data_type)
    try:
        return pyarrow_compute.cast(pyarrow.array([value], pyarrow.string()), target_type)[0].as_py()
    except (pyarrow.ArrowInvalid, pyarrow.ArrowNotImplementedError) as e:
        raise ValueError(f"Cannot cast partition value '{value}' of column {data_field.name} "
                         f"to {data_type}") from e


class FileSystemFileIndex(FileIndex):
    """
    Lists a hive style directory tree (`key=value` directory per partition
    column, in partition column order) through a pyarrow filesystem. The
    listing happens on first use and is kept as a snapshot, `refresh` drops it
    so that the next planning call lists the tree again.
    """

    def __init__(self, filesystem: pafs.FileSystem, root: str, partition_fields: List[DataField]):
        super().__init__(partition_fields)
        self.filesystem = filesystem
        self.root = root.rstrip("/")
        self._directories: Optional[List[PartitionDirectory]] = None

    def directories(self) -> List[PartitionDirectory]:
        if self._directories is None:
            grouped: Dict[tuple, PartitionDirectory] = {}
            self._list_recursive(self.root, [], grouped)
            self._directories = list(grouped.values())
            logger.info("Listed %d files in %d partition directories under %s",
                        sum(len(d.files) for d in self._directories), len(self._directories), self.root)
        return self._directories

    def refresh(self) -> None:
        self._directories = None

    def _list_recursive(self, path: str, values: List[Any], grouped: Dict[tuple, PartitionDirectory]):
        infos = self.filesystem.get_file_info(pafs.FileSelector(path, allow_not_found=True))
        depth = len(values)
        for info in sorted(infos, key=lambda i: i.path):
            name = info.base_name
            if info.type == pafs.FileType.Directory:
                if depth >= len(self.partition_fields) or not _is_data_file_name(name) or "=" not in name:
                    logger.debug("Skipping directory %s", info.path)
                    continue
                key, raw_value = name.split("=", 1)
                data_field = self.partition_fields[depth]
                if unquote(key).lower() != data_field.name.lower():
                    logger.debug("Skipping directory %s, expected partition column %s", info.path, data_field.name)
                    continue
                value = cast_partition_value(raw_value, data_field)
                self._list_recursive(info.path, values + [value], grouped)
            elif info.type == pafs.FileType.File and _is_data_file_name(name):
                if depth != len(self.partition_fields):
                    logger.debug("Skipping file %s outside of a leaf partition directory", info.path)
                    continue
                partition_values = tuple(values)
                directory = grouped.get(partition_values)
                if directory is None:
                    directory = grouped[partition_values] = PartitionDirectory(partition_values)
                modification_time = int(info.mtime_ns // 1_000_000) if info.mtime_ns is not None else None
                directory.files.append(FileEntry(
                    path=info.path,
                    length=info.size or 0,
                    partition_values=partition_values,
                    modification_time=modification_time,
                ))
