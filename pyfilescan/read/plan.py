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
from typing import Dict, List, Optional, Union

import pandas
import pyarrow as pa

from pyfilescan.common.identifier import Identifier
from pyfilescan.common.predicate import Predicate
from pyfilescan.format.file_format import FileFormat
from pyfilescan.read.scan_task import ScanTask
from pyfilescan.schema.data_types import DataField, PyarrowFieldParser, simple_string


@dataclass
class ScanNode:
    """Reads the tasks' byte ranges with the selected format."""
    file_format: FileFormat
    options: Dict[str, str]
    output_fields: List[DataField]
    read_fields: List[DataField]
    partition_filters: List[Predicate]
    data_filters: List[Predicate]
    identifier: Optional[Identifier]
    tasks: List[ScanTask] = field(default_factory=list)

    @property
    def output(self) -> List[str]:
        return [f.name for f in self.output_fields]

    def explain_line(self) -> str:
        return "FileScan {} {}[{}] PartitionFilters: [{}], PushedFilters: [{}], ReadSchema: {}, Tasks: {}".format(
            self.file_format.short_name(),
            "{} ".format(self.identifier) if self.identifier else "",
            ",".join(self.output),
            ", ".join(str(p) for p in self.partition_filters),
            ", ".join(str(p) for p in self.data_filters),
            simple_string(self.read_fields),
            len(self.tasks))


@dataclass
class FilterNode:
    """Evaluates the residual condition on the rows produced by the child."""
    condition: Predicate
    child: 'PlanNode'

    @property
    def output_fields(self) -> List[DataField]:
        return self.child.output_fields

    @property
    def output(self) -> List[str]:
        return self.child.output

    def explain_line(self) -> str:
        return "Filter {}".format(self.condition)


@dataclass
class ProjectNode:
    """Emits the requested columns, in order, from the child's output."""
    projection: List[str]
    child: 'PlanNode'

    @property
    def output_fields(self) -> List[DataField]:
        by_name = {f.name: f for f in self.child.output_fields}
        return [by_name[name] for name in self.projection]

    @property
    def output(self) -> List[str]:
        return list(self.projection)

    def explain_line(self) -> str:
        return "Project [{}]".format(", ".join(self.projection))


PlanNode = Union[ScanNode, FilterNode, ProjectNode]


@dataclass
class PhysicalScanPlan:
    """Physical plan of one scan: a scan node, optionally wrapped by a filter and a projection."""
    root: PlanNode

    @property
    def scan(self) -> ScanNode:
        node = self.root
        while not isinstance(node, ScanNode):
            node = node.child
        return node

    @property
    def filter_node(self) -> Optional[FilterNode]:
        node = self.root
        while not isinstance(node, ScanNode):
            if isinstance(node, FilterNode):
                return node
            node = node.child
        return None

    @property
    def project_node(self) -> Optional[ProjectNode]:
        return self.root if isinstance(self.root, ProjectNode) else None

    @property
    def file_format(self) -> FileFormat:
        return self.scan.file_format

    @property
    def options(self) -> Dict[str, str]:
        return self.scan.options

    @property
    def output(self) -> List[str]:
        return self.root.output

    @property
    def read_fields(self) -> List[DataField]:
        return self.scan.read_fields

    @property
    def partition_filters(self) -> List[Predicate]:
        return self.scan.partition_filters

    @property
    def data_filters(self) -> List[Predicate]:
        return self.scan.data_filters

    @property
    def tasks(self) -> List[ScanTask]:
        return self.scan.tasks

    def read_schema(self) -> pa.Schema:
        return PyarrowFieldParser.from_scan_schema(self.scan.read_fields)

    def output_schema(self) -> pa.Schema:
        return PyarrowFieldParser.from_scan_schema(self.root.output_fields)

    def explain(self) -> str:
        lines = []
        node = self.root
        depth = 0
        while True:
            lines.append("{}{}".format("   " * depth + ("+- " if depth else ""), node.explain_line()))
            if isinstance(node, ScanNode):
                break
            node = node.child
            depth += 1
        return "\n".join(lines)

    def task_summary(self) -> pa.Table:
        """One row per chunk: task index, file path, byte offset and length."""
        rows = {'task': [], 'path': [], 'start': [], 'length': []}
        for task in self.tasks:
            for chunk in task.chunks:
                rows['task'].append(task.index)
                rows['path'].append(chunk.path)
                rows['start'].append(chunk.start)
                rows['length'].append(chunk.length)
        return pa.table({
            'task': pa.array(rows['task'], type=pa.int32()),
            'path': pa.array(rows['path'], type=pa.string()),
            'start': pa.array(rows['start'], type=pa.int64()),
            'length': pa.array(rows['length'], type=pa.int64()),
        })

    def task_summary_pandas(self) -> pandas.DataFrame:
        return self.task_summary().to_pandas()
