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

from functools import reduce
from typing import Dict, List, Optional, Sequence

from pyfilescan.common.identifier import Identifier
from pyfilescan.common.predicate import Predicate
from pyfilescan.format.file_format import FileFormat
from pyfilescan.read.plan import FilterNode, PhysicalScanPlan, PlanNode, ProjectNode, ScanNode
from pyfilescan.read.scan_task import ScanTask
from pyfilescan.schema.data_types import DataField


def conjoin(predicates: Sequence[Predicate]) -> Optional[Predicate]:
    """Left fold with binary `and`: ((p1 AND p2) AND p3) ..."""
    if not predicates:
        return None
    return reduce(lambda left, right: Predicate(method='and', literals=[left, right]), predicates)


def assemble(file_format: FileFormat,
             options: Dict[str, str],
             output_fields: List[DataField],
             read_fields: List[DataField],
             partition_filters: List[Predicate],
             data_filters: List[Predicate],
             identifier: Optional[Identifier],
             tasks: List[ScanTask],
             residual_filters: Sequence[Predicate],
             projection: Sequence[str]) -> PhysicalScanPlan:
    scan = ScanNode(
        file_format=file_format,
        options=options,
        output_fields=list(output_fields),
        read_fields=list(read_fields),
        partition_filters=list(partition_filters),
        data_filters=list(data_filters),
        identifier=identifier,
        tasks=tasks,
    )

    node: PlanNode = scan
    condition = conjoin(residual_filters)
    if condition is not None:
        node = FilterNode(condition, node)
    if list(projection) != node.output:
        node = ProjectNode(list(projection), node)
    return PhysicalScanPlan(node)
