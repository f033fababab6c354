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

from typing import List, Optional

from pyfilescan.common.identifier import Identifier
from pyfilescan.common.predicate import Predicate
from pyfilescan.common.predicate_builder import PredicateBuilder
from pyfilescan.read.file_scan_planner import FileScanPlanner
from pyfilescan.read.plan import PhysicalScanPlan
from pyfilescan.read.scan_context import ScanContext
from pyfilescan.read.scan_request import ScanRequest
from pyfilescan.read.scanner.filter_classifier import split_and


class ScanBuilder:
    """Builds scan requests over a file relation."""

    def __init__(self, relation):
        from pyfilescan.table.file_relation import FileRelation

        self.relation: FileRelation = relation
        self._filters: List[Predicate] = []
        self._projection: Optional[List[str]] = None
        self._identifier: Optional[Identifier] = None

    def with_filter(self, predicate: Predicate) -> 'ScanBuilder':
        """Adds a filter, conjunctions are split so that each conjunct is classified on its own."""
        self._filters.extend(split_and(predicate))
        return self

    def with_filters(self, predicates: List[Predicate]) -> 'ScanBuilder':
        for predicate in predicates:
            self.with_filter(predicate)
        return self

    def with_projection(self, projection: List[str]) -> 'ScanBuilder':
        self._projection = list(projection)
        return self

    def with_identifier(self, identifier: Identifier) -> 'ScanBuilder':
        self._identifier = identifier
        return self

    def new_predicate_builder(self) -> PredicateBuilder:
        return PredicateBuilder(self.relation.output_fields)

    def new_request(self) -> ScanRequest:
        projection = self._projection if self._projection is not None else self.relation.field_names
        return ScanRequest(
            relation=self.relation,
            filters=self._filters,
            projection=projection,
            identifier=self._identifier)

    def plan(self, context: Optional[ScanContext] = None) -> PhysicalScanPlan:
        return FileScanPlanner(context).plan(self.new_request())
