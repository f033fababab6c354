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
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from pyfilescan.common.planning_exception import ColumnNotResolvedException
from pyfilescan.common.predicate import Predicate
from pyfilescan.schema.data_types import DataField

logger = logging.getLogger(__name__)


class ColumnResolver:
    """
    Resolves column names case-insensitively against the output columns of a
    relation. An exact match wins, otherwise the lower-cased name must match
    exactly one column.
    """

    def __init__(self, fields: Sequence[DataField]):
        self.names = [f.name for f in fields]
        self._exact = set(self.names)
        self._by_lower: Dict[str, List[str]] = {}
        for name in self.names:
            self._by_lower.setdefault(name.lower(), []).append(name)

    def resolve(self, name: str) -> str:
        if name in self._exact:
            return name
        candidates = self._by_lower.get(name.lower(), [])
        if len(candidates) != 1:
            raise ColumnNotResolvedException(name, self.names)
        return candidates[0]


def split_and(predicate: Predicate) -> List[Predicate]:
    """Splits nested conjunctions into their conjuncts."""
    if predicate.method == 'and':
        result = []
        for child in predicate.literals:
            result.extend(split_and(child))
        return result
    return [predicate]


def _distinct(predicates: Sequence[Predicate]) -> List[Predicate]:
    result = []
    for p in predicates:
        if p not in result:
            result.append(p)
    return result


def normalize_filters(filters: Sequence[Predicate], output_fields: Sequence[DataField]) -> List[Predicate]:
    """Rewrites every column reference to the exact output column name."""
    resolver = ColumnResolver(output_fields)
    return [p.transform_fields(resolver.resolve) for p in filters]


@dataclass
class FilterClassification:
    partition_filters: List[Predicate] = field(default_factory=list)
    data_filters: List[Predicate] = field(default_factory=list)
    residual_filters: List[Predicate] = field(default_factory=list)


def classify(output_fields: Sequence[DataField],
             partition_fields: Sequence[DataField],
             filters: Sequence[Predicate]) -> FilterClassification:
    """
    Splits filters by where they can be evaluated:

    - partition filters reference partition columns only and contain no
      sub-query, they prune directories,
    - data filters reference no partition column, they are handed to the
      reader for statistics or index based skipping,
    - residual filters are evaluated again after the scan. Every filter is
      residual except partition filters that reference a column, since
      data skipping is only a hint. Constant filters stay residual.
    """
    normalized = _distinct(normalize_filters(filters, output_fields))
    partition_set = frozenset(f.name for f in partition_fields)

    partition_filters = [p for p in normalized
                         if not p.has_subquery() and p.references() <= partition_set]
    logger.info("Pruning directories with: %s", ",".join(str(p) for p in partition_filters))

    data_filters = [p for p in normalized if not (p.references() & partition_set)]

    pruning = [p for p in partition_filters if not p.is_constant()]
    residual_filters = [p for p in normalized if p not in pruning]
    logger.info("Post-Scan Filters: %s", ",".join(str(p) for p in residual_filters))

    return FilterClassification(partition_filters, data_filters, residual_filters)
