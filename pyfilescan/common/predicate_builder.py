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

from typing import Any, List, Optional

from pyfilescan.common.predicate import Predicate
from pyfilescan.schema.data_types import DataField


class PredicateBuilder:
    """Builds predicates over the columns of a relation."""

    def __init__(self, row_field: List[DataField]):
        self.field_names = [field.name for field in row_field]
        self._lower_names = {name.lower() for name in self.field_names}

    def _check_field(self, field: str):
        # Names are matched case-insensitively, exact resolution happens at planning time.
        if field.lower() not in self._lower_names:
            raise ValueError(f'The field {field} is not in field list {self.field_names}.')

    def _build_predicate(self, method: str, field: str, literals: Optional[List[Any]] = None) -> Predicate:
        self._check_field(field)
        return Predicate(method=method, field=field, literals=literals)

    def equal(self, field: str, literal: Any) -> Predicate:
        return self._build_predicate('equal', field, [literal])

    def not_equal(self, field: str, literal: Any) -> Predicate:
        return self._build_predicate('notEqual', field, [literal])

    def less_than(self, field: str, literal: Any) -> Predicate:
        return self._build_predicate('lessThan', field, [literal])

    def less_or_equal(self, field: str, literal: Any) -> Predicate:
        return self._build_predicate('lessOrEqual', field, [literal])

    def greater_than(self, field: str, literal: Any) -> Predicate:
        return self._build_predicate('greaterThan', field, [literal])

    def greater_or_equal(self, field: str, literal: Any) -> Predicate:
        return self._build_predicate('greaterOrEqual', field, [literal])

    def is_null(self, field: str) -> Predicate:
        return self._build_predicate('isNull', field)

    def is_not_null(self, field: str) -> Predicate:
        return self._build_predicate('isNotNull', field)

    def startswith(self, field: str, pattern_literal: Any) -> Predicate:
        return self._build_predicate('startsWith', field, [pattern_literal])

    def endswith(self, field: str, pattern_literal: Any) -> Predicate:
        return self._build_predicate('endsWith', field, [pattern_literal])

    def contains(self, field: str, pattern_literal: Any) -> Predicate:
        return self._build_predicate('contains', field, [pattern_literal])

    def is_in(self, field: str, literals: List[Any]) -> Predicate:
        return self._build_predicate('in', field, literals)

    def is_not_in(self, field: str, literals: List[Any]) -> Predicate:
        return self._build_predicate('notIn', field, literals)

    def between(self, field: str, included_lower_bound: Any, included_upper_bound: Any) -> Predicate:
        return self._build_predicate('between', field, [included_lower_bound, included_upper_bound])

    def in_subquery(self, field: str, subquery: Any) -> Predicate:
        """Create a predicate whose values come from a sub-query, `subquery` is an opaque handle."""
        return self._build_predicate('inSubquery', field, [subquery])

    @staticmethod
    def always_true() -> Predicate:
        return Predicate(method='alwaysTrue')

    @staticmethod
    def always_false() -> Predicate:
        return Predicate(method='alwaysFalse')

    @staticmethod
    def not_predicate(predicate: Predicate) -> Predicate:
        return Predicate(method='not', literals=[predicate])

    @staticmethod
    def and_predicates(predicates: List[Predicate]) -> Optional[Predicate]:
        """Create an AND predicate from multiple predicates."""
        if len(predicates) == 0:
            return None
        if len(predicates) == 1:
            return predicates[0]
        return Predicate(method='and', literals=predicates)

    @staticmethod
    def or_predicates(predicates: List[Predicate]) -> Optional[Predicate]:
        """Create an OR predicate from multiple predicates."""
        if len(predicates) == 0:
            return None
        if len(predicates) == 1:
            return predicates[0]
        return Predicate(method='or', literals=predicates)
