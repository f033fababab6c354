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

from abc import ABC, ABCMeta, abstractmethod
from dataclasses import dataclass, field as dataclass_field
from functools import reduce
from typing import Any, Callable, ClassVar, Dict, FrozenSet, Mapping, Optional, Tuple

from pyarrow import compute as pyarrow_compute
from pyarrow import dataset as pyarrow_dataset

# Exact, already normalized column names.
ColumnSet = FrozenSet[str]

COMPOUND_METHODS = ('and', 'or', 'not')
CONSTANT_METHODS = ('alwaysTrue', 'alwaysFalse')
SUBQUERY_METHODS = ('inSubquery',)


@dataclass(frozen=True)
class Predicate:
    """
    Immutable predicate tree node.

    Leaves test a single column (`field`) against `literals`. The compound
    methods `and`, `or` and `not` keep their child predicates in `literals`.
    Constants reference no column. `inSubquery` is a leaf whose value list is
    produced by a sub-query, `literals` holds an opaque handle for it.
    """
    method: str
    field: Optional[str] = None
    literals: Optional[Tuple[Any, ...]] = None

    _references: ColumnSet = dataclass_field(init=False, repr=False, compare=False, hash=False)

    testers: ClassVar[Dict[str, Any]] = {}

    def __post_init__(self):
        if self.literals is not None and not isinstance(self.literals, tuple):
            object.__setattr__(self, 'literals', tuple(self.literals))
        if self.method in COMPOUND_METHODS:
            refs = frozenset().union(*(p.references() for p in self.literals or ()))
        elif self.field is not None:
            refs = frozenset([self.field])
        else:
            refs = frozenset()
        object.__setattr__(self, '_references', refs)

    def references(self) -> ColumnSet:
        return self._references

    def has_subquery(self) -> bool:
        if self.method in SUBQUERY_METHODS:
            return True
        if self.method in COMPOUND_METHODS:
            return any(p.has_subquery() for p in self.literals)
        return False

    def is_constant(self) -> bool:
        return not self._references

    def new_field(self, field_name: str) -> 'Predicate':
        return Predicate(method=self.method, field=field_name, literals=self.literals)

    def new_literals(self, literals) -> 'Predicate':
        return Predicate(method=self.method, field=self.field, literals=literals)

    def transform_fields(self, func: Callable[[str], str]) -> 'Predicate':
        """Returns a copy of this tree with every column reference renamed by func."""
        if self.method in COMPOUND_METHODS:
            return self.new_literals([p.transform_fields(func) for p in self.literals])
        if self.field is None:
            return self
        new_name = func(self.field)
        if new_name == self.field:
            return self
        return self.new_field(new_name)

    def test(self, row: Mapping[str, Any]) -> bool:
        """Whether the row satisfies this predicate. Unknown (null) results count as not satisfied."""
        return self._evaluate(row) is True

    def _evaluate(self, row: Mapping[str, Any]) -> Optional[bool]:
        if self.method == 'and':
            results = [p._evaluate(row) for p in self.literals]
            if any(r is False for r in results):
                return False
            return None if any(r is None for r in results) else True
        if self.method == 'or':
            results = [p._evaluate(row) for p in self.literals]
            if any(r is True for r in results):
                return True
            return None if any(r is None for r in results) else False
        if self.method == 'not':
            result = self.literals[0]._evaluate(row)
            return None if result is None else not result
        if self.method == 'alwaysTrue':
            return True
        if self.method == 'alwaysFalse':
            return False

        tester = Predicate.testers.get(self.method)
        if tester is None:
            raise ValueError(f"Unsupported predicate method: {self.method}")
        field_value = row[self.field]
        if field_value is None and not tester.null_aware:
            return None
        return tester.test_by_value(field_value, self.literals)

    def to_arrow(self) -> Any:
        if self.method == 'and':
            return reduce(lambda x, y: x & y,
                          [p.to_arrow() for p in self.literals])
        if self.method == 'or':
            return reduce(lambda x, y: x | y,
                          [p.to_arrow() for p in self.literals])
        if self.method == 'not':
            return ~self.literals[0].to_arrow()
        if self.method == 'alwaysTrue':
            return pyarrow_dataset.scalar(True)
        if self.method == 'alwaysFalse':
            return pyarrow_dataset.scalar(False)

        tester = Predicate.testers.get(self.method)
        if tester:
            return tester.test_by_arrow(pyarrow_dataset.field(self.field), self.literals)

        raise ValueError("Unsupported predicate method: {}".format(self.method))

    def __str__(self) -> str:
        if self.method in ('and', 'or'):
            return "(" + " {} ".format(self.method.upper()).join(str(p) for p in self.literals) + ")"
        if self.method == 'not':
            return "NOT {}".format(self.literals[0])
        if self.method in CONSTANT_METHODS:
            return 'true' if self.method == 'alwaysTrue' else 'false'
        if self.method in SUBQUERY_METHODS:
            return "{} IN (subquery {})".format(self.field, self.literals[0] if self.literals else '?')
        tester = Predicate.testers.get(self.method)
        symbol = tester.symbol if tester else self.method
        if not self.literals:
            return "{} {}".format(self.field, symbol)
        if len(self.literals) == 1 and self.method not in ('in', 'notIn'):
            return "{} {} {!r}".format(self.field, symbol, self.literals[0])
        return "{} {} {!r}".format(self.field, symbol, list(self.literals))


class RegisterMeta(ABCMeta):
    def __init__(cls, name, bases, dct):
        super().__init__(name, bases, dct)
        if not bool(cls.__abstractmethods__):
            Predicate.testers[cls.name] = cls()


class Tester(ABC, metaclass=RegisterMeta):

    name = None
    symbol = None
    # Whether the tester decides null values itself instead of yielding unknown.
    null_aware = False

    @abstractmethod
    def test_by_value(self, val, literals) -> bool:
        """
        Test based on the specific val and literals.
        """

    @abstractmethod
    def test_by_arrow(self, val, literals) -> Any:
        """
        Build the pyarrow expression for the field expression val and literals.
        """


class Equal(Tester):

    name = 'equal'
    symbol = '='

    def test_by_value(self, val, literals) -> bool:
        return val == literals[0]

    def test_by_arrow(self, val, literals):
        return val == literals[0]


class NotEqual(Tester):

    name = "notEqual"
    symbol = '!='

    def test_by_value(self, val, literals) -> bool:
        return val != literals[0]

    def test_by_arrow(self, val, literals):
        return val != literals[0]


class LessThan(Tester):

    name = "lessThan"
    symbol = '<'

    def test_by_value(self, val, literals) -> bool:
        return val < literals[0]

    def test_by_arrow(self, val, literals):
        return val < literals[0]


class LessOrEqual(Tester):

    name = "lessOrEqual"
    symbol = '<='

    def test_by_value(self, val, literals) -> bool:
        return val <= literals[0]

    def test_by_arrow(self, val, literals):
        return val <= literals[0]


class GreaterThan(Tester):

    name = "greaterThan"
    symbol = '>'

    def test_by_value(self, val, literals) -> bool:
        return val > literals[0]

    def test_by_arrow(self, val, literals):
        return val > literals[0]


class GreaterOrEqual(Tester):

    name = "greaterOrEqual"
    symbol = '>='

    def test_by_value(self, val, literals) -> bool:
        return val >= literals[0]

    def test_by_arrow(self, val, literals):
        return val >= literals[0]


class In(Tester):

    name = "in"
    symbol = 'IN'

    def test_by_value(self, val, literals) -> bool:
        return val in literals

    def test_by_arrow(self, val, literals):
        return val.isin(list(literals))


class NotIn(Tester):

    name = "notIn"
    symbol = 'NOT IN'

    def test_by_value(self, val, literals) -> bool:
        return val not in literals

    def test_by_arrow(self, val, literals):
        return ~val.isin(list(literals))


class Between(Tester):

    name = "between"
    symbol = 'BETWEEN'

    def test_by_value(self, val, literals) -> bool:
        return literals[0] <= val <= literals[1]

    def test_by_arrow(self, val, literals):
        return (val >= literals[0]) & (val <= literals[1])


class StartsWith(Tester):

    name = "startsWith"
    symbol = 'STARTS WITH'

    def test_by_value(self, val, literals) -> bool:
        return isinstance(val, str) and val.startswith(literals[0])

    def test_by_arrow(self, val, literals):
        return pyarrow_compute.starts_with(val, literals[0])


class EndsWith(Tester):

    name = "endsWith"
    symbol = 'ENDS WITH'

    def test_by_value(self, val, literals) -> bool:
        return isinstance(val, str) and val.endswith(literals[0])

    def test_by_arrow(self, val, literals):
        return pyarrow_compute.ends_with(val, literals[0])


class Contains(Tester):

    name = "contains"
    symbol = 'CONTAINS'

    def test_by_value(self, val, literals) -> bool:
        return isinstance(val, str) and literals[0] in val

    def test_by_arrow(self, val, literals):
        return pyarrow_compute.match_substring(val, literals[0])


class IsNull(Tester):

    name = "isNull"
    symbol = 'IS NULL'
    null_aware = True

    def test_by_value(self, val, literals) -> bool:
        return val is None

    def test_by_arrow(self, val, literals):
        return val.is_null()


class IsNotNull(Tester):

    name = "isNotNull"
    symbol = 'IS NOT NULL'
    null_aware = True

    def test_by_value(self, val, literals) -> bool:
        return val is not None

    def test_by_arrow(self, val, literals):
        return val.is_valid()
