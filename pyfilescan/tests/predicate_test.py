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

import unittest

import pyarrow as pa
import pyarrow.dataset as ds
from parameterized import parameterized

from pyfilescan.common.predicate import Predicate
from pyfilescan.common.predicate_builder import PredicateBuilder
from pyfilescan.schema.data_types import AtomicType, DataField


class PredicateTest(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.fields = [
            DataField(0, 'id', AtomicType('BIGINT')),
            DataField(1, 'name', AtomicType('STRING')),
            DataField(2, 'dt', AtomicType('STRING')),
        ]
        cls.builder = PredicateBuilder(cls.fields)

    def test_references(self):
        pb = self.builder
        self.assertEqual(pb.equal('id', 1).references(), frozenset(['id']))
        self.assertEqual(pb.always_true().references(), frozenset())
        compound = pb.or_predicates([pb.equal('id', 1), pb.is_null('dt')])
        self.assertEqual(compound.references(), frozenset(['id', 'dt']))
        self.assertEqual(pb.not_predicate(compound).references(), frozenset(['id', 'dt']))

    def test_is_constant(self):
        pb = self.builder
        self.assertTrue(pb.always_true().is_constant())
        self.assertTrue(pb.not_predicate(pb.always_false()).is_constant())
        self.assertFalse(pb.is_null('dt').is_constant())

    def test_subquery_detection(self):
        pb = self.builder
        subquery = pb.in_subquery('dt', 'q1')
        self.assertTrue(subquery.has_subquery())
        self.assertTrue(pb.and_predicates([pb.equal('id', 1), subquery]).has_subquery())
        self.assertFalse(pb.equal('id', 1).has_subquery())

    def test_unknown_field(self):
        with self.assertRaises(ValueError):
            self.builder.equal('missing', 1)

    def test_field_check_ignores_case(self):
        predicate = self.builder.equal('ID', 1)
        self.assertEqual(predicate.field, 'ID')

    def test_transform_fields(self):
        pb = self.builder
        predicate = pb.and_predicates([pb.equal('ID', 1), pb.is_not_null('Name')])
        renamed = predicate.transform_fields(str.lower)
        self.assertEqual(renamed, pb.and_predicates([pb.equal('id', 1), pb.is_not_null('name')]))

    def test_literals_are_tuples(self):
        predicate = self.builder.is_in('id', [1, 2])
        self.assertEqual(predicate.literals, (1, 2))
        self.assertEqual(predicate, self.builder.is_in('id', (1, 2)))
        self.assertEqual(hash(predicate), hash(self.builder.is_in('id', (1, 2))))

    @parameterized.expand([
        ('equal', lambda pb: pb.equal('id', 1), {'id': 1}, True),
        ('equal_miss', lambda pb: pb.equal('id', 1), {'id': 2}, False),
        ('not_equal', lambda pb: pb.not_equal('id', 1), {'id': 2}, True),
        ('less_than', lambda pb: pb.less_than('id', 5), {'id': 4}, True),
        ('less_or_equal', lambda pb: pb.less_or_equal('id', 5), {'id': 5}, True),
        ('greater_than', lambda pb: pb.greater_than('id', 5), {'id': 5}, False),
        ('greater_or_equal', lambda pb: pb.greater_or_equal('id', 5), {'id': 5}, True),
        ('is_in', lambda pb: pb.is_in('id', [1, 3]), {'id': 3}, True),
        ('is_not_in', lambda pb: pb.is_not_in('id', [1, 3]), {'id': 3}, False),
        ('between', lambda pb: pb.between('id', 1, 3), {'id': 2}, True),
        ('startswith', lambda pb: pb.startswith('name', 'ab'), {'name': 'abc'}, True),
        ('endswith', lambda pb: pb.endswith('name', 'bc'), {'name': 'abc'}, True),
        ('contains', lambda pb: pb.contains('name', 'x'), {'name': 'abc'}, False),
        ('is_null', lambda pb: pb.is_null('dt'), {'dt': None}, True),
        ('is_not_null', lambda pb: pb.is_not_null('dt'), {'dt': None}, False),
        ('null_compare', lambda pb: pb.equal('dt', 'a'), {'dt': None}, False),
        ('not_of_null', lambda pb: pb.not_predicate(pb.equal('dt', 'a')), {'dt': None}, False),
        ('always_true', lambda pb: pb.always_true(), {}, True),
        ('always_false', lambda pb: pb.always_false(), {}, False),
    ])
    def test_row_evaluation(self, _, build, row, expected):
        self.assertEqual(build(self.builder).test(row), expected)

    def test_or_with_unknown(self):
        pb = self.builder
        predicate = pb.or_predicates([pb.equal('dt', 'a'), pb.equal('id', 1)])
        self.assertTrue(predicate.test({'dt': None, 'id': 1}))
        self.assertFalse(predicate.test({'dt': None, 'id': 2}))

    def test_to_arrow(self):
        pb = self.builder
        table = pa.table({'id': [1, 2, 3, 4], 'name': ['a', 'b', 'c', None], 'dt': ['x', 'x', 'y', 'y']})
        predicate = pb.and_predicates([pb.greater_than('id', 1), pb.equal('dt', 'y')])
        filtered = ds.dataset(table).to_table(filter=predicate.to_arrow())
        self.assertEqual(filtered.column('id').to_pylist(), [3, 4])

    def test_str(self):
        pb = self.builder
        self.assertEqual(str(pb.equal('id', 1)), "id = 1")
        self.assertEqual(str(pb.is_null('dt')), "dt IS NULL")
        self.assertEqual(str(pb.and_predicates([pb.equal('id', 1), pb.is_null('dt')])),
                         "(id = 1 AND dt IS NULL)")
        self.assertEqual(str(pb.is_in('id', [1, 2])), "id IN [1, 2]")


if __name__ == '__main__':
    unittest.main()
