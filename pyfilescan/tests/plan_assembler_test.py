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

from pyfilescan.common.identifier import Identifier
from pyfilescan.common.predicate import Predicate
from pyfilescan.common.predicate_builder import PredicateBuilder
from pyfilescan.format import ParquetFileFormat
from pyfilescan.read.file_entry import FileEntry
from pyfilescan.read.plan import FilterNode, ProjectNode, ScanNode
from pyfilescan.read.scan_task import FileChunk, ScanTask
from pyfilescan.read.scanner.plan_assembler import assemble, conjoin
from pyfilescan.schema.data_types import AtomicType, DataField


class PlanAssemblerTest(unittest.TestCase):

    def setUp(self):
        self.read_fields = [
            DataField(0, 'id', AtomicType('BIGINT')),
            DataField(1, 'name', AtomicType('STRING')),
        ]
        self.partition_fields = [DataField(2, 'dt', AtomicType('STRING'))]
        self.output_fields = self.read_fields + self.partition_fields
        self.pb = PredicateBuilder(self.output_fields)
        file = FileEntry('/t/dt=1/f.parquet', 10, ('1',))
        self.tasks = [ScanTask(0, [FileChunk(file, 0, 10)])]

    def _assemble(self, residual_filters, projection):
        return assemble(ParquetFileFormat(), {}, self.output_fields, self.read_fields,
                        [self.pb.equal('dt', '1')], [self.pb.greater_than('id', 1)],
                        Identifier.create('db', 't'), self.tasks, residual_filters, projection)

    def test_conjoin_left_fold(self):
        p1, p2, p3 = self.pb.equal('id', 1), self.pb.equal('name', 'a'), self.pb.is_null('dt')
        self.assertIsNone(conjoin([]))
        self.assertEqual(conjoin([p1]), p1)
        expected = Predicate(method='and', literals=[Predicate(method='and', literals=[p1, p2]), p3])
        self.assertEqual(conjoin([p1, p2, p3]), expected)

    def test_scan_only(self):
        plan = self._assemble([], ['id', 'name', 'dt'])
        self.assertIsInstance(plan.root, ScanNode)
        self.assertIsNone(plan.filter_node)
        self.assertIsNone(plan.project_node)
        self.assertEqual(plan.output, ['id', 'name', 'dt'])

    def test_filter_and_project(self):
        residual = [self.pb.greater_than('id', 1), self.pb.equal('name', 'x')]
        plan = self._assemble(residual, ['name'])
        self.assertIsInstance(plan.root, ProjectNode)
        self.assertIsInstance(plan.root.child, FilterNode)
        self.assertEqual(plan.filter_node.condition, conjoin(residual))
        self.assertEqual(plan.output, ['name'])
        self.assertEqual(plan.output_schema(), pa.schema([pa.field('name', pa.string())]))

    def test_reordered_projection_added(self):
        plan = self._assemble([], ['dt', 'id', 'name'])
        self.assertIsInstance(plan.root, ProjectNode)
        self.assertEqual(plan.output, ['dt', 'id', 'name'])

    def test_scan_node_contents(self):
        plan = self._assemble([], ['id'])
        scan = plan.scan
        self.assertEqual(plan.partition_filters, [self.pb.equal('dt', '1')])
        self.assertEqual(plan.data_filters, [self.pb.greater_than('id', 1)])
        self.assertEqual(scan.identifier.get_full_name(), 'db.t')
        self.assertEqual(plan.tasks, self.tasks)
        self.assertEqual(plan.read_schema(), pa.schema([('id', pa.int64()), ('name', pa.string())]))

    def test_explain(self):
        plan = self._assemble([self.pb.greater_than('id', 1)], ['id'])
        lines = plan.explain().split("\n")
        self.assertEqual(lines[0], "Project [id]")
        self.assertEqual(lines[1], "   +- Filter id > 1")
        self.assertTrue(lines[2].startswith("      +- FileScan parquet db.t [id,name,dt]"))

    def test_task_summary(self):
        plan = self._assemble([], ['id'])
        summary = plan.task_summary()
        self.assertEqual(summary.column('path').to_pylist(), ['/t/dt=1/f.parquet'])
        self.assertEqual(summary.column('length').to_pylist(), [10])
        df = plan.task_summary_pandas()
        self.assertEqual(list(df.columns), ['task', 'path', 'start', 'length'])
        self.assertEqual(len(df), 1)


if __name__ == '__main__':
    unittest.main()
