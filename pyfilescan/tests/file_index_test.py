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

import datetime
import decimal
import os
import shutil
import tempfile
import unittest

import pyarrow.fs as pafs
from parameterized import parameterized

from pyfilescan.common.predicate_builder import PredicateBuilder
from pyfilescan.index.file_index import FileSystemFileIndex, InMemoryFileIndex, cast_partition_value
from pyfilescan.read.file_entry import FileEntry, PartitionDirectory
from pyfilescan.schema.data_types import AtomicType, DataField


class InMemoryFileIndexTest(unittest.TestCase):

    def setUp(self):
        self.partition_fields = [DataField(1, 'dt', AtomicType('STRING')), DataField(2, 'hr', AtomicType('INT'))]
        self.pb = PredicateBuilder(self.partition_fields)
        self.files = [
            FileEntry('/t/dt=a/hr=1/f0', 10, ('a', 1)),
            FileEntry('/t/dt=a/hr=2/f1', 20, ('a', 2)),
            FileEntry('/t/dt=b/hr=1/f2', 30, ('b', 1)),
            FileEntry('/t/dt=a/hr=1/f3', 40, ('a', 1)),
            FileEntry('/t/dt=__HIVE_DEFAULT_PARTITION__/hr=1/f4', 50, (None, 1)),
        ]
        self.index = InMemoryFileIndex.from_files(self.partition_fields, self.files)

    def test_grouping(self):
        directories = self.index.directories()
        self.assertEqual([d.values for d in directories], [('a', 1), ('a', 2), ('b', 1), (None, 1)])
        self.assertEqual(directories[0].total_size, 50)

    def test_no_filters(self):
        self.assertEqual(len(self.index.list_files([])), 4)
        self.assertEqual(len(self.index.all_files()), 5)

    def test_prune(self):
        selected = self.index.list_files([self.pb.equal('dt', 'a'), self.pb.greater_than('hr', 1)])
        self.assertEqual([d.values for d in selected], [('a', 2)])

    def test_null_partition_value(self):
        selected = self.index.list_files([self.pb.not_equal('dt', 'a')])
        self.assertEqual([d.values for d in selected], [('b', 1)])
        selected = self.index.list_files([self.pb.is_null('dt')])
        self.assertEqual([d.values for d in selected], [(None, 1)])

    def test_subquery_ignored(self):
        selected = self.index.list_files([self.pb.in_subquery('dt', 'q')])
        self.assertEqual(len(selected), 4)

    def test_constant_filter(self):
        self.assertEqual(self.index.list_files([self.pb.always_false()]), [])

    def test_value_arity_checked(self):
        with self.assertRaises(ValueError):
            InMemoryFileIndex(self.partition_fields, [PartitionDirectory(('a',))])

    def test_unpartitioned(self):
        index = InMemoryFileIndex.from_files([], [FileEntry('/t/f0', 1), FileEntry('/t/f1', 2)])
        self.assertEqual(len(index.directories()), 1)
        self.assertEqual(index.directories()[0].values, ())


class CastPartitionValueTest(unittest.TestCase):

    @parameterized.expand([
        ('INT', '42', 42),
        ('BIGINT', '-7', -7),
        ('DOUBLE', '1.5', 1.5),
        ('BOOLEAN', 'true', True),
        ('DECIMAL(10, 2)', '1.10', decimal.Decimal('1.10')),
        ('TIMESTAMP(6)', '2024-01-01 00%3A00%3A00', datetime.datetime(2024, 1, 1)),
        ('TIMESTAMP(3)', '2024-03-05T10:15:30.250', datetime.datetime(2024, 3, 5, 10, 15, 30, 250000)),
        ('BYTES', 'abc', b'abc'),
        ('DATE', '2024-02-29', datetime.date(2024, 2, 29)),
        ('STRING', 'a%3Db', 'a=b'),
        ('INT', '__HIVE_DEFAULT_PARTITION__', None),
    ])
    def test_cast(self, type_name, raw, expected):
        self.assertEqual(cast_partition_value(raw, DataField(0, 'p', AtomicType(type_name))), expected)

    def test_cast_failure(self):
        with self.assertRaises(ValueError):
            cast_partition_value('x1', DataField(0, 'p', AtomicType('INT')))

    @parameterized.expand([
        ('DECIMAL(10, 2)', 'ten'),
        ('TIMESTAMP(6)', 'yesterday'),
        ('DATE', '2024-13-01'),
    ])
    def test_cast_failure_by_type(self, type_name, raw):
        with self.assertRaises(ValueError):
            cast_partition_value(raw, DataField(0, 'p', AtomicType(type_name)))


class FileSystemFileIndexTest(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.tempdir = tempfile.mkdtemp()
        cls.root = os.path.join(cls.tempdir, 'events')
        layout = {
            'dt=2024-01-01/region=eu/part-0.parquet': 100,
            'dt=2024-01-01/region=us/part-0.parquet': 200,
            'dt=2024-01-01/region=us/part-1.parquet': 300,
            'dt=2024-01-02/region=eu/part-0.parquet': 400,
            'dt=2024-01-02/region=eu/_SUCCESS': 0,
            'dt=2024-01-02/region=eu/.part-0.parquet.crc': 8,
            '_temporary/0/part-9.parquet': 10,
            'stray.parquet': 5,
        }
        for rel_path, size in layout.items():
            path = os.path.join(cls.root, rel_path)
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, 'wb') as f:
                f.write(b'x' * size)

    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(cls.tempdir, ignore_errors=True)

    def setUp(self):
        self.partition_fields = [DataField(3, 'dt', AtomicType('DATE')), DataField(4, 'region', AtomicType('STRING'))]
        self.index = FileSystemFileIndex(pafs.LocalFileSystem(), self.root, self.partition_fields)

    def test_listing(self):
        directories = self.index.directories()
        self.assertEqual([d.values for d in directories], [
            (datetime.date(2024, 1, 1), 'eu'),
            (datetime.date(2024, 1, 1), 'us'),
            (datetime.date(2024, 1, 2), 'eu'),
        ])
        self.assertEqual([d.total_size for d in directories], [100, 500, 400])
        names = sorted(f.file_name for f in self.index.all_files())
        self.assertEqual(names, ['part-0.parquet', 'part-0.parquet', 'part-0.parquet', 'part-1.parquet'])

    def test_prune(self):
        pb = PredicateBuilder(self.partition_fields)
        selected = self.index.list_files([pb.equal('region', 'us')])
        self.assertEqual(len(selected), 1)
        self.assertEqual(sorted(f.length for f in selected[0].files), [200, 300])
        self.assertTrue(all(f.partition_values == (datetime.date(2024, 1, 1), 'us') for f in selected[0].files))

    def test_missing_root(self):
        index = FileSystemFileIndex(pafs.LocalFileSystem(), os.path.join(self.tempdir, 'missing'), [])
        self.assertEqual(index.directories(), [])

    def test_refresh(self):
        root = os.path.join(self.tempdir, 'growing')
        os.makedirs(os.path.join(root, 'dt=2024-01-01'))
        with open(os.path.join(root, 'dt=2024-01-01', 'part-0.parquet'), 'wb') as f:
            f.write(b'x')
        index = FileSystemFileIndex(pafs.LocalFileSystem(), root, self.partition_fields[:1])
        self.assertEqual(len(index.all_files()), 1)

        os.makedirs(os.path.join(root, 'dt=2024-01-02'))
        with open(os.path.join(root, 'dt=2024-01-02', 'part-0.parquet'), 'wb') as f:
            f.write(b'xy')
        self.assertEqual(len(index.all_files()), 1)
        index.refresh()
        self.assertEqual(len(index.all_files()), 2)

    def test_decimal_and_timestamp_partitions(self):
        root = os.path.join(self.tempdir, 'payments')
        for rel_path in ('amount=1.10/ts=2024-01-01 00%3A00%3A00/part-0.parquet',
                         'amount=1.10/ts=2023-12-31 23%3A59%3A59/part-0.parquet',
                         'amount=2.50/ts=2024-01-01 00%3A00%3A00/part-0.parquet'):
            path = os.path.join(root, rel_path)
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, 'wb') as f:
                f.write(b'x' * 10)
        partition_fields = [DataField(0, 'amount', AtomicType('DECIMAL(10, 2)')),
                            DataField(1, 'ts', AtomicType('TIMESTAMP(6)'))]
        index = FileSystemFileIndex(pafs.LocalFileSystem(), root, partition_fields)
        pb = PredicateBuilder(partition_fields)

        selected = index.list_files([pb.equal('amount', decimal.Decimal('1.10')),
                                     pb.greater_or_equal('ts', datetime.datetime(2024, 1, 1))])
        self.assertEqual([d.values for d in selected],
                         [(decimal.Decimal('1.10'), datetime.datetime(2024, 1, 1))])


if __name__ == '__main__':
    unittest.main()
