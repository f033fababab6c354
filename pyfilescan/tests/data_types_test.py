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
from parameterized import parameterized

from pyfilescan.schema.data_types import (ArrayType, AtomicType, DataField, MapType, PyarrowFieldParser, RowType,
                                          simple_string)


class DataTypesTest(unittest.TestCase):

    def test_atomic_type(self):
        self.assertEqual(str(AtomicType("BIGINT", nullable=False)), "BIGINT NOT NULL")
        self.assertEqual(str(AtomicType("DECIMAL(10, 6)")), "DECIMAL(10, 6)")
        self.assertTrue(AtomicType("STRING").is_atomic())

    @parameterized.expand([
        (AtomicType("TIMESTAMP(6)"), "ARRAY<TIMESTAMP(6)>"),
        (ArrayType(True, AtomicType("INT")), "ARRAY<ARRAY<INT>>"),
    ])
    def test_array_type(self, element_type, expected):
        self.assertEqual(str(ArrayType(True, element_type)), expected)
        self.assertEqual(str(ArrayType(False, element_type)), expected + " NOT NULL")
        self.assertFalse(ArrayType(True, element_type).is_atomic())

    def test_map_and_row(self):
        self.assertFalse(MapType(True, AtomicType("STRING"), AtomicType("INT")).is_atomic())
        row = RowType(True, [DataField(0, "a", AtomicType("STRING"), "Someone's desc.")])
        self.assertEqual(str(row), "ROW<a: STRING COMMENT Someone's desc.>")
        self.assertFalse(row.is_atomic())

    def test_pyarrow_conversion(self):
        pa_schema = pa.schema([
            pa.field('id', pa.int64(), nullable=False),
            ('price', pa.decimal128(12, 2)),
            ('ts', pa.timestamp('ms')),
            ('tags', pa.list_(pa.string())),
            ('attrs', pa.map_(pa.string(), pa.int32())),
            ('point', pa.struct([('x', pa.float64()), ('y', pa.float64())])),
        ])
        fields = PyarrowFieldParser.to_scan_schema(pa_schema)
        self.assertEqual([f.id for f in fields], [0, 1, 2, 3, 4, 5])
        self.assertEqual(str(fields[0].type), "BIGINT NOT NULL")
        self.assertEqual(str(fields[1].type), "DECIMAL(12, 2)")
        self.assertEqual(str(fields[2].type), "TIMESTAMP(3)")
        self.assertEqual([f.type.is_atomic() for f in fields], [True, True, True, False, False, False])
        self.assertEqual(PyarrowFieldParser.from_scan_schema(fields), pa_schema)

    def test_simple_string(self):
        fields = [DataField(i, "c{}".format(i), AtomicType("INT")) for i in range(7)]
        self.assertEqual(simple_string(fields[:2]), "struct<c0:INT,c1:INT>")
        self.assertEqual(simple_string(fields), "struct<c0:INT,c1:INT,c2:INT,c3:INT,c4:INT,... 2 more fields>")


if __name__ == '__main__':
    unittest.main()
