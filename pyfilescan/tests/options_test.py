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

from parameterized import parameterized

from pyfilescan.common.memory_size import MemorySize
from pyfilescan.common.options import ConfigOption, Options
from pyfilescan.common.options.scan_options import ScanOptions
from pyfilescan.common.planning_exception import ScanConfigurationException


class ScanOptionsTest(unittest.TestCase):

    def test_defaults(self):
        options = ScanOptions.from_dict()
        self.assertTrue(options.parquet_optimized_enabled())
        self.assertFalse(options.parquet_data_cache_enabled())
        self.assertTrue(options.orc_optimized_enabled())
        self.assertTrue(options.vectorized_reader_enabled())
        self.assertTrue(options.whole_stage_enabled())
        self.assertFalse(options.orc_filter_pushdown_enabled())
        self.assertTrue(options.bucketing_enabled())
        self.assertEqual(options.source_split_max_bytes(), 128 * 1024 * 1024)
        self.assertEqual(options.source_split_open_file_cost(), 4 * 1024 * 1024)
        self.assertIsNone(options.default_parallelism())

    def test_overrides(self):
        options = ScanOptions.from_dict({
            'scan.parquet.data-cache.enabled': 'TRUE',
            'scan.bucketing.enabled': 'false',
            'source.split.max-bytes': '64kb',
            'scan.default-parallelism': '8',
        })
        self.assertTrue(options.parquet_data_cache_enabled())
        self.assertFalse(options.bucketing_enabled())
        self.assertEqual(options.source_split_max_bytes(), 64 * 1024)
        self.assertEqual(options.default_parallelism(), 8)

    @parameterized.expand([
        ('scan.parquet.optimized.enabled', 'maybe', 'parquet_optimized_enabled'),
        ('scan.default-parallelism', 'many', 'default_parallelism'),
        ('source.split.max-bytes', '12 parsecs', 'source_split_max_bytes'),
    ])
    def test_malformed_value(self, key, value, accessor):
        options = ScanOptions.from_dict({key: value})
        with self.assertRaises(ScanConfigurationException) as ctx:
            getattr(options, accessor)()
        self.assertEqual(ctx.exception.key, key)
        self.assertEqual(ctx.exception.value, value)

    def test_options_are_copied(self):
        raw = {'scan.bucketing.enabled': 'true'}
        options = Options(raw)
        raw['scan.bucketing.enabled'] = 'false'
        self.assertTrue(options.get(ScanOptions.BUCKETING_ENABLED))

    def test_with_option(self):
        options = Options().with_option(ScanOptions.WHOLE_STAGE_ENABLED, False)
        self.assertEqual(options.to_map(), {'scan.whole-stage.enabled': 'false'})
        self.assertFalse(options.get(ScanOptions.WHOLE_STAGE_ENABLED))

    def test_every_option_is_described(self):
        declared = [v for v in vars(ScanOptions).values() if isinstance(v, ConfigOption)]
        self.assertEqual(len(declared), 10)
        for option in declared:
            self.assertTrue(option.description(), option.key())


class MemorySizeTest(unittest.TestCase):

    @parameterized.expand([
        ('1024', 1024),
        ('1 kb', 1024),
        ('4mb', 4 * 1024 * 1024),
        ('2G', 2 * 1024 * 1024 * 1024),
        ('7b', 7),
    ])
    def test_parse(self, text, expected):
        self.assertEqual(MemorySize.parse(text).get_bytes(), expected)

    @parameterized.expand([('',), ('abc',), ('12 xb',), ('-1',)])
    def test_parse_invalid(self, text):
        with self.assertRaises(ValueError):
            MemorySize.parse(text)


if __name__ == '__main__':
    unittest.main()
