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

from pyfilescan.common.identifier import Identifier
from pyfilescan.common.options.scan_options import ScanOptions
from pyfilescan.common.predicate import Predicate
from pyfilescan.common.predicate_builder import PredicateBuilder
from pyfilescan.read.file_entry import FileEntry, PartitionDirectory
from pyfilescan.read.file_scan_planner import FileScanPlanner, plan
from pyfilescan.read.plan import PhysicalScanPlan
from pyfilescan.read.scan_context import ScanContext
from pyfilescan.read.scan_request import ScanRequest
from pyfilescan.table.bucket_spec import BucketSpec
from pyfilescan.table.file_relation import FileRelation

__version__ = "0.1.dev"

__all__ = [
    'BucketSpec',
    'FileEntry',
    'FileRelation',
    'FileScanPlanner',
    'Identifier',
    'PartitionDirectory',
    'PhysicalScanPlan',
    'Predicate',
    'PredicateBuilder',
    'ScanContext',
    'ScanOptions',
    'ScanRequest',
    'plan',
]
