"""
Licensed to the Apache Software Foundation (ASF) under one
or more contributor license agreements.  See the NOTICE file
distributed with this work for additional information
regarding copyright ownership.  The ASF licenses this file
to you under the Apache License, Version 2.0 (the
"License"); you may not use this file except in compliance
with the License.  You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""
import logging
from typing import Optional

from pyfilescan.read.plan import PhysicalScanPlan
from pyfilescan.read.scan_context import ScanContext
from pyfilescan.read.scan_request import ScanRequest
from pyfilescan.read.scanner.filter_classifier import ColumnResolver, classify
from pyfilescan.read.scanner.format_selector import FormatSelector
from pyfilescan.read.scanner.plan_assembler import assemble
from pyfilescan.read.scanner.schema_pruner import prune
from pyfilescan.read.scanner.split_generator import compute_max_split_bytes, pack
from pyfilescan.table.file_relation import FileRelation

logger = logging.getLogger(__name__)


class FileScanPlanner:
    """
    Plans scans over collections of files that might be partitioned or
    bucketed. Planning happens in several phases:

     - split filters by when they need to be evaluated,
     - prune the read schema to the columns the filters and projection need,
     - list the files of the partitions that survive the partition filters,
     - choose the reader format, possibly an index or cache backed one,
     - pack the files into read tasks,
     - add the filters and projection that must be evaluated after the scan.
    """

    def __init__(self, context: Optional[ScanContext] = None):
        self.context = context or ScanContext()

    def plan(self, request: ScanRequest) -> Optional[PhysicalScanPlan]:
        relation = request.relation
        if not isinstance(relation, FileRelation):
            logger.debug("Relation %s is not file based, no file scan plan", relation)
            return None

        resolver = ColumnResolver(relation.output_fields)
        projection = [resolver.resolve(name) for name in request.projection]

        classification = classify(relation.output_fields, relation.partition_fields, request.filters)
        pruned = prune(relation.file_data_fields, relation.partition_fields,
                       classification.residual_filters, projection)

        directories = relation.list_files(classification.partition_filters)
        files = [f for d in directories for f in d.files]
        logger.info("Selected %d partitions with %d files out of relation %s",
                    len(directories), len(files), request.identifier or relation)

        options = self.context.options
        selection = FormatSelector(self.context).select(
            relation.file_format,
            relation.options,
            files,
            classification.data_filters,
            pruned.read_fields)

        bucket_spec = relation.bucket_spec if options.bucketing_enabled() else None
        max_split_bytes = compute_max_split_bytes(options, files)
        tasks = pack(files, bucket_spec, max_split_bytes, selection.file_format)

        return assemble(
            selection.file_format,
            selection.options,
            pruned.output_fields,
            pruned.read_fields,
            classification.partition_filters,
            classification.data_filters,
            request.identifier,
            tasks,
            classification.residual_filters,
            projection)


def plan(request: ScanRequest, context: Optional[ScanContext] = None) -> Optional[PhysicalScanPlan]:
    return FileScanPlanner(context).plan(request)
