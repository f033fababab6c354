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
from dataclasses import dataclass
from typing import List, Sequence

from pyfilescan.common.predicate import Predicate
from pyfilescan.schema.data_types import DataField, simple_string

logger = logging.getLogger(__name__)


@dataclass
class PrunedSchema:
    read_fields: List[DataField]
    output_fields: List[DataField]


def prune(data_fields: Sequence[DataField],
          partition_fields: Sequence[DataField],
          residual_filters: Sequence[Predicate],
          projection: Sequence[str]) -> PrunedSchema:
    """
    Keeps the data columns needed by the residual filters or the projection.
    Partition columns are never read from files, they follow the read
    columns in the output.
    """
    required = set(projection)
    for predicate in residual_filters:
        required |= predicate.references()
    partition_names = {f.name for f in partition_fields}

    read_fields = [f for f in data_fields if f.name in required and f.name not in partition_names]
    logger.info("Output Data Schema: %s", simple_string(read_fields))
    return PrunedSchema(read_fields, read_fields + list(partition_fields))
