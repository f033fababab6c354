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

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from pyfilescan.common.identifier import Identifier
from pyfilescan.common.predicate import Predicate


@dataclass(frozen=True)
class ScanRequest:
    """
    A logical scan: the relation to read, the filters the query applies on
    top of it and the column names it outputs, in order.
    """
    relation: Any
    filters: Tuple[Predicate, ...] = ()
    projection: Tuple[str, ...] = ()
    identifier: Optional[Identifier] = None

    def __post_init__(self):
        object.__setattr__(self, 'filters', tuple(self.filters))
        object.__setattr__(self, 'projection', tuple(self.projection))
