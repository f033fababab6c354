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

from dataclasses import dataclass, field
from typing import Mapping, Optional

from pyfilescan.common.options.scan_options import ScanOptions
from pyfilescan.format.index_provider import IndexProvider


@dataclass(frozen=True)
class ScanContext:
    """Session state of one planning call: the scan options and the index metadata access."""
    options: ScanOptions = field(default_factory=ScanOptions.from_dict)
    index_provider: Optional[IndexProvider] = None

    @classmethod
    def from_dict(cls, conf: Optional[Mapping[str, str]] = None,
                  index_provider: Optional[IndexProvider] = None) -> 'ScanContext':
        return cls(ScanOptions.from_dict(conf), index_provider)
