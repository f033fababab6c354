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

from typing import Any, List, Optional


# Exception classes
class PlanningException(Exception):
    """Base scan planning exception"""


class ColumnNotResolvedException(PlanningException):
    """Column not resolved exception"""

    def __init__(self, column: str, available: List[str]):
        self.column = column
        self.available = list(available)
        super().__init__(f"Cannot resolve column {column} among {self.available}")


class ScanConfigurationException(PlanningException):
    """Malformed scan option exception"""

    def __init__(self, key: str, value: Any, cause: Optional[Exception] = None):
        self.key = key
        self.value = value
        self.cause = cause
        message = f"Invalid value '{value}' for option {key}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class InvalidBucketFileException(PlanningException):
    """File without a usable bucket id exception"""

    def __init__(self, path: str, bucket_id: Optional[int], num_buckets: int):
        self.path = path
        self.bucket_id = bucket_id
        self.num_buckets = num_buckets
        super().__init__(f"File {path} has invalid bucket id {bucket_id}, "
                         f"expected a value in [0, {num_buckets})")
