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

from pyfilescan.format.file_format import FileFormat, FormatKind
from pyfilescan.format.optimized_format import OptimizedFileFormat


class OrcFileFormat(FileFormat):

    kind = FormatKind.ORC


class ReadOnlyOrcFileFormat(OrcFileFormat):
    """Orc reader used while an index is built or validated."""

    kind = FormatKind.READ_ONLY_ORC

    def is_read_only_maintenance_mode(self) -> bool:
        return True


class OptimizedOrcFileFormat(OptimizedFileFormat):

    kind = FormatKind.OPTIMIZED_ORC
