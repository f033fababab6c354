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

from typing import Any, Dict, Mapping, Optional

from pyfilescan.common.options.config_option import ConfigOption
from pyfilescan.common.options.options_utils import OptionsUtils
from pyfilescan.common.planning_exception import ScanConfigurationException


class Options:
    """
    Read-only view over a string keyed option map. The map is copied on
    construction, later changes to the source dict are not visible.
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None):
        self._data: Dict[str, Any] = dict(data or {})

    def to_map(self) -> Dict[str, Any]:
        return dict(self._data)

    def get(self, key: ConfigOption, default=None):
        """
        Get the value for the given ConfigOption, converted to the option's type.
        Args:
            key: The ConfigOption to get the value for
            default: The value returned when the option is not set, falls back to the option default
        Raises:
            ScanConfigurationException: if the raw value cannot be converted
        """
        main_key = key.key()
        raw_value = self._data.get(main_key)
        if raw_value is not None:
            try:
                return OptionsUtils.convert_value(raw_value, key.get_clazz())
            except ValueError as e:
                raise ScanConfigurationException(main_key, raw_value, e) from e

        return default if default is not None else key.default_value()

    def contains(self, key: ConfigOption) -> bool:
        return key.key() in self._data

    def with_option(self, key: ConfigOption, value) -> 'Options':
        data = dict(self._data)
        data[key.key()] = OptionsUtils.convert_to_string(value)
        return Options(data)

    def __eq__(self, other) -> bool:
        return isinstance(other, Options) and self._data == other._data

    def __hash__(self) -> int:
        return hash(frozenset((k, str(v)) for k, v in self._data.items()))

    def __repr__(self) -> str:
        return f"Options({self._data})"
