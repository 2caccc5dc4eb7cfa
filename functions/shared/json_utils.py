# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

import re
from typing import Any, Literal

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _camel_to_snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _snake_to_camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def convert_keys(
    data: Any,
    direction: Literal["camel_to_snake", "snake_to_camel"],
    recursive: bool = True,
) -> Any:
    """
    Converts dictionary keys between camelCase and snake_case.

    Lists and nested dictionaries are converted as well unless `recursive` is
    False, in which case only the top-level keys change. Use that for payloads
    whose nested keys are data (area names in transit tables, for example).
    """
    convert = _camel_to_snake if direction == "camel_to_snake" else _snake_to_camel

    if isinstance(data, dict):
        return {
            (convert(k) if isinstance(k, str) else k): (
                convert_keys(v, direction) if recursive else v
            )
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [convert_keys(item, direction, recursive) for item in data]
    return data
