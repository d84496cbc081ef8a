# Copyright 2026 TIER IV, inc.
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

import re

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def snake_case(name: str) -> str:
    """Convert ``ProcessExec`` or ``HTTPServer`` style names to ``process_exec`` / ``http_server``."""
    return _CAMEL_BOUNDARY.sub("_", name).replace("-", "_").lower()


def camel_case(name: str) -> str:
    """Convert a snake_case field name to the CamelCase identifier protoc would generate."""
    return "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)
