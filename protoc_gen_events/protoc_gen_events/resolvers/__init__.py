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

"""Closure computation over a schema unit."""

from .closure_cache import ClosureCache, clear_cache, closure_cache_for, enums, events, fields
from .closure_resolver import (
    ENTRY_MESSAGE_NAME,
    EVENT_ONEOF_NAME,
    ONEOF_WRAPPER_SEPARATOR,
    EnumClosureResolver,
    EventSetResolver,
    FieldClosureResolver,
    oneof_wrapper_ident,
)

__all__ = [
    "ClosureCache",
    "clear_cache",
    "closure_cache_for",
    "enums",
    "events",
    "fields",
    "ENTRY_MESSAGE_NAME",
    "EVENT_ONEOF_NAME",
    "ONEOF_WRAPPER_SEPARATOR",
    "EnumClosureResolver",
    "EventSetResolver",
    "FieldClosureResolver",
    "oneof_wrapper_ident",
]
