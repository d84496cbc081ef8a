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

"""Per-load memoization of the closure results.

Each SchemaGraph carries at most one ClosureCache, created the first time a
closure is requested for it. A new schema load therefore always starts from
an empty cache, and the cache lives exactly as long as the graph.
"""

import logging
import threading
import weakref
from typing import Optional, Tuple

from ..models.descriptors import EnumDescriptor, MessageDescriptor, SchemaGraph
from ..models.schema_index import SchemaIndex
from .closure_resolver import (
    ENTRY_MESSAGE_NAME,
    EVENT_ONEOF_NAME,
    EnumClosureResolver,
    EventSetResolver,
    FieldClosureResolver,
)

logger = logging.getLogger(__name__)

_ATTACH_LOCK = threading.Lock()
_REGISTRY_LOCK = threading.Lock()
_LIVE_CACHES: "weakref.WeakSet[ClosureCache]" = weakref.WeakSet()


class ClosureCache:
    """Computes the event, field and enum closures of one schema load at most once.

    The lock is re-entrant because ``fields()`` and ``enums()`` populate their
    upstream closures while holding it. Errors are not cached.
    """

    def __init__(
        self,
        schema: SchemaGraph,
        entry_message: str = ENTRY_MESSAGE_NAME,
        oneof_name: str = EVENT_ONEOF_NAME,
    ):
        self.index = SchemaIndex(schema)
        self.entry_message = entry_message
        self.oneof_name = oneof_name
        self._lock = threading.RLock()
        self._events: Optional[Tuple[MessageDescriptor, ...]] = None
        self._fields: Optional[Tuple[MessageDescriptor, ...]] = None
        self._enums: Optional[Tuple[EnumDescriptor, ...]] = None
        with _REGISTRY_LOCK:
            _LIVE_CACHES.add(self)

    def events(self) -> Tuple[MessageDescriptor, ...]:
        result = self._events
        if result is None:
            with self._lock:
                result = self._events
                if result is None:
                    resolver = EventSetResolver(self.index, self.entry_message, self.oneof_name)
                    result = self._events = resolver.resolve()
        return result

    def fields(self) -> Tuple[MessageDescriptor, ...]:
        result = self._fields
        if result is None:
            with self._lock:
                result = self._fields
                if result is None:
                    result = self._fields = FieldClosureResolver(self.index, self.events()).resolve()
        return result

    def enums(self) -> Tuple[EnumDescriptor, ...]:
        result = self._enums
        if result is None:
            with self._lock:
                result = self._enums
                if result is None:
                    result = self._enums = EnumClosureResolver(self.index, self.events(), self.fields()).resolve()
        return result

    @property
    def populated(self) -> bool:
        return self._events is not None and self._fields is not None and self._enums is not None

    def clear(self) -> None:
        with self._lock:
            self._events = None
            self._fields = None
            self._enums = None


def closure_cache_for(schema: SchemaGraph) -> ClosureCache:
    """Get the cache attached to ``schema``, creating it on first use."""
    cache = schema.closures
    if cache is None:
        with _ATTACH_LOCK:
            cache = schema.closures
            if cache is None:
                cache = ClosureCache(schema)
                schema.closures = cache
                logger.debug(f"Attached closure cache to schema unit {schema.file_path or schema.package!r}")
    return cache


def events(schema: SchemaGraph) -> Tuple[MessageDescriptor, ...]:
    """Event types of the unit, in declaration order."""
    return closure_cache_for(schema).events()


def fields(schema: SchemaGraph) -> Tuple[MessageDescriptor, ...]:
    """Message types reachable from the events, in declaration order."""
    return closure_cache_for(schema).fields()


def enums(schema: SchemaGraph) -> Tuple[EnumDescriptor, ...]:
    """Enum types used by events and field types, in declaration order."""
    return closure_cache_for(schema).enums()


def clear_cache(schema: Optional[SchemaGraph] = None) -> None:
    """Reset the cache of one schema load, or of every live load when ``schema`` is None."""
    if schema is not None:
        if schema.closures is not None:
            schema.closures.clear()
        return
    with _REGISTRY_LOCK:
        caches = list(_LIVE_CACHES)
    for cache in caches:
        cache.clear()
