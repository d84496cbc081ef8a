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

"""Closure resolvers over a schema unit.

The three resolvers run in dependency order: the event set seeds the field
closure, and both seed the enum closure. Every resolver re-scans the unit's
declarations to build its result, so results follow declaration order and
not discovery order.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from ..exceptions import EntryNotFoundError, UnionNotFoundError
from ..models.descriptors import EnumDescriptor, FieldDescriptor, MessageDescriptor, OneofDescriptor
from ..models.schema_index import SchemaIndex
from ..utils import camel_case

logger = logging.getLogger(__name__)

# Message whose discriminator union lists every event type
ENTRY_MESSAGE_NAME = "GetEventsResponse"
# Name of the discriminator union on the entry message
EVENT_ONEOF_NAME = "event"
# Generated oneof wrapper identifiers are "<Host><SEPARATOR><CamelCaseVariant>"
ONEOF_WRAPPER_SEPARATOR = "_"


def oneof_wrapper_ident(host: MessageDescriptor, variant: FieldDescriptor) -> str:
    """Identifier protoc generates for the wrapper type of a oneof variant."""
    return f"{host.name}{ONEOF_WRAPPER_SEPARATOR}{camel_case(variant.name)}"


def strip_wrapper_prefix(host: MessageDescriptor, ident: str) -> Optional[str]:
    """Payload name inside a wrapper identifier of ``host``, or None if ``ident`` is not one."""
    prefix = f"{host.name}{ONEOF_WRAPPER_SEPARATOR}"
    if ident.startswith(prefix) and len(ident) > len(prefix):
        return ident[len(prefix):]
    return None


class ClosureResolver:
    """Base class for the closure resolvers."""

    def __init__(self, index: SchemaIndex):
        self.index = index

    def _select_messages(self, names: Set[str]) -> Tuple[MessageDescriptor, ...]:
        """Declared messages whose short or qualified name is in ``names``, in declaration order."""
        return self._select(self.index.messages(), names)

    def _select_enums(self, names: Set[str]) -> Tuple[EnumDescriptor, ...]:
        return self._select(self.index.enums(), names)

    @staticmethod
    def _select(declared: Iterable, names: Set[str]) -> tuple:
        selected = []
        emitted: Set[str] = set()
        for descriptor in declared:
            if descriptor.full_name in emitted:
                continue
            if descriptor.full_name in names or descriptor.name in names:
                emitted.add(descriptor.full_name)
                selected.append(descriptor)
        return tuple(selected)


class EventSetResolver(ClosureResolver):
    """Derives the event types from the entry message's discriminator union."""

    def __init__(
        self,
        index: SchemaIndex,
        entry_message: str = ENTRY_MESSAGE_NAME,
        oneof_name: str = EVENT_ONEOF_NAME,
    ):
        super().__init__(index)
        self.entry_message = entry_message
        self.oneof_name = oneof_name

    def find_entry_message(self) -> MessageDescriptor:
        for msg in self.index.messages():
            if msg.name == self.entry_message or msg.full_name == self.entry_message:
                return msg
        raise EntryNotFoundError(f"Unable to find {self.entry_message} message: entry message not found")

    def find_event_union(self, entry: MessageDescriptor) -> OneofDescriptor:
        for oneof in self.index.oneofs_of(entry):
            if oneof.name == self.oneof_name:
                return oneof
        raise UnionNotFoundError(
            f"Unable to find {entry.name}.{self.oneof_name}: event union not found"
        )

    @staticmethod
    def payload_name(entry: MessageDescriptor, variant: FieldDescriptor) -> str:
        """Type name carried by a union variant.

        A variant referencing a declared message names its payload directly.
        Otherwise the declared type may be a wrapper identifier such as
        ``GetEventsResponse_ProcessExec``, whose host prefix is stripped.
        Scalar variants without a wrapper fall back to the CamelCase variant
        name.
        """
        if variant.is_message and not variant.message.external:
            return variant.message.full_name
        payload = strip_wrapper_prefix(entry, variant.type_name.rsplit(".", 1)[-1])
        if payload is not None:
            return payload
        if variant.is_message:
            return variant.message.full_name
        return camel_case(variant.name)

    def resolve(self) -> Tuple[MessageDescriptor, ...]:
        entry = self.find_entry_message()
        union = self.find_event_union(entry)

        names = {self.payload_name(entry, variant) for variant in union.fields}
        events = self._select_messages(names)

        if len(events) < len(names):
            found = {e.full_name for e in events} | {e.name for e in events}
            for name in sorted(names - found):
                logger.debug(f"Union variant type '{name}' is not declared in this unit; skipping")

        logger.debug(f"Resolved {len(events)} event types from {entry.name}.{union.name}")
        return events


class FieldClosureResolver(ClosureResolver):
    """Collects message types reachable from the event types through message-typed fields."""

    def __init__(self, index: SchemaIndex, events: Sequence[MessageDescriptor]):
        super().__init__(index)
        self.events = tuple(events)

    def reachable_from(self, root: MessageDescriptor) -> List[MessageDescriptor]:
        """Message types reachable from ``root`` via one or more field hops.

        Each type name is expanded at most once, so the walk terminates on
        cyclic schemas after visiting every distinct reachable type.
        """
        visited: Set[str] = set()
        reachable: List[MessageDescriptor] = []
        stack = [root]

        while stack:
            current = stack.pop()
            for field in self.index.fields_of(current):
                if not field.is_message:
                    continue
                type_name = field.message.full_name
                if type_name in visited:
                    continue
                visited.add(type_name)
                reachable.append(field.message)
                stack.append(field.message)

        return reachable

    def resolve(self) -> Tuple[MessageDescriptor, ...]:
        event_names = {event.full_name for event in self.events}
        discovered: Set[str] = set()

        for event in self.events:
            reachable = self.reachable_from(event)
            if not reachable:
                logger.debug(f"Event '{event.name}' has no message-typed fields")
            discovered.update(msg.full_name for msg in reachable)

        # Events and field types are disjoint even when events reference each other
        discovered -= event_names

        fields = self._select_messages(discovered)
        logger.debug(f"Resolved {len(fields)} field types from {len(self.events)} events")
        return fields


class EnumClosureResolver(ClosureResolver):
    """Collects enum types referenced by fields of the event and field types."""

    def __init__(
        self,
        index: SchemaIndex,
        events: Sequence[MessageDescriptor],
        fields: Sequence[MessageDescriptor],
    ):
        super().__init__(index)
        self.messages = tuple(events) + tuple(fields)

    def resolve(self) -> Tuple[EnumDescriptor, ...]:
        names: Set[str] = set()
        for msg in self.messages:
            for field in self.index.fields_of(msg):
                if field.is_enum:
                    names.add(field.enum.full_name)

        enums = self._select_enums(names)
        logger.debug(f"Resolved {len(enums)} enum types from {len(self.messages)} messages")
        return enums
