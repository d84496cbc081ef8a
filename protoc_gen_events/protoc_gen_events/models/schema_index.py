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

from typing import Dict, Iterator, List, Optional
import logging

from .descriptors import EnumDescriptor, FieldDescriptor, MessageDescriptor, OneofDescriptor, SchemaGraph

logger = logging.getLogger(__name__)


class SchemaIndex:
    """Read-only lookup view over a SchemaGraph.

    Lookups accept either the short or the fully-qualified type name. A name
    that is not declared by the unit returns None.
    """

    def __init__(self, schema: SchemaGraph):
        self.schema = schema
        self._messages: Dict[str, MessageDescriptor] = {}
        self._enums: Dict[str, EnumDescriptor] = {}

        for msg in schema.messages:
            self._messages.setdefault(msg.full_name, msg)
            self._messages.setdefault(msg.name, msg)
        for enum in schema.enums:
            self._enums.setdefault(enum.full_name, enum)
            self._enums.setdefault(enum.name, enum)
        logger.debug(f"Indexed {len(schema.messages)} messages and {len(schema.enums)} enums")

    def find_message(self, name: str) -> Optional[MessageDescriptor]:
        """Get a declared message by short or fully-qualified name."""
        return self._messages.get(name)

    def find_enum(self, name: str) -> Optional[EnumDescriptor]:
        """Get a declared enum by short or fully-qualified name."""
        return self._enums.get(name)

    def messages(self) -> Iterator[MessageDescriptor]:
        return iter(self.schema.messages)

    def enums(self) -> Iterator[EnumDescriptor]:
        return iter(self.schema.enums)

    def fields_of(self, message: MessageDescriptor) -> List[FieldDescriptor]:
        return list(message.fields)

    def oneofs_of(self, message: MessageDescriptor) -> List[OneofDescriptor]:
        return list(message.oneofs)
