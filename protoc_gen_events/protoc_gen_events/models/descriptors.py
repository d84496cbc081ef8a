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

"""In-memory descriptor graph for one schema unit.

Descriptors are plain dataclasses. Cross references (a field pointing to the
message or enum it carries, a field pointing back to its oneof) are excluded
from ``repr`` and comparison so that cyclic schemas stay printable.
Identity of a type is its fully-qualified name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple


class FieldKind(str, Enum):
    SCALAR = "scalar"
    MESSAGE = "message"
    ENUM = "enum"


@dataclass(eq=False)
class EnumValueDescriptor:
    name: str
    number: int


@dataclass(eq=False)
class EnumDescriptor:
    name: str
    full_name: str
    values: List[EnumValueDescriptor] = field(default_factory=list)
    external: bool = False

    def value_names(self) -> List[str]:
        return [value.name for value in self.values]


@dataclass(eq=False)
class OneofDescriptor:
    name: str
    fields: List["FieldDescriptor"] = field(default_factory=list, repr=False)

    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]


@dataclass(eq=False)
class FieldDescriptor:
    name: str
    kind: FieldKind
    type_name: str
    number: int = 0
    repeated: bool = False
    message: Optional["MessageDescriptor"] = field(default=None, repr=False)
    enum: Optional[EnumDescriptor] = field(default=None, repr=False)
    oneof: Optional[OneofDescriptor] = field(default=None, repr=False)

    @property
    def is_message(self) -> bool:
        return self.kind == FieldKind.MESSAGE and self.message is not None

    @property
    def is_enum(self) -> bool:
        return self.kind == FieldKind.ENUM and self.enum is not None


@dataclass(eq=False)
class MessageDescriptor:
    name: str
    full_name: str
    fields: List[FieldDescriptor] = field(default_factory=list)
    oneofs: List[OneofDescriptor] = field(default_factory=list)
    external: bool = False

    def field_by_name(self, name: str) -> Optional[FieldDescriptor]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def oneof_by_name(self, name: str) -> Optional[OneofDescriptor]:
        for oneof in self.oneofs:
            if oneof.name == name:
                return oneof
        return None


@dataclass(eq=False)
class SchemaGraph:
    """All message and enum descriptors declared by one schema unit.

    ``messages`` and ``enums`` keep declaration order; closure results are
    ordered by these sequences.
    """

    package: str = ""
    messages: Tuple[MessageDescriptor, ...] = ()
    enums: Tuple[EnumDescriptor, ...] = ()
    file_path: Optional[str] = None
    # ClosureCache of this load, attached on first closure request
    closures: Any = field(default=None, repr=False)

    def qualify(self, name: str) -> str:
        if not self.package:
            return name
        return f"{self.package}.{name}"
