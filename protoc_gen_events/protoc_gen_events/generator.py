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

"""Emits one generated module per closure member."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from jinja2 import TemplateError

from .exceptions import GenerationError
from .file_io.template_renderer import TemplateRenderer
from .helpers import is_parent_event, is_process_event
from .models.descriptors import EnumDescriptor, FieldDescriptor, MessageDescriptor, SchemaGraph
from .resolvers.closure_cache import ClosureCache, closure_cache_for
from .resolvers.closure_resolver import EventSetResolver
from .utils import snake_case

logger = logging.getLogger(__name__)

GENERATED_HEADER = """# SPDX-License-Identifier: Apache-2.0
# Copyright Authors of protoc-gen-events"""

CODEGEN_DIR = "codegen"


def _field_data(field: FieldDescriptor) -> Dict[str, Any]:
    if field.is_message:
        type_name = field.message.full_name
    elif field.is_enum:
        type_name = field.enum.full_name
    else:
        type_name = field.type_name
    return {
        "name": field.name,
        "kind": field.kind.value,
        "type": type_name,
        "repeated": field.repeated,
    }


class CodeGenerator:
    """Render the event, field and enum closures of a schema unit to Python modules.

    Layout under ``output_dir``::

        codegen/__init__.py            index of every generated type
        codegen/events/<event>.py
        codegen/fields/<field type>.py
        codegen/enums/<enum>.py
    """

    def __init__(
        self,
        schema: SchemaGraph,
        output_dir: str,
        renderer: Optional[TemplateRenderer] = None,
        cache: Optional[ClosureCache] = None,
    ):
        self.schema = schema
        self.output_dir = output_dir
        self.renderer = renderer or TemplateRenderer()
        self.cache = cache or closure_cache_for(schema)

    def generate(self) -> List[Path]:
        """Write every generated module and return their paths.

        All closures are resolved before the first file is written, so a
        schema missing its entry message or event union leaves the output
        directory untouched. The same holds for two types of one kind whose
        names map to the same module.
        """
        events = self.cache.events()
        fields = self.cache.fields()
        enums = self.cache.enums()
        variants = self._oneof_variants()
        modules = {
            "events": self._module_names("events", events),
            "fields": self._module_names("fields", fields),
            "enums": self._module_names("enums", enums),
        }

        written: List[Path] = []
        for event, module in zip(events, modules["events"]):
            written.append(self._render("events", module, "event.py.jinja2", self._event_data(event, variants)))
        for msg, module in zip(fields, modules["fields"]):
            written.append(self._render("fields", module, "field.py.jinja2", self._message_data(msg)))
        for enum, module in zip(enums, modules["enums"]):
            written.append(self._render("enums", module, "enum.py.jinja2", self._enum_data(enum)))

        for kind in ("events", "fields", "enums"):
            written.append(
                self._write(os.path.join(kind, "__init__.py"), "package_init.py.jinja2", modules=modules[kind])
            )

        written.append(
            self._write(
                "__init__.py",
                "index.py.jinja2",
                package=self.schema.package,
                events=[e.full_name for e in events],
                fields=[f.full_name for f in fields],
                enums=[e.full_name for e in enums],
            )
        )

        logger.info(
            f"Generated {len(events)} events, {len(fields)} field types and {len(enums)} enums "
            f"into {os.path.join(self.output_dir, CODEGEN_DIR)}"
        )
        return written

    def _oneof_variants(self) -> Dict[str, str]:
        """Map payload type name (short and qualified) to the union variant name."""
        resolver = EventSetResolver(self.cache.index, self.cache.entry_message, self.cache.oneof_name)
        entry = resolver.find_entry_message()
        variants: Dict[str, str] = {}
        for variant in resolver.find_event_union(entry).fields:
            variants.setdefault(resolver.payload_name(entry, variant), variant.name)
        return variants

    def _message_data(self, msg: MessageDescriptor) -> Dict[str, Any]:
        return {
            "name": msg.name,
            "full_name": msg.full_name,
            "fields": [_field_data(f) for f in msg.fields],
        }

    def _event_data(self, event: MessageDescriptor, variants: Dict[str, str]) -> Dict[str, Any]:
        template_data = self._message_data(event)
        template_data["oneof_field"] = variants.get(event.full_name) or variants.get(event.name)
        template_data["is_process_event"] = is_process_event(event)
        template_data["is_parent_event"] = is_parent_event(event)
        return template_data

    @staticmethod
    def _enum_data(enum: EnumDescriptor) -> Dict[str, Any]:
        return {
            "name": enum.name,
            "full_name": enum.full_name,
            "values": [{"name": v.name, "number": v.number} for v in enum.values],
        }

    @staticmethod
    def _module_names(kind: str, members: Sequence[Any]) -> List[str]:
        """Module name of each member; two types may not share one."""
        owners: Dict[str, str] = {}
        modules: List[str] = []
        for member in members:
            module = snake_case(member.name)
            if module in owners:
                raise GenerationError(
                    f"Types '{owners[module]}' and '{member.full_name}' "
                    f"would both be generated as {kind}/{module}.py"
                )
            owners[module] = member.full_name
            modules.append(module)
        return modules

    def _render(self, kind: str, module: str, template_name: str, template_data: Dict[str, Any]) -> Path:
        return self._write(os.path.join(kind, f"{module}.py"), template_name, **template_data)

    def _write(self, relative_path: str, template_name: str, **template_data) -> Path:
        output_path = os.path.join(self.output_dir, CODEGEN_DIR, relative_path)
        logger.debug(f"Rendering {template_name} -> {output_path}")
        try:
            self.renderer.render_template_to_file(
                template_name,
                output_path,
                header=GENERATED_HEADER,
                source=self.schema.file_path or "<memory>",
                **template_data,
            )
        except TemplateError as exc:
            raise GenerationError(f"Failed to render {template_name} for {relative_path}: {exc}") from exc
        except OSError as exc:
            raise GenerationError(f"Failed to write {output_path}: {exc}") from exc
        return Path(output_path)


def generate(schema: SchemaGraph, output_dir: str) -> List[Path]:
    """Generate code for ``schema`` into ``output_dir``."""
    return CodeGenerator(schema, output_dir).generate()
