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

"""Schema-unit loader: YAML document -> SchemaGraph."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import jsonschema
import yaml

from ..config import codegen_config
from ..exceptions import SchemaLoadError
from .descriptors import (
    EnumDescriptor,
    EnumValueDescriptor,
    FieldDescriptor,
    FieldKind,
    MessageDescriptor,
    OneofDescriptor,
    SchemaGraph,
)
from .json_schema_loader import load_schema

logger = logging.getLogger(__name__)

SCHEMA_UNIT_SCHEMA = "schema_unit"

SCALAR_TYPES = frozenset({
    "double", "float",
    "int32", "int64", "uint32", "uint64",
    "sint32", "sint64", "fixed32", "fixed64", "sfixed32", "sfixed64",
    "bool", "string", "bytes",
})

SourceMap = Dict[str, Dict[str, int]]


def _json_pointer(path) -> str:
    tokens = [str(p).replace("~", "~0").replace("/", "~1") for p in path]
    return "/" + "/".join(tokens) if tokens else ""


def _build_source_map(content: str) -> SourceMap:
    """Map JSON-pointer paths of the YAML document to 1-based line/column."""
    source_map: SourceMap = {}

    try:
        root = yaml.compose(content, Loader=yaml.SafeLoader)
    except yaml.YAMLError:
        return source_map
    if root is None:
        return source_map

    stack = [(root, "")]
    while stack:
        node, path = stack.pop()
        mark = node.start_mark
        source_map[path] = {"line": mark.line + 1, "column": mark.column + 1}

        if isinstance(node, yaml.nodes.MappingNode):
            for key_node, value_node in node.value:
                stack.append((value_node, f"{path}/{_json_pointer([key_node.value])[1:]}"))
        elif isinstance(node, yaml.nodes.SequenceNode):
            for idx, item_node in enumerate(node.value):
                stack.append((item_node, f"{path}/{idx}"))

    return source_map


def _format_location(file_path: Optional[Path], source_map: SourceMap, pointer: str) -> str:
    parts = []
    if file_path is not None:
        parts.append(str(file_path))
    entry = source_map.get(pointer)
    if entry:
        parts.append(f"line {entry['line']}, column {entry['column']}")
    if pointer:
        parts.append(pointer)
    return f" ({'; '.join(parts)})" if parts else ""


class SchemaLoader:
    """Loads schema units and links their type references."""

    def __init__(self, cache_enabled: bool = None):
        """Initialize the loader.

        Args:
            cache_enabled: Whether loaded graphs are cached by path. If None, uses global config.
        """
        self.cache_enabled = cache_enabled if cache_enabled is not None else codegen_config.cache_enabled
        self._cache: Dict[Path, SchemaGraph] = {}

    def load(self, file_path: Union[str, Path]) -> SchemaGraph:
        path = Path(file_path)

        if not path.exists():
            raise SchemaLoadError(f"Schema unit file not found: {path}")
        if not path.is_file():
            raise SchemaLoadError(f"Path is not a file: {path}")

        resolved = path.resolve()
        if self.cache_enabled and resolved in self._cache:
            logger.debug(f"Loading schema unit from cache: {path}")
            return self._cache[resolved]

        logger.debug(f"Loading schema unit: {path}")
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SchemaLoadError(f"Failed to read schema unit {path}: {exc}") from exc

        graph = self.loads(content, file_path=path)
        if self.cache_enabled:
            self._cache[resolved] = graph
        return graph

    def loads(self, content: str, file_path: Optional[Path] = None) -> SchemaGraph:
        """Load a schema unit from YAML string content."""
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            where = f" {file_path}" if file_path else ""
            raise SchemaLoadError(f"Failed to parse schema unit{where}: {exc}") from exc
        if data is None:
            data = {}

        self._validate(data, file_path, content)
        graph = self._build_graph(data, file_path)
        logger.info(
            f"Loaded schema unit '{graph.package or '<root>'}': "
            f"{len(graph.messages)} messages, {len(graph.enums)} enums"
        )
        return graph

    def clear_cache(self) -> None:
        self._cache.clear()

    def _validate(self, data: Any, file_path: Optional[Path], content: str) -> None:
        if not isinstance(data, dict):
            raise SchemaLoadError(f"Schema unit root must be a mapping{_format_location(file_path, {}, '')}")

        validator = jsonschema.Draft7Validator(load_schema(SCHEMA_UNIT_SCHEMA))
        errors = sorted(validator.iter_errors(data), key=lambda e: _json_pointer(e.absolute_path))
        if not errors:
            return

        source_map = _build_source_map(content)
        lines = [
            f"{error.message}{_format_location(file_path, source_map, _json_pointer(error.absolute_path))}"
            for error in errors
        ]
        raise SchemaLoadError("Invalid schema unit:\n  " + "\n  ".join(lines))

    def _build_graph(self, data: Dict[str, Any], file_path: Optional[Path]) -> SchemaGraph:
        graph = SchemaGraph(
            package=data.get("package") or "",
            file_path=str(file_path) if file_path is not None else None,
        )

        raw_messages: List[Dict[str, Any]] = data.get("messages") or []
        raw_enums: List[Dict[str, Any]] = data.get("enums") or []

        messages = [MessageDescriptor(name=m["name"], full_name=graph.qualify(m["name"])) for m in raw_messages]
        enums = [self._build_enum(e, graph) for e in raw_enums]

        seen: Dict[str, str] = {}
        for descriptor, kind in [(m, "message") for m in messages] + [(e, "enum") for e in enums]:
            if descriptor.full_name in seen:
                raise SchemaLoadError(
                    f"Duplicate type '{descriptor.full_name}' declared as {seen[descriptor.full_name]} and {kind}"
                )
            seen[descriptor.full_name] = kind

        message_lookup: Dict[str, MessageDescriptor] = {}
        enum_lookup: Dict[str, EnumDescriptor] = {}
        for msg in messages:
            message_lookup[msg.full_name] = msg
            message_lookup.setdefault(msg.name, msg)
        for enum in enums:
            enum_lookup[enum.full_name] = enum
            enum_lookup.setdefault(enum.name, enum)

        externals: Dict[Tuple[str, str], Union[MessageDescriptor, EnumDescriptor]] = {}

        for msg, raw in zip(messages, raw_messages):
            oneofs: Dict[str, OneofDescriptor] = {}
            for number, raw_field in enumerate(raw.get("fields") or [], start=1):
                field = self._build_field(raw_field, number, graph, message_lookup, enum_lookup, externals)
                oneof_name = raw_field.get("oneof")
                if oneof_name:
                    oneof = oneofs.get(oneof_name)
                    if oneof is None:
                        oneof = oneofs[oneof_name] = OneofDescriptor(name=oneof_name)
                    oneof.fields.append(field)
                    field.oneof = oneof
                msg.fields.append(field)
            msg.oneofs = list(oneofs.values())

        graph.messages = tuple(messages)
        graph.enums = tuple(enums)
        return graph

    @staticmethod
    def _build_enum(raw: Dict[str, Any], graph: SchemaGraph) -> EnumDescriptor:
        values = []
        for number, raw_value in enumerate(raw.get("values") or []):
            if isinstance(raw_value, dict):
                values.append(EnumValueDescriptor(name=raw_value["name"], number=raw_value.get("number", number)))
            else:
                values.append(EnumValueDescriptor(name=raw_value, number=number))
        return EnumDescriptor(name=raw["name"], full_name=graph.qualify(raw["name"]), values=values)

    @staticmethod
    def _build_field(
        raw: Dict[str, Any],
        number: int,
        graph: SchemaGraph,
        message_lookup: Dict[str, MessageDescriptor],
        enum_lookup: Dict[str, EnumDescriptor],
        externals: Dict[Tuple[str, str], Union[MessageDescriptor, EnumDescriptor]],
    ) -> FieldDescriptor:
        type_name = raw["type"].lstrip(".")
        kind = raw.get("kind")
        field = FieldDescriptor(
            name=raw["name"],
            kind=FieldKind.SCALAR,
            type_name=type_name,
            number=raw.get("number", number),
            repeated=raw.get("label") == "repeated",
        )

        if kind is None and type_name in SCALAR_TYPES:
            return field

        if kind == "enum" or (kind is None and type_name in enum_lookup):
            field.kind = FieldKind.ENUM
            field.enum = enum_lookup.get(type_name)
            if field.enum is None:
                field.enum = _external(externals, "enum", type_name, graph)
            return field

        field.kind = FieldKind.MESSAGE
        field.message = message_lookup.get(type_name)
        if field.message is None:
            field.message = _external(externals, "message", type_name, graph)
        return field


def _external(externals, kind: str, type_name: str, graph: SchemaGraph):
    """Placeholder descriptor for a type declared outside this schema unit."""
    key = (kind, type_name)
    if key not in externals:
        logger.debug(f"Type '{type_name}' is not declared in this unit; treating it as external {kind}")
        short_name = type_name.rsplit(".", 1)[-1]
        full_name = type_name if "." in type_name else graph.qualify(type_name)
        if kind == "enum":
            externals[key] = EnumDescriptor(name=short_name, full_name=full_name, external=True)
        else:
            externals[key] = MessageDescriptor(name=short_name, full_name=full_name, external=True)
    return externals[key]

