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

"""CLI entry point for generating code from a schema unit."""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from .config import codegen_config
from .exceptions import CodegenError
from .generator import CodeGenerator
from .models.descriptors import SchemaGraph
from .models.schema_loader import SchemaLoader
from .resolvers.closure_cache import closure_cache_for

logger = logging.getLogger(__name__)


def closure_summary(schema: SchemaGraph) -> Dict[str, Any]:
    """Fully-qualified names of the three closures, in resolution order."""
    cache = closure_cache_for(schema)
    return {
        "events": [msg.full_name for msg in cache.events()],
        "fields": [msg.full_name for msg in cache.fields()],
        "enums": [enum.full_name for enum in cache.enums()],
    }


def _print_summary(summary: Dict[str, Any], output_format: str) -> None:
    if output_format == "json":
        print(json.dumps(summary, indent=2))
        return

    for kind in ("events", "fields", "enums"):
        print(f"{kind} ({len(summary[kind])}):")
        for name in summary[kind]:
            print(f"  {name}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the generator CLI."""
    parser = argparse.ArgumentParser(
        prog="protoc-gen-events",
        description="Generate per-type modules for the events reachable from a schema unit",
    )
    parser.add_argument("schema", help="Path to the schema unit YAML file")
    parser.add_argument(
        "-o",
        "--output-dir",
        default=codegen_config.output_dir,
        help=f"Directory to write generated code into (default: {codegen_config.output_dir})",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print the resolved events, field types and enums instead of generating code",
    )
    parser.add_argument(
        "--format",
        choices=["human", "json"],
        default="human",
        help="Output format for --list (default: human)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    codegen_config.set_logging("DEBUG" if args.verbose else None)

    try:
        schema = SchemaLoader().load(args.schema)
        if args.list:
            _print_summary(closure_summary(schema), args.format)
        else:
            CodeGenerator(schema, args.output_dir).generate()
    except CodegenError as exc:
        logger.error(f"{type(exc).__name__}: {exc}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
