import logging
import textwrap
from pathlib import Path
from typing import Callable

import pytest

from protoc_gen_events.models.descriptors import SchemaGraph
from protoc_gen_events.models.schema_loader import SchemaLoader

DATA_DIR = Path(__file__).parent / "data"

# Entry message "Resp" with union "event" over Exit and Exec. Declaration
# order differs from both the union order and the discovery order.
SCENARIO_SCHEMA = """
package: demo
messages:
  - name: Resp
    fields:
      - {name: exit, type: Exit, oneof: event}
      - {name: exec, type: Exec, oneof: event}
      - {name: node_name, type: string}
  - name: Exec
    fields:
      - {name: process, type: Process}
  - name: Process
    fields:
      - {name: binary, type: string}
      - {name: pod, type: Pod}
  - name: Exit
    fields:
      - {name: code, type: uint32}
  - name: Pod
    fields:
      - {name: name, type: string}
      - {name: status, type: PodStatus}
enums:
  - name: Unused
    values: [UNUSED_A]
  - name: PodStatus
    values: [POD_UNKNOWN, POD_RUNNING]
"""


@pytest.fixture
def load_schema() -> Callable[[str], SchemaGraph]:
    """Return a helper loading a schema unit from an (indented) YAML string."""
    loader = SchemaLoader(cache_enabled=False)

    def _load(content: str) -> SchemaGraph:
        return loader.loads(textwrap.dedent(content))
    return _load


@pytest.fixture
def scenario_source() -> str:
    return SCENARIO_SCHEMA


@pytest.fixture
def scenario_schema(load_schema, scenario_source) -> SchemaGraph:
    return load_schema(scenario_source)


@pytest.fixture
def events_yaml() -> Path:
    return DATA_DIR / "events.yaml"


@pytest.fixture
def tetragon_schema(events_yaml) -> SchemaGraph:
    return SchemaLoader(cache_enabled=False).load(events_yaml)


@pytest.fixture(autouse=True)
def restore_root_logging():
    """The CLI reconfigures root logging; put the previous handlers back afterwards."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
