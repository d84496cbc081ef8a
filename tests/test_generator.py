from pathlib import Path

import pytest

from protoc_gen_events.exceptions import EntryNotFoundError, GenerationError
from protoc_gen_events.file_io.template_renderer import TemplateRenderer
from protoc_gen_events.generator import CodeGenerator, generate
from protoc_gen_events.resolvers.closure_cache import ClosureCache


def _exec_module(path: Path) -> dict:
    namespace: dict = {}
    exec(compile(path.read_text(encoding="utf-8"), str(path), "exec"), namespace)
    return namespace


@pytest.fixture
def generated(scenario_schema, tmp_path):
    cache = ClosureCache(scenario_schema, entry_message="Resp")
    written = CodeGenerator(scenario_schema, str(tmp_path), cache=cache).generate()
    return tmp_path / "codegen", written


def test_one_module_per_discovered_type(generated):
    root, written = generated

    expected = {
        root / "events" / "exec.py",
        root / "events" / "exit.py",
        root / "fields" / "process.py",
        root / "fields" / "pod.py",
        root / "enums" / "pod_status.py",
        root / "events" / "__init__.py",
        root / "fields" / "__init__.py",
        root / "enums" / "__init__.py",
        root / "__init__.py",
    }
    assert set(written) == expected
    assert all(path.is_file() for path in expected)
    assert not (root / "enums" / "unused.py").exists()


def test_generated_files_carry_header(generated):
    _, written = generated

    for path in written:
        content = path.read_text(encoding="utf-8")
        assert content.startswith("# SPDX-License-Identifier: Apache-2.0\n")
        assert "# Code generated by protoc-gen-events. DO NOT EDIT." in content


def test_event_module_contents(generated):
    root, _ = generated

    exec_event = _exec_module(root / "events" / "exec.py")
    assert exec_event["NAME"] == "Exec"
    assert exec_event["FULL_NAME"] == "demo.Exec"
    assert exec_event["ONEOF_FIELD"] == "exec"
    assert exec_event["IS_PROCESS_EVENT"] is True
    assert exec_event["IS_PARENT_EVENT"] is False
    assert exec_event["FIELDS"] == (("process", "message", "demo.Process", False),)

    exit_event = _exec_module(root / "events" / "exit.py")
    assert exit_event["IS_PROCESS_EVENT"] is False
    assert exit_event["FIELDS"] == (("code", "scalar", "uint32", False),)


def test_field_and_enum_module_contents(generated):
    root, _ = generated

    pod = _exec_module(root / "fields" / "pod.py")
    assert pod["FIELDS"] == (
        ("name", "scalar", "string", False),
        ("status", "enum", "demo.PodStatus", False),
    )

    status = _exec_module(root / "enums" / "pod_status.py")
    assert status["VALUES"] == {"POD_UNKNOWN": 0, "POD_RUNNING": 1}


def test_index_modules(generated):
    root, _ = generated

    index = _exec_module(root / "__init__.py")
    assert index["EVENTS"] == ("demo.Exec", "demo.Exit")
    assert index["FIELD_TYPES"] == ("demo.Process", "demo.Pod")
    assert index["ENUMS"] == ("demo.PodStatus",)

    assert _exec_module(root / "fields" / "__init__.py")["__all__"] == ["process", "pod"]


def test_tetragon_process_and_parent_events(tetragon_schema, tmp_path):
    generate(tetragon_schema, str(tmp_path))

    process_exec = _exec_module(tmp_path / "codegen" / "events" / "process_exec.py")
    assert process_exec["IS_PROCESS_EVENT"] is True
    assert process_exec["IS_PARENT_EVENT"] is True
    assert ("ancestors", "message", "tetragon.Process", True) in process_exec["FIELDS"]

    capabilities = _exec_module(tmp_path / "codegen" / "enums" / "capabilities_type.py")
    assert capabilities["VALUES"]["CAP_SYS_ADMIN"] == 21


def test_shape_error_writes_nothing(scenario_schema, tmp_path):
    with pytest.raises(EntryNotFoundError):
        generate(scenario_schema, str(tmp_path))

    assert not (tmp_path / "codegen").exists()


def test_template_errors_become_generation_errors(scenario_schema, tmp_path):
    template_dir = tmp_path / "templates"
    template_dir.mkdir()
    (template_dir / "event.py.jinja2").write_text("{{ undefined_variable }}\n")
    cache = ClosureCache(scenario_schema, entry_message="Resp")
    generator = CodeGenerator(
        scenario_schema, str(tmp_path / "out"), renderer=TemplateRenderer(str(template_dir)), cache=cache
    )

    with pytest.raises(GenerationError, match="event.py.jinja2"):
        generator.generate()


def test_module_name_collisions_are_rejected(load_schema, tmp_path):
    schema = load_schema("""
        package: web
        messages:
          - name: GetEventsResponse
            fields:
              - {name: upper, type: HTTPServer, oneof: event}
              - {name: lower, type: HttpServer, oneof: event}
          - name: HTTPServer
          - name: HttpServer
    """)

    with pytest.raises(GenerationError, match="web.HTTPServer.*web.HttpServer.*events/http_server.py"):
        generate(schema, str(tmp_path))

    assert not (tmp_path / "codegen").exists()
