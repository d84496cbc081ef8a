import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

import protoc_gen_events
from protoc_gen_events.exceptions import EntryNotFoundError
from protoc_gen_events.resolvers import closure_cache as closure_cache_module
from protoc_gen_events.resolvers.closure_cache import ClosureCache, clear_cache, closure_cache_for


@pytest.fixture
def resolve_counts(monkeypatch):
    """Count resolver runs, slowing each down to widen first-call races."""
    counts = {"events": 0, "fields": 0, "enums": 0}
    lock = threading.Lock()

    def _counting(base, key):
        class _Counting(base):
            def resolve(self):
                with lock:
                    counts[key] += 1
                time.sleep(0.02)
                return super().resolve()
        return _Counting

    monkeypatch.setattr(
        closure_cache_module, "EventSetResolver", _counting(closure_cache_module.EventSetResolver, "events")
    )
    monkeypatch.setattr(
        closure_cache_module, "FieldClosureResolver", _counting(closure_cache_module.FieldClosureResolver, "fields")
    )
    monkeypatch.setattr(
        closure_cache_module, "EnumClosureResolver", _counting(closure_cache_module.EnumClosureResolver, "enums")
    )
    return counts


def test_each_closure_is_computed_once(tetragon_schema, resolve_counts):
    cache = ClosureCache(tetragon_schema)

    first = (cache.events(), cache.fields(), cache.enums())
    second = (cache.events(), cache.fields(), cache.enums())

    assert resolve_counts == {"events": 1, "fields": 1, "enums": 1}
    assert all(a is b for a, b in zip(first, second))
    assert cache.populated


def test_enums_first_populates_upstream_closures(tetragon_schema, resolve_counts):
    cache = ClosureCache(tetragon_schema)

    cache.enums()
    cache.fields()
    cache.events()

    assert resolve_counts == {"events": 1, "fields": 1, "enums": 1}


def test_concurrent_first_calls_compute_once(tetragon_schema, resolve_counts):
    cache = ClosureCache(tetragon_schema)
    accessors = [cache.enums, cache.fields, cache.events] * 8

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda accessor: accessor(), accessors))

    assert resolve_counts == {"events": 1, "fields": 1, "enums": 1}
    assert all(result is results[0] for result in results[0::3])
    assert all(result is results[1] for result in results[1::3])
    assert all(result is results[2] for result in results[2::3])


def test_failures_are_not_cached(scenario_schema, resolve_counts):
    cache = ClosureCache(scenario_schema)

    for _ in range(2):
        with pytest.raises(EntryNotFoundError):
            cache.fields()

    assert resolve_counts["events"] == 2
    assert resolve_counts["fields"] == 0


def test_clear_forces_recomputation(tetragon_schema, resolve_counts):
    cache = ClosureCache(tetragon_schema)
    cache.enums()

    cache.clear()
    assert not cache.populated
    cache.enums()

    assert resolve_counts == {"events": 2, "fields": 2, "enums": 2}


def test_module_accessors_share_the_cache_of_a_load(tetragon_schema, resolve_counts):
    events = protoc_gen_events.events(tetragon_schema)
    fields = protoc_gen_events.fields(tetragon_schema)
    enums = protoc_gen_events.enums(tetragon_schema)

    assert tetragon_schema.closures is closure_cache_for(tetragon_schema)
    assert protoc_gen_events.events(tetragon_schema) is events
    assert protoc_gen_events.fields(tetragon_schema) is fields
    assert protoc_gen_events.enums(tetragon_schema) is enums
    assert resolve_counts == {"events": 1, "fields": 1, "enums": 1}


def test_fresh_load_gets_a_fresh_cache(events_yaml, resolve_counts):
    from protoc_gen_events.models.schema_loader import SchemaLoader

    loader = SchemaLoader(cache_enabled=False)
    first = loader.load(events_yaml)
    second = loader.load(events_yaml)

    protoc_gen_events.enums(first)
    protoc_gen_events.enums(second)

    assert first.closures is not second.closures
    assert resolve_counts == {"events": 2, "fields": 2, "enums": 2}


def test_clear_cache_resets_one_or_all_loads(tetragon_schema, scenario_schema, resolve_counts):
    scenario_schema.closures = ClosureCache(scenario_schema, entry_message="Resp")
    protoc_gen_events.enums(tetragon_schema)
    protoc_gen_events.enums(scenario_schema)

    clear_cache(tetragon_schema)
    assert not tetragon_schema.closures.populated
    assert scenario_schema.closures.populated

    protoc_gen_events.enums(tetragon_schema)
    clear_cache()
    assert not tetragon_schema.closures.populated
    assert not scenario_schema.closures.populated


def test_concurrent_attach_creates_one_cache(tetragon_schema):
    with ThreadPoolExecutor(max_workers=8) as pool:
        caches = list(pool.map(lambda _: closure_cache_for(tetragon_schema), range(32)))

    assert all(cache is caches[0] for cache in caches)


def _cleared_after_read(key):
    """Stored closure that another thread clears right after each read."""
    def getter(self):
        value = self.__dict__.get(f"_stored_{key}")
        self.__dict__[f"_stored_{key}"] = None
        return value

    def setter(self, value):
        self.__dict__[f"_stored_{key}"] = value
    return property(getter, setter)


class _RacingClearCache(ClosureCache):
    _events = _cleared_after_read("events")
    _fields = _cleared_after_read("fields")
    _enums = _cleared_after_read("enums")


def test_clear_between_check_and_return_never_yields_none(tetragon_schema):
    cache = _RacingClearCache(tetragon_schema)

    for _ in range(2):
        assert [e.name for e in cache.events()] == ["ProcessExec", "ProcessExit", "ProcessKprobe", "Test"]
        assert cache.fields() is not None
        assert [e.name for e in cache.enums()] == ["CapabilitiesType", "KprobeAction"]
