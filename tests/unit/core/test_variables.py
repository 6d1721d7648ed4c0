"""Tests for the Terraform variable store."""

import json
from pathlib import Path

import pytest

from tfdriver.core.errors import InvalidVariableError, InvalidVariablesFileError
from tfdriver.core.variables import (
    VariableStore,
    normalize_value,
    parse_inline_variable,
)


def _write_json(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_load_from_adds_all_keys_to_empty_store(tmp_path: Path) -> None:
    source = _write_json(tmp_path / "a.json", {"region": "eu-west-1", "count": 2})
    store = VariableStore()

    added = store.load_from(source)

    assert added == 2
    assert dict(store) == {"region": "eu-west-1", "count": 2}


def test_first_writer_wins_across_loads(tmp_path: Path) -> None:
    primary = _write_json(tmp_path / "a.json", {"shared": "from-a", "only_a": 1})
    secondary = _write_json(tmp_path / "b.json", {"shared": "from-b", "only_b": True})
    store = VariableStore()

    store.clear()
    store.load_from(primary)
    added = store.load_from(secondary)

    assert added == 1
    assert store["shared"] == "from-a"
    assert set(store) == {"shared", "only_a", "only_b"}


def test_load_does_not_overwrite_programmatic_values(tmp_path: Path) -> None:
    source = _write_json(tmp_path / "vars.json", {"dm_machine_name": "from-file"})
    store = VariableStore()
    store["dm_machine_name"] = "injected"

    store.load_from(source)

    assert store["dm_machine_name"] == "injected"


def test_clear_removes_everything() -> None:
    store = VariableStore({"a": "1", "b": "2"})

    store.clear()

    assert len(store) == 0


def test_load_from_missing_file(tmp_path: Path) -> None:
    store = VariableStore()

    with pytest.raises(InvalidVariablesFileError) as exc_info:
        store.load_from(tmp_path / "missing.json")

    assert exc_info.value.path == tmp_path / "missing.json"


def test_load_from_malformed_json(tmp_path: Path) -> None:
    source = tmp_path / "bad.json"
    source.write_text("{not json", encoding="utf-8")
    store = VariableStore({"kept": "yes"})

    with pytest.raises(InvalidVariablesFileError, match="Unable to read variables"):
        store.load_from(source)

    assert dict(store) == {"kept": "yes"}


def test_load_from_non_object_json(tmp_path: Path) -> None:
    source = _write_json(tmp_path / "list.json", ["a", "b"])

    with pytest.raises(InvalidVariablesFileError, match="expected a JSON object"):
        VariableStore().load_from(source)


def test_persist_writes_integers_as_strings(tmp_path: Path) -> None:
    store = VariableStore({"count": 3, "name": "x"})
    target = tmp_path / "tfvars.json"

    store.persist_to(target)

    raw = json.loads(target.read_text(encoding="utf-8"))
    assert raw == {"count": "3", "name": "x"}
    assert '"count": "3"' in target.read_text(encoding="utf-8")


def test_persist_does_not_change_in_memory_values(tmp_path: Path) -> None:
    store = VariableStore({"count": 3})

    store.persist_to(tmp_path / "tfvars.json")

    assert store["count"] == 3


def test_persist_passes_other_types_through(tmp_path: Path) -> None:
    store = VariableStore(
        {
            "enabled": True,
            "nothing": None,
            "tags": {"env": "prod", "replicas": 2},
            "zones": ["a", "b"],
        }
    )
    target = tmp_path / "tfvars.json"

    store.persist_to(target)

    raw = json.loads(target.read_text(encoding="utf-8"))
    assert raw["enabled"] is True
    assert raw["nothing"] is None
    assert raw["tags"] == {"env": "prod", "replicas": 2}
    assert raw["zones"] == ["a", "b"]


def test_persist_is_pretty_printed(tmp_path: Path) -> None:
    target = tmp_path / "tfvars.json"

    VariableStore({"a": "1"}).persist_to(target)

    assert target.read_text(encoding="utf-8") == '{\n  "a": "1"\n}\n'


def test_normalizing_normalized_values_is_a_noop() -> None:
    store = VariableStore({"count": 3, "ratio": 0.5, "flag": False, "name": "x"})

    once = store.normalized()
    twice = VariableStore(once).normalized()

    assert once == twice
    assert once == {"count": "3", "ratio": 0.5, "flag": False, "name": "x"}


def test_normalize_value_keeps_booleans() -> None:
    assert normalize_value(True) is True
    assert normalize_value(22) == "22"


def test_persist_writes_floats_as_json_numbers(tmp_path: Path) -> None:
    target = tmp_path / "tfvars.json"

    VariableStore({"ratio": 0.5, "big": 1e20}).persist_to(target)

    raw = json.loads(target.read_text(encoding="utf-8"))
    assert raw == {"ratio": 0.5, "big": 1e20}


def test_set_default_is_additive() -> None:
    store = VariableStore({"a": "original"})

    assert store.set_default("a", "replacement") is False
    assert store.set_default("b", "new") is True
    assert dict(store) == {"a": "original", "b": "new"}


def test_load_inline_variables() -> None:
    store = VariableStore({"existing": "keep"})

    added = store.load_inline(["size=small", "existing=overwritten", "expr=a=b"])

    assert added == 2
    assert store["size"] == "small"
    assert store["existing"] == "keep"
    assert store["expr"] == "a=b"


def test_load_inline_rejects_malformed_item_before_adding_any() -> None:
    store = VariableStore()

    with pytest.raises(InvalidVariableError) as exc_info:
        store.load_inline(["ok=1", "broken"])

    assert exc_info.value.item == "broken"
    assert len(store) == 0


def test_parse_inline_variable_allows_empty_value() -> None:
    assert parse_inline_variable("name=") == ("name", "")


def test_parse_inline_variable_rejects_empty_name() -> None:
    with pytest.raises(InvalidVariableError):
        parse_inline_variable("=value")
