import json

import pytest

from facilitator_analytics.exceptions import FacilitatorConfigError
from facilitator_analytics.facilitators import load_facilitators


def write_registry(tmp_path, payload) -> str:
    path = tmp_path / "facilitators.json"
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload))
    return str(path)


def test_bundled_registry_loads():
    registry = load_facilitators()

    assert len(registry) > 0
    assert all(address == address.lower() for address in registry.all_addresses)


def test_lookups(tmp_path):
    path = write_registry(tmp_path, {"facilitators": [
        {"id": "one", "name": "One", "addresses": ["0x" + "A" * 40, "0x" + "b" * 40]},
        {"id": "two", "name": "Two", "addresses": ["0x" + "c" * 40]},
    ]})

    registry = load_facilitators(path)

    assert registry.names == ["One", "Two"]
    assert registry.all_addresses == ["0x" + "a" * 40, "0x" + "b" * 40, "0x" + "c" * 40]
    assert registry.get_by_name("Two").id == "two"
    assert registry.get_by_name("Unknown") is None


def test_env_var_overrides_bundled_registry(tmp_path, monkeypatch):
    path = write_registry(tmp_path, {"facilitators": [
        {"id": "env", "name": "From Env", "addresses": ["0x" + "d" * 40]},
    ]})
    monkeypatch.setenv("FACILITATORS_CONFIG", path)

    assert load_facilitators().names == ["From Env"]


@pytest.mark.parametrize("payload", [
    "{not json",
    {"something_else": []},
    {"facilitators": [{"id": "x", "name": "X", "addresses": []}]},
    {"facilitators": [{"id": "x", "name": "X", "addresses": ["0x1234"]}]},
    {"facilitators": [
        {"id": "x", "name": "Same", "addresses": ["0x" + "1" * 40]},
        {"id": "y", "name": "Same", "addresses": ["0x" + "2" * 40]},
    ]},
])
def test_invalid_registry_is_rejected(tmp_path, payload):
    with pytest.raises(FacilitatorConfigError):
        load_facilitators(write_registry(tmp_path, payload))


def test_missing_registry_file(tmp_path):
    with pytest.raises(FacilitatorConfigError):
        load_facilitators(str(tmp_path / "missing.json"))
