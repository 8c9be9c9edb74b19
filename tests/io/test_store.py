"""Tests for the in-memory configuration store."""

from __future__ import annotations

import pytest

from plcmap.core import AddressMapping
from plcmap.io import MemoryConfigStore
from plcmap.opcua import build_config


@pytest.fixture
def store() -> MemoryConfigStore:
    return MemoryConfigStore()


@pytest.fixture
def config() -> dict:
    return build_config([AddressMapping("D1", "WORD", "P1_D_1_W1")])


def test_create_and_get(store, config):
    saved = store.create("line 1", config, description="first draft")

    assert store.get(saved.id) == saved
    assert saved.name == "line 1"
    assert saved.config_data == config
    assert saved.description == "first draft"
    assert saved.created_at
    assert len(store) == 1


def test_ids_are_unique(store, config):
    first = store.create("a", config)
    second = store.create("b", config)
    assert first.id != second.id
    assert [c.name for c in store.list_configs()] == ["a", "b"]


def test_name_required(store, config):
    with pytest.raises(ValueError, match="name is required"):
        store.create("", config)


def test_update(store, config):
    saved = store.create("a", config)
    updated = store.update(saved.id, name="renamed", description="notes")

    assert updated.name == "renamed"
    assert updated.id == saved.id
    assert updated.created_at == saved.created_at
    assert store.get(saved.id) == updated


def test_update_unknown_field(store, config):
    saved = store.create("a", config)
    with pytest.raises(ValueError, match="created_at"):
        store.update(saved.id, created_at="yesterday")


def test_unknown_id(store):
    assert store.get("nope") is None
    assert store.update("nope", name="x") is None
    assert store.delete("nope") is False


def test_delete(store, config):
    saved = store.create("a", config)
    assert store.delete(saved.id) is True
    assert store.get(saved.id) is None
    assert len(store) == 0


def test_create_rejects_invalid_config(store):
    with pytest.raises(ValueError, match="'plcs' list"):
        store.create("broken", {"plc": []})
    assert len(store) == 0


def test_update_rejects_invalid_config(store, config):
    saved = store.create("a", config)
    broken = {"plcs": [{**config["plcs"][0], "plc_ip": "nowhere"}]}
    with pytest.raises(ValueError, match="Invalid IP address"):
        store.update(saved.id, config_data=broken)
    assert store.get(saved.id) == saved
