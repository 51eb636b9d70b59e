"""
Name: Key/Value Storage Tests

Responsibilities:
  - InMemoryStorage basic contract
  - JsonFileStorage persistence, unreadable files and unavailable paths
"""

import json

import pytest
from oficina.crosscutting.exceptions import StorageUnavailableError
from oficina.infrastructure.store import InMemoryStorage, JsonFileStorage

pytestmark = pytest.mark.unit


def test_in_memory_storage_roundtrip_and_remove():
    storage = InMemoryStorage()
    storage.set_item("b", "2")
    storage.set_item("a", "1")

    assert storage.get_item("a") == "1"
    assert storage.keys() == ["a", "b"]

    storage.remove_item("a")
    storage.remove_item("missing")
    assert storage.get_item("a") is None


def test_json_file_storage_persists_across_instances(tmp_path):
    path = tmp_path / "profile" / "local_storage.json"
    JsonFileStorage(path).set_item("Clientes", "[]")

    reopened = JsonFileStorage(path)

    assert reopened.get_item("Clientes") == "[]"
    assert json.loads(path.read_text(encoding="utf-8")) == {"Clientes": "[]"}


def test_json_file_storage_treats_unreadable_file_as_empty(tmp_path):
    path = tmp_path / "local_storage.json"
    path.write_text("not-json", encoding="utf-8")
    storage = JsonFileStorage(path)

    assert storage.get_item("Clientes") is None

    storage.set_item("Clientes", "[]")
    assert storage.keys() == ["Clientes"]


def test_json_file_storage_raises_unavailable_when_path_is_a_directory(tmp_path):
    storage = JsonFileStorage(tmp_path)

    with pytest.raises(StorageUnavailableError):
        storage.get_item("Clientes")

    with pytest.raises(StorageUnavailableError):
        storage.set_item("Clientes", "[]")
