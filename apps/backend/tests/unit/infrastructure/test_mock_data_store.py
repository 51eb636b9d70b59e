"""
Name: Mock Data Store Tests

Responsibilities:
  - Seeding on first touch of known tables
  - Last write wins (no merge)
  - Fallback to in-memory defaults when storage is unavailable
  - Malformed entries are discarded and re-seeded
"""

from functools import partial

import pytest
from oficina.crosscutting.exceptions import StorageUnavailableError
from oficina.identity.passwords import hash_password
from oficina.infrastructure.store import (
    HEADERS,
    InMemoryStorage,
    MockDataStore,
    Tables,
    fixture_rows,
)

pytestmark = pytest.mark.unit


class _UnavailableStorage:
    """Storage que siempre falla (perfil bloqueado)."""

    def get_item(self, key):
        raise StorageUnavailableError("storage down")

    def set_item(self, key, value):
        raise StorageUnavailableError("storage down")

    def remove_item(self, key):
        raise StorageUnavailableError("storage down")

    def keys(self):
        raise StorageUnavailableError("storage down")


def _store(storage) -> MockDataStore:
    return MockDataStore(
        storage, seed=partial(fixture_rows, password_hasher=hash_password)
    )


def test_first_read_seeds_known_table_and_persists_it():
    storage = InMemoryStorage()
    store = _store(storage)

    rows = store.read(Tables.CLIENTS)

    assert rows[0] == HEADERS[Tables.CLIENTS]
    assert [r[2] for r in rows[1:]] == [
        "123.456.789-00",
        "987.654.321-00",
        "456.789.123-00",
    ]
    assert Tables.CLIENTS in storage.keys()


def test_unknown_table_reads_empty_and_is_not_seeded():
    storage = InMemoryStorage()
    store = _store(storage)

    assert store.read("Desconhecida") == []
    assert "Desconhecida" not in storage.keys()


def test_seeded_shop_tables_exist_without_data_rows():
    store = _store(InMemoryStorage())

    for table in (Tables.SERVICES, Tables.QUOTES, Tables.APPOINTMENTS):
        assert store.read(table) == [HEADERS[table]]
    assert len(store.read(Tables.STOCK)) > 1


def test_last_write_wins_without_merge():
    store = _store(InMemoryStorage())

    assert store.write(Tables.SERVICES, [["ID"], [1, "troca de óleo"]]) is True
    assert store.write(Tables.SERVICES, [["ID"], [2, "alinhamento"]]) is True

    assert store.read(Tables.SERVICES) == [["ID"], [2, "alinhamento"]]


def test_read_returns_copies():
    store = _store(InMemoryStorage())
    rows = store.read(Tables.CLIENTS)
    rows.append(["mutated"])

    assert ["mutated"] not in store.read(Tables.CLIENTS)


def test_malformed_entry_is_discarded_and_reseeded():
    storage = InMemoryStorage({Tables.CLIENTS: "{not json"})
    store = _store(storage)

    rows = store.read(Tables.CLIENTS)

    assert rows[0] == HEADERS[Tables.CLIENTS]
    assert len(rows) == 4


def test_non_list_entry_is_treated_as_malformed():
    storage = InMemoryStorage({Tables.VEHICLES: '{"a": 1}'})
    store = _store(storage)

    assert store.read(Tables.VEHICLES)[0] == HEADERS[Tables.VEHICLES]


def test_unavailable_storage_falls_back_to_fixture_defaults():
    store = _store(_UnavailableStorage())

    rows = store.read(Tables.CLIENTS)

    assert rows[0] == HEADERS[Tables.CLIENTS]
    assert len(rows) == 4


def test_unavailable_storage_write_returns_false_but_keeps_value_in_memory():
    store = _store(_UnavailableStorage())

    ok = store.write(Tables.SERVICES, [["ID"], [7, "revisão"]])

    assert ok is False
    assert store.read(Tables.SERVICES) == [["ID"], [7, "revisão"]]


class _ReadOnlyStorage(InMemoryStorage):
    """Lecturas OK, escrituras fallan (disco lleno / solo lectura)."""

    def __init__(self) -> None:
        super().__init__()
        self.writable = True

    def set_item(self, key, value):
        if not self.writable:
            raise StorageUnavailableError("read-only")
        super().set_item(key, value)


def test_failed_write_is_read_back_while_storage_still_reads():
    storage = _ReadOnlyStorage()
    store = _store(storage)
    employees = store.read(Tables.EMPLOYEES)
    assert len(employees) == 3

    storage.writable = False
    ok = store.write(Tables.EMPLOYEES, employees[:2])

    assert ok is False
    assert store.read(Tables.EMPLOYEES) == employees[:2]


def test_next_successful_write_replaces_the_retained_value():
    storage = _ReadOnlyStorage()
    store = _store(storage)
    employees = store.read(Tables.EMPLOYEES)

    storage.writable = False
    store.write(Tables.EMPLOYEES, employees[:2])
    storage.writable = True

    assert store.write(Tables.EMPLOYEES, employees[:1]) is True
    assert store.read(Tables.EMPLOYEES) == employees[:1]
    assert len(_store(storage).read(Tables.EMPLOYEES)) == 1
