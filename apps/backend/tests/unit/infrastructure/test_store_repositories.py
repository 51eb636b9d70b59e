"""
Name: Store-backed Repository Tests

Responsibilities:
  - Row <-> record mapping (header skip, broken rows dropped)
  - Identity repository over seeded sheets
  - Activity log repository: newest-first and capped
"""

from datetime import datetime, timedelta, timezone

import pytest
from oficina.crosscutting.exceptions import StorageUnavailableError
from oficina.domain.entities import ActivityLogEntry, Role
from oficina.infrastructure.repositories import StoreActivityLogRepository
from oficina.infrastructure.repositories import tables
from oficina.infrastructure.store import InMemoryStorage, MockDataStore, Tables

pytestmark = pytest.mark.unit

_T0 = datetime(2024, 5, 10, 9, 0, tzinfo=timezone.utc)


def _entry(n: int) -> ActivityLogEntry:
    return ActivityLogEntry(
        id=f"log_{n}",
        actor_id="admin",
        actor_name="Administrador",
        action="TEST",
        details=f"entrada {n}",
        timestamp=_T0 + timedelta(seconds=n),
        module="SISTEMA",
    )


# -----------------------------------------------------------------------------
# Mapping
# -----------------------------------------------------------------------------


def test_client_mapper_skips_header_and_drops_broken_rows():
    rows = [
        ["ID", "Nome", "CPF"],
        [1, "João Silva", "123.456.789-00"],
        ["x", "Sem ID", "000"],
        ["curta"],
        [2, "Maria Oliveira", "987.654.321-00", "maria@example.com"],
    ]

    clients = tables.CLIENTS.records(rows)

    assert [c.id for c in clients] == [1, 2]
    assert clients[1].email == "maria@example.com"
    assert clients[0].address == ""


def test_employee_mapper_parses_active_flag_variants():
    base = ["func9", "Teste", "teste", "t@o.com", "hash"]
    rows = [
        [*base, True, _T0.isoformat()],
        [*base, "sim", _T0.isoformat()],
        [*base, "false", _T0.isoformat()],
    ]

    assert [e.is_active for e in tables.EMPLOYEES.records(rows)] == [
        True,
        True,
        False,
    ]


def test_mapper_rows_writes_canonical_header():
    employees = tables.EMPLOYEES.records(
        [["func1", "José", "jose", "j@o.com", "h", True, _T0.isoformat()]]
    )

    rows = tables.EMPLOYEES.rows(employees)

    assert rows[0] == tables.EMPLOYEES.header
    assert rows[1][:6] == ["func1", "José", "jose", "j@o.com", "h", True]


# -----------------------------------------------------------------------------
# Identity repository
# -----------------------------------------------------------------------------


def test_identity_repository_reads_seeded_sheets(identity_repository):
    clients = identity_repository.list_clients()
    employees = identity_repository.list_employees()
    admin = identity_repository.get_admin()

    assert [c.name for c in clients] == ["João Silva", "Maria Oliveira", "Carlos Santos"]
    assert {e.username for e in employees} == {"jose", "ana"}
    assert admin.username == "admin"
    assert admin.to_identity().role is Role.ADMIN
    assert len(identity_repository.list_vehicles()) == 2


def test_identity_repository_saves_employees(identity_repository):
    employees = identity_repository.list_employees()

    identity_repository.save_employees(employees[:1])

    assert [e.id for e in identity_repository.list_employees()] == [employees[0].id]
    assert identity_repository.get_employee(employees[1].id) is None


def test_employee_change_survives_failed_write(
    identity_repository, storage, monkeypatch
):
    employees = identity_repository.list_employees()

    def _fail(key, value):
        raise StorageUnavailableError("disco cheio")

    monkeypatch.setattr(storage, "set_item", _fail)

    assert identity_repository.save_employees(employees[:1]) is False
    assert [e.id for e in identity_repository.list_employees()] == [employees[0].id]


# -----------------------------------------------------------------------------
# Activity log repository
# -----------------------------------------------------------------------------


def test_activity_log_is_newest_first():
    repo = StoreActivityLogRepository(MockDataStore(InMemoryStorage()), max_entries=5)

    for n in range(3):
        repo.append(_entry(n))

    assert [e.id for e in repo.list_entries()] == ["log_2", "log_1", "log_0"]


def test_activity_log_cap_evicts_oldest():
    repo = StoreActivityLogRepository(MockDataStore(InMemoryStorage()), max_entries=3)

    for n in range(4):
        repo.append(_entry(n))

    entries = repo.list_entries()
    assert len(entries) == 3
    assert [e.id for e in entries] == ["log_3", "log_2", "log_1"]


def test_activity_log_default_cap_is_1000_and_1001st_insert_evicts_oldest():
    store = MockDataStore(InMemoryStorage())
    seeded = [
        {
            "id": f"log_{n}",
            "actor_id": "admin",
            "actor_name": "Administrador",
            "action": "TEST",
            "details": "",
            "timestamp": (_T0 + timedelta(seconds=n)).isoformat(),
            "module": "SISTEMA",
        }
        for n in range(999, -1, -1)
    ]
    store.write(Tables.ACTIVITY_LOGS, seeded)
    repo = StoreActivityLogRepository(store)

    repo.append(_entry(1000))

    entries = repo.list_entries()
    assert repo.max_entries == 1000
    assert len(entries) == 1000
    assert entries[0].id == "log_1000"
    assert "log_0" not in {e.id for e in entries}


def test_activity_log_skips_unreadable_entries_and_clears():
    store = MockDataStore(InMemoryStorage())
    store.write(Tables.ACTIVITY_LOGS, [{"id": "broken"}, "junk"])
    repo = StoreActivityLogRepository(store)
    repo.append(_entry(1))

    assert [e.id for e in repo.list_entries()] == ["log_1"]

    repo.clear()
    assert repo.list_entries() == []
