"""
CRC - domain/repositories.py

Name
- Domain Repository Interfaces (Protocols)

Responsibilities
- Define persistence contracts for the domain layer (ports).
- Keep identity/session/activity logic independent from the storage backend
  (in-memory dict, JSON file standing in for browser local storage).

Collaborators
- domain.entities: Identity, ActivityLogEntry, ClientRecord, EmployeeRecord, AdminAccount
- infrastructure.store: KeyValueStorage implementations + MockDataStore
- infrastructure.repositories: table-backed repositories

Constraints
- Pure interfaces only: no side effects, no infrastructure imports.
- Implementations MUST match method signatures exactly.

Notes
- We use typing.Protocol for structural subtyping ("duck typing").
- Rows are heterogeneous lists; the data store does not validate schemas.
"""

from typing import Any, List, Optional, Protocol

from .entities import (
    ActivityLogEntry,
    AdminAccount,
    ClientRecord,
    EmployeeRecord,
    VehicleRecord,
)

Row = List[Any]


class KeyValueStorage(Protocol):
    """
    R: Raw string storage keyed by name (the browser's localStorage contract).

    Implementations raise StorageUnavailableError when the medium is not
    accessible.
    """

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def keys(self) -> List[str]: ...


class DataStore(Protocol):
    """
    R: Table-level persistence (header row + data rows per table name).

    No transactions, no schema validation: last write wins.
    """

    def read(self, table: str) -> List[Row]: ...

    def write(self, table: str, rows: List[Any]) -> bool: ...


class IdentityRepository(Protocol):
    """R: Lookups used by the Authenticator plus employee/admin maintenance."""

    def list_clients(self) -> List[ClientRecord]: ...

    def list_vehicles(self) -> List[VehicleRecord]: ...

    def list_employees(self) -> List[EmployeeRecord]: ...

    def get_employee(self, employee_id: str) -> Optional[EmployeeRecord]: ...

    def save_employees(self, employees: List[EmployeeRecord]) -> bool: ...

    def get_admin(self) -> Optional[AdminAccount]: ...

    def save_admin(self, admin: AdminAccount) -> bool: ...


class ActivityLogRepository(Protocol):
    """R: Append-only, capped, newest-first activity log."""

    def append(self, entry: ActivityLogEntry) -> None: ...

    def list_entries(self) -> List[ActivityLogEntry]: ...

    def clear(self) -> None: ...
