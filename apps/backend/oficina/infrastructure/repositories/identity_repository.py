"""
============================================================
TARJETA CRC - infrastructure/repositories/identity_repository.py
============================================================
Class: StoreIdentityRepository

Responsibilities:
  - Exponer las hojas Clientes / Veículos / Funcionários / Admin como
    registros tipados sobre el MockDataStore.
  - Persistir cambios de funcionários y de la cuenta admin.

Collaborators:
  - domain.repositories.DataStore (MockDataStore)
  - infrastructure.repositories.tables (mappers)

Constraints / Notes:
  - Cada lectura va al data store (no hay cache): dos pestañas/procesos que
    escriben la misma hoja siguen la regla "último write gana".
============================================================
"""

from __future__ import annotations

from typing import List, Optional

from ...domain.entities import AdminAccount, ClientRecord, EmployeeRecord, VehicleRecord
from ...domain.repositories import DataStore
from ..store.fixtures import Tables
from . import tables


class StoreIdentityRepository:
    """Repositorio de identidades respaldado por el Mock Data Store."""

    def __init__(self, store: DataStore) -> None:
        self._store = store

    # -------------------------
    # Clientes / veículos (solo lectura)
    # -------------------------
    def list_clients(self) -> List[ClientRecord]:
        return tables.CLIENTS.records(self._store.read(Tables.CLIENTS))

    def list_vehicles(self) -> List[VehicleRecord]:
        return tables.VEHICLES.records(self._store.read(Tables.VEHICLES))

    # -------------------------
    # Funcionários
    # -------------------------
    def list_employees(self) -> List[EmployeeRecord]:
        return tables.EMPLOYEES.records(self._store.read(Tables.EMPLOYEES))

    def get_employee(self, employee_id: str) -> Optional[EmployeeRecord]:
        for employee in self.list_employees():
            if employee.id == employee_id:
                return employee
        return None

    def save_employees(self, employees: List[EmployeeRecord]) -> bool:
        return self._store.write(Tables.EMPLOYEES, tables.EMPLOYEES.rows(employees))

    # -------------------------
    # Admin (hoja de una sola fila)
    # -------------------------
    def get_admin(self) -> Optional[AdminAccount]:
        accounts = tables.ADMIN.records(self._store.read(Tables.ADMIN))
        return accounts[0] if accounts else None

    def save_admin(self, admin: AdminAccount) -> bool:
        return self._store.write(Tables.ADMIN, tables.ADMIN.rows([admin]))
