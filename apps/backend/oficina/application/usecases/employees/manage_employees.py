"""
===============================================================================
USE CASES: Manage Employees (list / create / update / delete / toggle)
===============================================================================

Name:
    Employee management use cases

Business Goal:
    Permitir al administrador mantener la hoja de funcionários: altas, edición,
    bajas y activación/desactivación. Cada acción queda en el log de actividad.

Invariantes:
    - name, email y password son obligatorios al crear.
    - El username de login es único (comparación exacta).
    - El rol no se modifica por update (siempre funcionário).
    - Las contraseñas se persisten hasheadas.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Classes:
    ListEmployeesUseCase, CreateEmployeeUseCase, UpdateEmployeeUseCase,
    DeleteEmployeeUseCase, ToggleEmployeeStatusUseCase

Collaborators:
    - domain.repositories.IdentityRepository
    - application.activity_log.ActivityLogger
    - identity.passwords.hash_password (inyectable)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, List, Optional
from uuid import uuid4

from ....crosscutting.logger import logger
from ....domain.entities import EmployeeRecord
from ....domain.repositories import IdentityRepository
from ....identity.passwords import hash_password
from ....identity.session import Clock, SessionStore, utcnow
from ...activity_log import ActivityLogger, ActivityModule
from .employee_results import (
    EmployeeError,
    EmployeeErrorCode,
    EmployeeListResult,
    EmployeeResult,
)

PasswordHasher = Callable[[str], str]

REQUIRED_FIELDS_MESSAGE = "Por favor, preencha todos os campos obrigatórios"


def _not_found(employee_id: str) -> EmployeeResult:
    return EmployeeResult(
        error=EmployeeError(
            code=EmployeeErrorCode.NOT_FOUND,
            message=f"Funcionário '{employee_id}' não encontrado",
        )
    )


def _username_taken(
    employees: List[EmployeeRecord], username: str, *, exclude_id: str | None = None
) -> bool:
    return any(e.username == username and e.id != exclude_id for e in employees)


def _conflict(username: str) -> EmployeeResult:
    return EmployeeResult(
        error=EmployeeError(
            code=EmployeeErrorCode.CONFLICT,
            message=f"Usuário '{username}' já está em uso",
        )
    )


def _default_username(email: str) -> str:
    return email.split("@", 1)[0].strip().lower()


@dataclass
class CreateEmployeeInput:
    name: str
    email: str
    password: str
    username: str | None = None
    is_active: bool = True


@dataclass
class UpdateEmployeeInput:
    name: str | None = None
    email: str | None = None
    username: str | None = None
    password: str | None = None
    is_active: bool | None = None


class ListEmployeesUseCase:
    def __init__(self, repository: IdentityRepository):
        self.repository = repository

    def execute(self, search: str | None = None) -> EmployeeListResult:
        employees = self.repository.list_employees()
        term = (search or "").strip().lower()
        if term:
            employees = [
                e
                for e in employees
                if term in e.name.lower() or term in (e.email or "").lower()
            ]
        return EmployeeListResult(employees=employees)


class CreateEmployeeUseCase:
    """R: Create employee (hashed password, unique username)."""

    def __init__(
        self,
        repository: IdentityRepository,
        activity: ActivityLogger,
        *,
        password_hasher: PasswordHasher = hash_password,
        clock: Clock = utcnow,
    ):
        self.repository = repository
        self.activity = activity
        self._hash = password_hasher
        self._clock = clock

    def execute(
        self, input_data: CreateEmployeeInput, session: Optional[SessionStore]
    ) -> EmployeeResult:
        name = (input_data.name or "").strip()
        email = (input_data.email or "").strip()
        if not name or not email or not input_data.password:
            return EmployeeResult(
                error=EmployeeError(
                    code=EmployeeErrorCode.VALIDATION_ERROR,
                    message=REQUIRED_FIELDS_MESSAGE,
                )
            )

        username = (input_data.username or "").strip() or _default_username(email)
        employees = self.repository.list_employees()
        if _username_taken(employees, username):
            return _conflict(username)

        employee = EmployeeRecord(
            id=f"func_{uuid4().hex[:12]}",
            name=name,
            username=username,
            email=email,
            password_hash=self._hash(input_data.password),
            is_active=input_data.is_active,
            created_at=self._clock(),
        )
        persisted = self.repository.save_employees([*employees, employee])

        self.activity.log(
            session,
            "CREATE_EMPLOYEE",
            f"Novo funcionário criado: {employee.name} - {employee.email}",
            ActivityModule.EMPLOYEES,
        )
        logger.info("Empleado creado", extra={"employee_id": employee.id})
        return EmployeeResult(employee=employee, persisted=persisted)


class UpdateEmployeeUseCase:
    """R: Update editable fields; role stays employee."""

    def __init__(
        self,
        repository: IdentityRepository,
        activity: ActivityLogger,
        *,
        password_hasher: PasswordHasher = hash_password,
    ):
        self.repository = repository
        self.activity = activity
        self._hash = password_hasher

    def execute(
        self,
        employee_id: str,
        input_data: UpdateEmployeeInput,
        session: Optional[SessionStore],
    ) -> EmployeeResult:
        employees = self.repository.list_employees()
        index = next((i for i, e in enumerate(employees) if e.id == employee_id), None)
        if index is None:
            return _not_found(employee_id)

        current = employees[index]
        changes: dict[str, object] = {}

        for field_name in ("name", "email", "username"):
            value = getattr(input_data, field_name)
            if value is None:
                continue
            value = value.strip()
            if not value:
                return EmployeeResult(
                    error=EmployeeError(
                        code=EmployeeErrorCode.VALIDATION_ERROR,
                        message=REQUIRED_FIELDS_MESSAGE,
                    )
                )
            changes[field_name] = value

        new_username = changes.get("username")
        if new_username and _username_taken(
            employees, str(new_username), exclude_id=employee_id
        ):
            return _conflict(str(new_username))

        if input_data.password:
            changes["password_hash"] = self._hash(input_data.password)
        if input_data.is_active is not None:
            changes["is_active"] = input_data.is_active

        updated = replace(current, **changes)
        employees[index] = updated
        persisted = self.repository.save_employees(employees)

        self.activity.log(
            session,
            "UPDATE_EMPLOYEE",
            f"Funcionário atualizado: {updated.name} - {updated.email}",
            ActivityModule.EMPLOYEES,
        )
        return EmployeeResult(employee=updated, persisted=persisted)


class DeleteEmployeeUseCase:
    def __init__(self, repository: IdentityRepository, activity: ActivityLogger):
        self.repository = repository
        self.activity = activity

    def execute(
        self, employee_id: str, session: Optional[SessionStore]
    ) -> EmployeeResult:
        employees = self.repository.list_employees()
        target = next((e for e in employees if e.id == employee_id), None)
        if target is None:
            return _not_found(employee_id)

        persisted = self.repository.save_employees(
            [e for e in employees if e.id != employee_id]
        )
        self.activity.log(
            session,
            "DELETE_EMPLOYEE",
            f"Funcionário excluído: {target.name} - {target.email}",
            ActivityModule.EMPLOYEES,
        )
        logger.info("Empleado eliminado", extra={"employee_id": employee_id})
        return EmployeeResult(employee=target, persisted=persisted)


class ToggleEmployeeStatusUseCase:
    def __init__(self, repository: IdentityRepository, activity: ActivityLogger):
        self.repository = repository
        self.activity = activity

    def execute(
        self, employee_id: str, session: Optional[SessionStore]
    ) -> EmployeeResult:
        employees = self.repository.list_employees()
        index = next((i for i, e in enumerate(employees) if e.id == employee_id), None)
        if index is None:
            return _not_found(employee_id)

        toggled = replace(employees[index], is_active=not employees[index].is_active)
        employees[index] = toggled
        persisted = self.repository.save_employees(employees)

        # R: la sesión de un funcionário desactivado sigue viva hasta expirar.
        status = "ativado" if toggled.is_active else "desativado"
        self.activity.log(
            session,
            "TOGGLE_EMPLOYEE_STATUS",
            f"Funcionário {status}: {toggled.name}",
            ActivityModule.EMPLOYEES,
        )
        return EmployeeResult(employee=toggled, persisted=persisted)


