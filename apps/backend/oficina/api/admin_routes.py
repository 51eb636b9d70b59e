"""
===============================================================================
TARJETA CRC - oficina/api/admin_routes.py (Administración de la consola)
===============================================================================

Responsabilidades:
  - Log de actividad: listar (filtros actor/módulo), exportar CSV, limpiar.
  - Funcionários: listar / crear / editar / excluir / activar-desactivar.
  - Credenciales del administrador.
  - Autorización por permiso (mapa de roles: solo admin los tiene).

Patrones aplicados:
  - Thin Controller: orquesta dependencias, no contiene reglas de negocio.
  - Error Mapping: traduce errores tipados de casos de uso a HTTP (RFC7807).

Colaboradores:
  - application.activity_log.ActivityLogger
  - application.usecases.employees.*
  - identity.dependencies: get_session_store, require_permission
===============================================================================
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, ConfigDict, Field

from ..application.activity_log import ActivityLogger
from ..application.usecases.employees import (
    CreateEmployeeInput,
    CreateEmployeeUseCase,
    DeleteEmployeeUseCase,
    EmployeeError,
    EmployeeErrorCode,
    EmployeeResult,
    ListEmployeesUseCase,
    ToggleEmployeeStatusUseCase,
    UpdateAdminCredentialsInput,
    UpdateAdminCredentialsUseCase,
    UpdateEmployeeInput,
    UpdateEmployeeUseCase,
)
from ..container import (
    get_activity_logger,
    get_create_employee_use_case,
    get_delete_employee_use_case,
    get_list_employees_use_case,
    get_toggle_employee_status_use_case,
    get_update_admin_credentials_use_case,
    get_update_employee_use_case,
)
from ..crosscutting.error_responses import (
    OPENAPI_ERROR_RESPONSES,
    conflict,
    not_found,
    validation_error,
)
from ..domain.entities import ActivityLogEntry, EmployeeRecord, Role
from ..domain.permissions import Permission
from ..identity.dependencies import get_session_store, require_permission
from ..identity.session import SessionStore

router = APIRouter(prefix="/admin", tags=["admin"], responses=OPENAPI_ERROR_RESPONSES)


# -----------------------------------------------------------------------------
# DTOs
# -----------------------------------------------------------------------------


class ActivityLogRes(BaseModel):
    id: str
    actor_id: str
    actor_name: str
    action: str
    details: str
    timestamp: datetime
    module: str


class EmployeeRes(BaseModel):
    """Respuesta: funcionário (sin hash de contraseña)."""

    id: str
    name: str
    username: str
    email: str
    role: Role = Role.EMPLOYEE
    is_active: bool
    created_at: datetime


class CreateEmployeeReq(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., max_length=120)
    email: str = Field(..., max_length=320)
    password: str = Field(..., max_length=512)
    username: str | None = Field(None, max_length=120)
    is_active: bool = True


class UpdateEmployeeReq(BaseModel):
    """Campos editables; el rol no es parte del contrato."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, max_length=120)
    email: str | None = Field(None, max_length=320)
    username: str | None = Field(None, max_length=120)
    password: str | None = Field(None, max_length=512)
    is_active: bool | None = None


class AdminCredentialsReq(BaseModel):
    current_password: str = Field("", max_length=512)
    new_username: str | None = Field(None, max_length=120)
    new_password: str | None = Field(None, max_length=512)
    confirm_password: str | None = Field(None, max_length=512)


class AdminCredentialsRes(BaseModel):
    username: str
    name: str


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


def _to_log_res(entry: ActivityLogEntry) -> ActivityLogRes:
    return ActivityLogRes(
        id=entry.id,
        actor_id=entry.actor_id,
        actor_name=entry.actor_name,
        action=entry.action,
        details=entry.details,
        timestamp=entry.timestamp,
        module=entry.module,
    )


def _to_employee_res(employee: EmployeeRecord) -> EmployeeRes:
    return EmployeeRes(
        id=employee.id,
        name=employee.name,
        username=employee.username,
        email=employee.email,
        is_active=employee.is_active,
        created_at=employee.created_at,
    )


def _raise_employee_error(error: EmployeeError) -> None:
    if error.code == EmployeeErrorCode.NOT_FOUND:
        raise not_found(error.message)
    if error.code == EmployeeErrorCode.CONFLICT:
        raise conflict(error.message)
    raise validation_error(error.message)


def _employee_or_raise(result: EmployeeResult) -> EmployeeRes:
    if result.error is not None:
        _raise_employee_error(result.error)
    return _to_employee_res(result.employee)


# -----------------------------------------------------------------------------
# Log de actividad
# -----------------------------------------------------------------------------


@router.get("/logs", response_model=list[ActivityLogRes])
def list_activity_logs(
    actor_id: str | None = Query(None, max_length=120),
    module: str | None = Query(None, max_length=60),
    _identity=Depends(require_permission(Permission.VIEW_ACTIVITY_LOGS)),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    """Entradas newest-first; filtros opcionales por actor y módulo."""
    entries = activity.by_actor(actor_id) if actor_id else activity.entries()
    if module:
        entries = [e for e in entries if e.module == module]
    return [_to_log_res(e) for e in entries]


@router.get("/logs/export")
def export_activity_logs(
    _identity=Depends(require_permission(Permission.VIEW_ACTIVITY_LOGS)),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    """Descarga CSV (Data/Hora, Usuário, Ação, Detalhes, Módulo)."""
    return Response(
        content=activity.export(),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{activity.export_filename()}"'
        },
    )


@router.delete("/logs")
def clear_activity_logs(
    _identity=Depends(require_permission(Permission.VIEW_ACTIVITY_LOGS)),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    activity.clear()
    return {"ok": True}


# -----------------------------------------------------------------------------
# Funcionários
# -----------------------------------------------------------------------------


@router.get("/employees", response_model=list[EmployeeRes])
def list_employees(
    search: str | None = Query(None, max_length=120),
    _identity=Depends(require_permission(Permission.MANAGE_EMPLOYEES)),
    use_case: ListEmployeesUseCase = Depends(get_list_employees_use_case),
):
    result = use_case.execute(search)
    return [_to_employee_res(e) for e in result.employees]


@router.post("/employees", response_model=EmployeeRes, status_code=201)
def create_employee(
    req: CreateEmployeeReq,
    _identity=Depends(require_permission(Permission.MANAGE_EMPLOYEES)),
    session: SessionStore = Depends(get_session_store),
    use_case: CreateEmployeeUseCase = Depends(get_create_employee_use_case),
):
    result = use_case.execute(
        CreateEmployeeInput(
            name=req.name,
            email=req.email,
            password=req.password,
            username=req.username,
            is_active=req.is_active,
        ),
        session,
    )
    return _employee_or_raise(result)


@router.put("/employees/{employee_id}", response_model=EmployeeRes)
def update_employee(
    employee_id: str,
    req: UpdateEmployeeReq,
    _identity=Depends(require_permission(Permission.MANAGE_EMPLOYEES)),
    session: SessionStore = Depends(get_session_store),
    use_case: UpdateEmployeeUseCase = Depends(get_update_employee_use_case),
):
    result = use_case.execute(
        employee_id,
        UpdateEmployeeInput(
            name=req.name,
            email=req.email,
            username=req.username,
            password=req.password,
            is_active=req.is_active,
        ),
        session,
    )
    return _employee_or_raise(result)


@router.delete("/employees/{employee_id}", response_model=EmployeeRes)
def delete_employee(
    employee_id: str,
    _identity=Depends(require_permission(Permission.MANAGE_EMPLOYEES)),
    session: SessionStore = Depends(get_session_store),
    use_case: DeleteEmployeeUseCase = Depends(get_delete_employee_use_case),
):
    return _employee_or_raise(use_case.execute(employee_id, session))


@router.post("/employees/{employee_id}/toggle", response_model=EmployeeRes)
def toggle_employee_status(
    employee_id: str,
    _identity=Depends(require_permission(Permission.MANAGE_EMPLOYEES)),
    session: SessionStore = Depends(get_session_store),
    use_case: ToggleEmployeeStatusUseCase = Depends(
        get_toggle_employee_status_use_case
    ),
):
    return _employee_or_raise(use_case.execute(employee_id, session))


# -----------------------------------------------------------------------------
# Credenciales del administrador
# -----------------------------------------------------------------------------


@router.put("/credentials", response_model=AdminCredentialsRes)
def update_admin_credentials(
    req: AdminCredentialsReq,
    _identity=Depends(require_permission(Permission.MANAGE_SETTINGS)),
    session: SessionStore = Depends(get_session_store),
    use_case: UpdateAdminCredentialsUseCase = Depends(
        get_update_admin_credentials_use_case
    ),
):
    admin = use_case.execute(
        UpdateAdminCredentialsInput(
            current_password=req.current_password,
            new_username=req.new_username,
            new_password=req.new_password,
            confirm_password=req.confirm_password,
        ),
        session,
    )
    return AdminCredentialsRes(username=admin.username, name=admin.name)
