"""
===============================================================================
TARJETA CRC - domain/entities.py
===============================================================================

Módulo:
    Entidades del Dominio (Identity, ActivityLogEntry, registros de tablas)

Responsabilidades:
    - Definir las estructuras centrales de la oficina (sin infraestructura).
    - Tipar cada tabla persistida (Clientes, Veículos, Funcionários, Admin)
      para que el resto del código no manipule filas posicionales.
    - Brindar helpers mínimos para derivar la Identity de cada registro.

Colaboradores:
    - infrastructure.repositories.tables: mapea filas <-> registros.
    - identity.authenticator: construye Identity a partir de registros.
    - application.activity_log: produce ActivityLogEntry.

Principios:
    - Sin dependencias a FastAPI / storage.
    - El rol de una Identity es inmutable (frozen dataclass).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum


def _utcnow() -> datetime:
    """Fecha/hora UTC (helper interno)."""
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class Role(str, Enum):
    """Portales de la consola. Los valores son los marcadores de rol en cookie."""

    CLIENT = "cliente"
    EMPLOYEE = "funcionario"
    ADMIN = "admin"


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Usuario autenticable (cliente, funcionário o admin).

    Notas:
      - password_hash solo existe para funcionários/admin y nunca viaja en
        tokens ni respuestas (ver public()).
      - username es el nombre de login; los clientes entran por CPF.
    """

    id: str
    name: str
    role: Role
    created_at: datetime
    is_active: bool = True
    email: str | None = None
    national_id: str | None = None
    username: str | None = None
    password_hash: str | None = None

    def public(self) -> "Identity":
        """Copia sin secretos (apta para sesión / serialización)."""
        return replace(self, password_hash=None)


# ---------------------------------------------------------------------------
# Activity log
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ActivityLogEntry:
    """Registro append-only de una acción iniciada por un usuario."""

    id: str
    actor_id: str
    actor_name: str
    action: str
    details: str
    timestamp: datetime
    module: str


# ---------------------------------------------------------------------------
# Registros tipados de tablas (una clase por hoja)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ClientRecord:
    """Fila de la hoja Clientes."""

    id: int
    name: str
    national_id: str
    email: str = ""
    phone: str = ""
    address: str = ""

    def to_identity(self, *, now: datetime | None = None) -> Identity:
        # R: los clientes no tienen fecha de alta propia; se estampa al login.
        return Identity(
            id=str(self.id),
            name=self.name,
            role=Role.CLIENT,
            created_at=now or _utcnow(),
            is_active=True,
            email=self.email or None,
            national_id=self.national_id,
        )


@dataclass(frozen=True, slots=True)
class VehicleRecord:
    """Fila de la hoja Veículos."""

    id: int
    plate: str
    brand: str
    model: str
    year: int
    color: str = ""
    client_name: str = ""


@dataclass(frozen=True, slots=True)
class EmployeeRecord:
    """Fila de la hoja Funcionários."""

    id: str
    name: str
    username: str
    email: str
    password_hash: str
    is_active: bool
    created_at: datetime

    def to_identity(self) -> Identity:
        return Identity(
            id=self.id,
            name=self.name,
            role=Role.EMPLOYEE,
            created_at=self.created_at,
            is_active=self.is_active,
            email=self.email or None,
            username=self.username,
            password_hash=self.password_hash,
        )


@dataclass(frozen=True, slots=True)
class AdminAccount:
    """Única fila de la hoja Admin."""

    id: str
    username: str
    name: str
    email: str
    password_hash: str
    created_at: datetime

    def to_identity(self) -> Identity:
        return Identity(
            id=self.id,
            name=self.name,
            role=Role.ADMIN,
            created_at=self.created_at,
            is_active=True,
            email=self.email or None,
            username=self.username,
            password_hash=self.password_hash,
        )
