"""
===============================================================================
TARJETA CRC - domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio (API pública del dominio)

Responsabilidades:
    - Centralizar exports para imports limpios en application/identity/api.

Reglas:
    - Solo re-exporta contratos/entidades del dominio.
    - No importar infraestructura aquí.
===============================================================================
"""

from .entities import (
    ActivityLogEntry,
    AdminAccount,
    ClientRecord,
    EmployeeRecord,
    Identity,
    Role,
    VehicleRecord,
)
from .permissions import Permission, has_permission
from .repositories import (
    ActivityLogRepository,
    DataStore,
    IdentityRepository,
    KeyValueStorage,
)

__all__ = [
    "ActivityLogEntry",
    "ActivityLogRepository",
    "AdminAccount",
    "ClientRecord",
    "DataStore",
    "EmployeeRecord",
    "Identity",
    "IdentityRepository",
    "KeyValueStorage",
    "Permission",
    "Role",
    "VehicleRecord",
    "has_permission",
]
