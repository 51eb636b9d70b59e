"""
===============================================================================
TARJETA CRC - domain/permissions.py
===============================================================================

Módulo:
    Catálogo de permisos por rol

Responsabilidades:
    - Definir qué puede hacer cada portal (cliente / funcionário / admin).
    - Resolver has_permission(identity, permission) sin estado global.

Colaboradores:
    - identity.dependencies.require_permission (borde HTTP).
    - domain.entities.Identity / Role.

Notas:
    - "*" es wildcard: el admin tiene acceso total.
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Mapping

from .entities import Identity, Role


class Permission(str, Enum):
    """Permisos disponibles en la consola."""

    # Portal do cliente
    VIEW_OWN_SERVICES = "view_own_services"
    VIEW_OWN_HISTORY = "view_own_history"

    # Serviços
    VIEW_SERVICES = "view_services"
    CREATE_SERVICES = "create_services"
    EDIT_SERVICES = "edit_services"

    # Clientes
    VIEW_CLIENTS = "view_clients"
    CREATE_CLIENTS = "create_clients"
    EDIT_CLIENTS = "edit_clients"

    # Veículos
    VIEW_VEHICLES = "view_vehicles"
    CREATE_VEHICLES = "create_vehicles"
    EDIT_VEHICLES = "edit_vehicles"

    # Administración
    MANAGE_EMPLOYEES = "manage_employees"
    VIEW_ACTIVITY_LOGS = "view_activity_logs"
    MANAGE_SETTINGS = "manage_settings"

    # Wildcard
    ALL = "*"


ROLE_PERMISSIONS: Mapping[Role, frozenset[Permission]] = {
    Role.CLIENT: frozenset(
        {Permission.VIEW_OWN_SERVICES, Permission.VIEW_OWN_HISTORY}
    ),
    Role.EMPLOYEE: frozenset(
        {
            Permission.VIEW_SERVICES,
            Permission.CREATE_SERVICES,
            Permission.EDIT_SERVICES,
            Permission.VIEW_CLIENTS,
            Permission.CREATE_CLIENTS,
            Permission.EDIT_CLIENTS,
            Permission.VIEW_VEHICLES,
            Permission.CREATE_VEHICLES,
            Permission.EDIT_VEHICLES,
        }
    ),
    Role.ADMIN: frozenset({Permission.ALL}),
}


def has_permission(identity: Identity | None, permission: Permission | str) -> bool:
    """True si la identity (si existe) tiene el permiso directo o por wildcard."""
    if identity is None:
        return False

    granted = ROLE_PERMISSIONS.get(identity.role, frozenset())
    if Permission.ALL in granted:
        return True

    try:
        wanted = Permission(permission)
    except ValueError:
        return False
    return wanted in granted
