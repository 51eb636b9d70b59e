"""
===============================================================================
TARJETA CRC - identity/dependencies.py
===============================================================================

Módulo:
    Dependencias FastAPI de sesión y autorización

Responsabilidades:
    - Construir la SessionStore del request (cookie auth_token o Bearer).
    - Exigir identidad / rol / permiso en endpoints de API (401 / 403).
    - Setear el actor en el contexto de logs.

Colaboradores:
    - identity.session.SessionStore
    - domain.permissions.has_permission
    - crosscutting.error_responses (unauthorized / forbidden)
    - context.set_actor_context

Notas:
    - Reloj inyectable vía get_clock (tests usan dependency_overrides).
    - La SessionStore se cachea en request.state para compartirla entre
      dependencias del mismo request.
===============================================================================
"""

from __future__ import annotations

from typing import Callable

from fastapi import Depends, Header, Request

from ..context import set_actor_context
from ..crosscutting.error_responses import forbidden, unauthorized
from ..domain.entities import Identity, Role
from ..domain.permissions import Permission, has_permission
from .session import Clock, SessionStore, utcnow
from .tokens import get_session_settings


def get_clock() -> Clock:
    return utcnow


def _extract_bearer_token(authorization: str | None) -> str | None:
    """Extrae token desde `Authorization: Bearer <token>`."""
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


def extract_session_token(request: Request, authorization: str | None) -> str | None:
    """Resuelve token desde Authorization o cookie."""
    token = _extract_bearer_token(authorization)
    if token:
        return token
    return request.cookies.get(get_session_settings().cookie_name)


# ---------------------------------------------------------------------------
# Dependencias FastAPI
# ---------------------------------------------------------------------------


def get_session_store(
    request: Request,
    authorization: str | None = Header(None, alias="Authorization"),
    clock: Clock = Depends(get_clock),
) -> SessionStore:
    cached = getattr(request.state, "session", None)
    if isinstance(cached, SessionStore):
        return cached

    session = SessionStore.from_token(
        extract_session_token(request, authorization),
        settings=get_session_settings(),
        clock=clock,
    )
    request.state.session = session

    identity = session.current()
    if identity is not None:
        set_actor_context(actor_id=identity.id, role=identity.role.value)
    return session


def require_identity(
    session: SessionStore = Depends(get_session_store),
) -> Identity:
    """Dependency FastAPI: requiere sesión viva."""
    identity = session.current()
    if identity is None:
        raise unauthorized()
    return identity


def require_role(role: Role | str) -> Callable:
    """Dependency FastAPI: requiere un rol específico."""
    required_role = Role(role)

    def dependency(identity: Identity = Depends(require_identity)) -> Identity:
        if identity.role is not required_role:
            raise forbidden("Rol insuficiente.")
        return identity

    return dependency


def require_permission(permission: Permission | str) -> Callable:
    """Dependency FastAPI: requiere un permiso del mapa de roles."""
    required = Permission(permission)

    def dependency(identity: Identity = Depends(require_identity)) -> Identity:
        if not has_permission(identity, required):
            raise forbidden()
        return identity

    return dependency
