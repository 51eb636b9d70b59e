"""
===============================================================================
TARJETA CRC - oficina/api/portal_routes.py (Secciones de portal + health)
===============================================================================

Responsabilidades:
  - Exponer las secciones de cada portal (/dashboard, /admin, /funcionario,
    /cliente) detrás del RouteGuardMiddleware.
  - Exponer las páginas públicas (/ y /login) y /healthz.

Notas:
  - No hay renderizado de UI: cada sección responde un JSON mínimo con la
    identidad que el guard dejó en request.state.
  - La autorización de estas rutas la hace el middleware, no Depends.

Colaboradores:
  - identity.route_guard (ROLE_SECTIONS, LOGIN_PATH)
  - api.auth_routes.to_identity_response
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from ..domain.entities import Role
from ..identity.route_guard import LOGIN_PATH, ROLE_SECTIONS
from .auth_routes import to_identity_response

router = APIRouter(tags=["portal"])

LOGIN_ENDPOINTS = {
    Role.CLIENT.value: "/api/auth/login/client",
    Role.EMPLOYEE.value: "/api/auth/login/employee",
    Role.ADMIN.value: "/api/auth/login/admin",
}


def _portal_entrypoints() -> dict[str, str]:
    # R: primera sección de cada rol (admin entra por /dashboard).
    entrypoints: dict[str, str] = {}
    for prefix, role in ROLE_SECTIONS:
        entrypoints.setdefault(role.value, prefix)
    return entrypoints


def _section_payload(request: Request, section: str) -> dict:
    identity = getattr(request.state, "identity", None)
    return {
        "section": section,
        "user": to_identity_response(identity).model_dump(mode="json")
        if identity is not None
        else None,
    }


@router.get("/")
def home():
    return {
        "service": "oficina",
        "login": LOGIN_PATH,
        "portals": _portal_entrypoints(),
    }


@router.get(LOGIN_PATH)
def login_page():
    return {"login_endpoints": LOGIN_ENDPOINTS}


@router.get("/dashboard")
def admin_dashboard(request: Request):
    return _section_payload(request, "dashboard")


@router.get("/admin")
def admin_portal(request: Request):
    return _section_payload(request, "admin")


@router.get("/funcionario")
def employee_portal(request: Request):
    return _section_payload(request, "funcionario")


@router.get("/cliente")
def client_portal(request: Request):
    return _section_payload(request, "cliente")


@router.get("/healthz")
def healthz():
    return {"ok": True}
