"""
===============================================================================
TARJETA CRC - oficina/context.py (Contexto por request)
===============================================================================

Responsabilidades:
  - Mantener contexto “request-scoped” usando ContextVars (async-safe).
  - Permitir correlación de logs sin pasar parámetros por todo el stack.
  - Proveer helpers mínimos: set_*(), get_context_dict(), clear_context().

Colaboradores:
  - oficina.crosscutting.middleware: setea request_id/method/path al inicio.
  - oficina.identity.dependencies: setea actor_id/role cuando hay sesión.
  - oficina.crosscutting.logger: enriquece logs leyendo get_context_dict().

Restricciones:
  - Solo tipos primitivos (str) para serialización segura.
  - Defaults vacíos ("") para evitar None y simplificar JSON.
  - Esto NO es la sesión: la sesión viaja explícita (SessionStore).
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Final

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
http_method_var: ContextVar[str] = ContextVar("http_method", default="")
http_path_var: ContextVar[str] = ContextVar("http_path", default="")

# Actor autenticado (solo para correlación de logs).
actor_id_var: ContextVar[str] = ContextVar("actor_id", default="")
actor_role_var: ContextVar[str] = ContextVar("actor_role", default="")

_CTX_REQUEST_ID: Final[str] = "request_id"
_CTX_METHOD: Final[str] = "method"
_CTX_PATH: Final[str] = "path"
_CTX_ACTOR_ID: Final[str] = "actor_id"
_CTX_ACTOR_ROLE: Final[str] = "actor_role"


def set_request_context(
    *, request_id: str = "", method: str = "", path: str = ""
) -> None:
    """
    Setea el contexto mínimo del request.

    Regla:
      - Strings vacíos significan “no disponible”.
    """
    request_id_var.set(request_id or "")
    http_method_var.set(method or "")
    http_path_var.set(path or "")


def set_actor_context(*, actor_id: str = "", role: str = "") -> None:
    actor_id_var.set(actor_id or "")
    actor_role_var.set(role or "")


def get_context_dict() -> dict[str, str]:
    """Devuelve el contexto actual como dict, omitiendo claves vacías."""
    ctx: dict[str, str] = {}

    if val := request_id_var.get():
        ctx[_CTX_REQUEST_ID] = val
    if val := http_method_var.get():
        ctx[_CTX_METHOD] = val
    if val := http_path_var.get():
        ctx[_CTX_PATH] = val
    if val := actor_id_var.get():
        ctx[_CTX_ACTOR_ID] = val
    if val := actor_role_var.get():
        ctx[_CTX_ACTOR_ROLE] = val

    return ctx


def clear_context() -> None:
    """
    Limpia el contexto al final del request.

    Importante:
      - Evita “filtración de contexto” entre requests.
    """
    request_id_var.set("")
    http_method_var.set("")
    http_path_var.set("")
    actor_id_var.set("")
    actor_role_var.set("")
