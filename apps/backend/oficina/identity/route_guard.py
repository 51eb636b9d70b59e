"""
===============================================================================
TARJETA CRC - identity/route_guard.py
===============================================================================

Módulo:
    Route Guard (gate de secciones por rol)

Responsabilidades:
    - Clasificar un path: excluido / público / sección de rol / resto.
    - Decidir ALLOW / LOGIN_REQUIRED / FORBIDDEN a partir de la Identity
      reconstruida desde el token firmado.
    - Middleware Starlette que aplica la decisión (redirect a /login o 403).

Colaboradores:
    - identity.session.SessionStore.from_token (la cookie user_role se ignora).
    - crosscutting.config (guard_distinct_forbidden).
    - crosscutting.error_responses (problem+json para 403).

Reglas:
    - Excluidos: /api/*, /static/*, /icons/*, /favicon.ico, /manifest.json,
      /healthz. La API aplica roles vía dependencias (401/403).
    - Públicos: "/" y /login (y sub-paths).
    - /dashboard y /admin -> admin; /funcionario -> funcionário;
      /cliente -> cliente.
    - Cualquier otro path cubierto exige sesión (sin chequeo de rol).
    - Rol equivocado: por default redirect a /login; con
      guard_distinct_forbidden=True responde 403.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response

from ..context import set_actor_context
from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    PROBLEM_JSON_MEDIA_TYPE,
    ErrorCode,
    ErrorDetail,
)
from ..crosscutting.logger import logger
from ..domain.entities import Identity, Role
from .session import Clock, SessionStore, utcnow
from .tokens import SessionSettings, get_session_settings

LOGIN_PATH: str = "/login"

PUBLIC_PATHS: tuple[str, ...] = ("/", LOGIN_PATH)
PUBLIC_PREFIXES: tuple[str, ...] = (LOGIN_PATH,)

EXCLUDED_PATHS: frozenset[str] = frozenset(
    {"/favicon.ico", "/manifest.json", "/healthz"}
)
EXCLUDED_PREFIXES: tuple[str, ...] = ("/api", "/static", "/icons")

ROLE_SECTIONS: tuple[tuple[str, Role], ...] = (
    ("/dashboard", Role.ADMIN),
    ("/admin", Role.ADMIN),
    ("/funcionario", Role.EMPLOYEE),
    ("/cliente", Role.CLIENT),
)


class GuardOutcome(str, Enum):
    ALLOW = "allow"
    LOGIN_REQUIRED = "login_required"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True, slots=True)
class GuardDecision:
    outcome: GuardOutcome
    required_role: Optional[Role] = None

    @property
    def allowed(self) -> bool:
        return self.outcome is GuardOutcome.ALLOW


_ALLOW = GuardDecision(GuardOutcome.ALLOW)


def _under(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


def is_excluded(path: str) -> bool:
    """Paths que el guard no inspecciona (API, assets, health)."""
    return path in EXCLUDED_PATHS or any(_under(path, p) for p in EXCLUDED_PREFIXES)


def is_public(path: str) -> bool:
    return path in PUBLIC_PATHS or any(_under(path, p) for p in PUBLIC_PREFIXES)


def required_role(path: str) -> Optional[Role]:
    for prefix, role in ROLE_SECTIONS:
        if _under(path, prefix):
            return role
    return None


def evaluate(path: str, identity: Optional[Identity]) -> GuardDecision:
    """Decisión pura del guard (sin I/O)."""
    if is_excluded(path) or is_public(path):
        return _ALLOW

    role = required_role(path)
    if identity is None:
        return GuardDecision(GuardOutcome.LOGIN_REQUIRED, role)

    if role is not None and identity.role is not role:
        return GuardDecision(GuardOutcome.FORBIDDEN, role)

    return GuardDecision(GuardOutcome.ALLOW, role)


class RouteGuardMiddleware(BaseHTTPMiddleware):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      RouteGuardMiddleware

    Responsabilidades:
      - Reconstruir la sesión desde la cookie firmada
      - Aplicar evaluate() a cada request de página
      - Borrar marcadores cuando la sesión expiró o el token es inválido

    Colaboradores:
      - SessionStore, evaluate()
    ----------------------------------------------------------------------------
    """

    def __init__(
        self,
        app,
        *,
        settings: SessionSettings | None = None,
        distinct_forbidden: bool | None = None,
        clock: Clock = utcnow,
    ) -> None:
        super().__init__(app)
        self._settings = settings
        self._distinct_forbidden = distinct_forbidden
        self._clock = clock

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if is_excluded(path) or is_public(path):
            return await call_next(request)

        settings = self._settings or get_session_settings()
        token = request.cookies.get(settings.cookie_name)
        session = SessionStore.from_token(token, settings=settings, clock=self._clock)
        identity = session.current()
        decision = evaluate(path, identity)

        if decision.outcome is GuardOutcome.ALLOW:
            request.state.identity = identity
            if identity is not None:
                set_actor_context(actor_id=identity.id, role=identity.role.value)
            return await call_next(request)

        if decision.outcome is GuardOutcome.FORBIDDEN:
            logger.warning(
                "Guard: rol insuficiente",
                extra={
                    "required_role": decision.required_role.value
                    if decision.required_role
                    else None,
                    "actor_role": identity.role.value if identity else None,
                },
            )
            if self._use_distinct_forbidden():
                return self._forbidden(request)
            return self._redirect_to_login(settings, clear=False)

        # LOGIN_REQUIRED: token ausente, inválido o expirado.
        return self._redirect_to_login(settings, clear=token is not None)

    # =========================================================
    # Helpers internos
    # =========================================================
    def _use_distinct_forbidden(self) -> bool:
        if self._distinct_forbidden is not None:
            return self._distinct_forbidden
        return get_settings().guard_distinct_forbidden

    @staticmethod
    def _redirect_to_login(settings: SessionSettings, *, clear: bool) -> Response:
        response = RedirectResponse(url=LOGIN_PATH, status_code=307)
        if clear:
            response.delete_cookie(settings.cookie_name, path="/")
            response.delete_cookie(settings.role_cookie_name, path="/")
        return response

    @staticmethod
    def _forbidden(request: Request) -> Response:
        error = ErrorDetail(
            type=f"about:blank/{ErrorCode.FORBIDDEN.value.lower()}",
            title=ErrorCode.FORBIDDEN.value.replace("_", " ").title(),
            status=403,
            detail="Acesso negado",
            code=ErrorCode.FORBIDDEN,
            instance=str(request.url),
        )
        return JSONResponse(
            status_code=403,
            content=error.model_dump(mode="json", exclude_none=True),
            media_type=PROBLEM_JSON_MEDIA_TYPE,
        )
