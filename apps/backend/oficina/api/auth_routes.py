"""
===============================================================================
TARJETA CRC - oficina/api/auth_routes.py (Login por portal / logout / me)
===============================================================================

Responsabilidades:
  - Exponer login de cliente (CPF), funcionário y admin (usuário/senha).
  - Escribir los marcadores de sesión (auth_token httpOnly + user_role)
    y borrarlos en logout.
  - Registrar LOGIN / LOGOUT en el log de actividad (módulo AUTH).

Patrones aplicados:
  - Adapter / Presentation Layer: traduce HTTP ↔ Authenticator/SessionStore.
  - Fail-safe security: cualquier falla de credenciales responde 401 con un
    único mensaje genérico.

Colaboradores:
  - identity.authenticator.Authenticator
  - identity.dependencies.get_session_store / require_identity
  - application.activity_log.ActivityLogger
===============================================================================
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field, field_validator

from ..application.activity_log import ActivityLogger, ActivityModule
from ..container import get_activity_logger, get_authenticator
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES, unauthorized
from ..domain.entities import Identity, Role
from ..identity.authenticator import Authenticator
from ..identity.dependencies import get_session_store, require_identity
from ..identity.session import SessionMarkers, SessionStore
from ..identity.tokens import SessionSettings

router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)

INVALID_CREDENTIALS = "Credenciais inválidas."


# -----------------------------------------------------------------------------
# Modelos HTTP (DTOs)
# -----------------------------------------------------------------------------


class ClientLoginRequest(BaseModel):
    national_id: str = Field(..., min_length=1, max_length=32)


class PasswordLoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=120)
    password: str = Field(..., min_length=1, max_length=512)

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        return v.strip()


class IdentityResponse(BaseModel):
    id: str
    name: str
    role: Role
    email: str | None = None
    username: str | None = None
    national_id: str | None = None
    created_at: datetime


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: IdentityResponse


class SessionResponse(BaseModel):
    user: IdentityResponse
    expires_in: int


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


def to_identity_response(identity: Identity) -> IdentityResponse:
    return IdentityResponse(
        id=identity.id,
        name=identity.name,
        role=identity.role,
        email=identity.email,
        username=identity.username,
        national_id=identity.national_id,
        created_at=identity.created_at,
    )


def _set_session_cookies(
    response: Response, markers: SessionMarkers, settings: SessionSettings
) -> None:
    """Setea auth_token (httpOnly) + user_role (informativo)."""
    response.set_cookie(
        key=settings.cookie_name,
        value=markers.token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
        max_age=markers.max_age,
        path="/",
    )
    response.set_cookie(
        key=settings.role_cookie_name,
        value=markers.role,
        httponly=False,
        secure=settings.cookie_secure,
        samesite="strict",
        max_age=markers.max_age,
        path="/",
    )


def clear_session_cookies(response: Response, settings: SessionSettings) -> None:
    for name in (settings.cookie_name, settings.role_cookie_name):
        response.delete_cookie(
            key=name,
            path="/",
            samesite="strict",
            secure=settings.cookie_secure,
        )


def _login_response(
    identity: Identity | None,
    session: SessionStore,
    response: Response,
    activity: ActivityLogger,
) -> LoginResponse:
    markers = session.markers() if identity is not None else None
    if identity is None or markers is None:
        raise unauthorized(INVALID_CREDENTIALS)

    _set_session_cookies(response, markers, session.settings)
    activity.log(
        session,
        "LOGIN",
        f"Login realizado no portal {identity.role.value}",
        ActivityModule.AUTH,
    )
    return LoginResponse(
        access_token=markers.token,
        expires_in=markers.max_age,
        user=to_identity_response(identity),
    )


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.post("/auth/login/client", response_model=LoginResponse, tags=["auth"])
def login_client(
    req: ClientLoginRequest,
    response: Response,
    session: SessionStore = Depends(get_session_store),
    authenticator: Authenticator = Depends(get_authenticator),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    """Login de cliente por CPF (comparación exacta)."""
    identity = authenticator.authenticate_client(req.national_id, session=session)
    return _login_response(identity, session, response, activity)


@router.post("/auth/login/employee", response_model=LoginResponse, tags=["auth"])
def login_employee(
    req: PasswordLoginRequest,
    response: Response,
    session: SessionStore = Depends(get_session_store),
    authenticator: Authenticator = Depends(get_authenticator),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    identity = authenticator.authenticate_employee(
        req.username, req.password, session=session
    )
    return _login_response(identity, session, response, activity)


@router.post("/auth/login/admin", response_model=LoginResponse, tags=["auth"])
def login_admin(
    req: PasswordLoginRequest,
    response: Response,
    session: SessionStore = Depends(get_session_store),
    authenticator: Authenticator = Depends(get_authenticator),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    identity = authenticator.authenticate_admin(
        req.username, req.password, session=session
    )
    return _login_response(identity, session, response, activity)


@router.post("/auth/logout", tags=["auth"])
def logout(
    response: Response,
    session: SessionStore = Depends(get_session_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    """
    Cierra sesión.

    - Siempre borra las cookies (idempotente, no requiere sesión).
    """
    activity.log(session, "LOGOUT", "Logout realizado", ActivityModule.AUTH)
    session.invalidate()
    clear_session_cookies(response, session.settings)
    return {"ok": True}


@router.get("/auth/me", response_model=SessionResponse, tags=["auth"])
def me(
    identity: Identity = Depends(require_identity),
    session: SessionStore = Depends(get_session_store),
):
    """Identidad de la sesión actual + segundos restantes."""
    markers = session.markers()
    return SessionResponse(
        user=to_identity_response(identity),
        expires_in=markers.max_age if markers else 0,
    )
