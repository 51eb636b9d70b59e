"""
===============================================================================
TARJETA CRC - identity/tokens.py
===============================================================================

Módulo:
    Marcadores de sesión firmados (JWT HS256)

Responsabilidades:
    - Emitir el token de identidad (auth_token) firmado por el servidor.
    - Decodificar y validar firma + claims mínimos.
    - Exponer un snapshot de settings de sesión (secreto, TTL, cookies).

Colaboradores:
    - crosscutting.config.get_settings: secreto, TTL, nombres de cookie.
    - identity.session.SessionStore: reconstruye la sesión desde el token.
    - domain.entities.Identity / Role.

Decisiones de diseño:
    - Claims mínimos: sub, role, name, iat, exp, cus (+ email/username opcionales).
    - cus guarda created_at con microsegundos: reconstruir desde iat truncaría
      la sesión hasta 1s antes de las 8h.
    - El CPF NO viaja en el token (el payload JWT es legible).
    - La expiración la decide SessionStore con su reloj (cus + TTL), no PyJWT,
      para que el corte de 8h sea determinístico y testeable.
    - Un token inválido se trata como "sin sesión" (retorna None).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..domain.entities import Identity, Role

JWT_ALGORITHM: str = "HS256"

CLAIM_SUB: str = "sub"
CLAIM_ROLE: str = "role"
CLAIM_NAME: str = "name"
CLAIM_EMAIL: str = "email"
CLAIM_USERNAME: str = "username"
CLAIM_IAT: str = "iat"
CLAIM_EXP: str = "exp"
CLAIM_TYP: str = "typ"
# Creación exacta en microsegundos epoch (iat es entero).
CLAIM_CREATED_US: str = "cus"

TOKEN_TYPE_SESSION: str = "session"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True, slots=True)
class SessionSettings:
    """Settings de sesión (snapshot)."""

    secret: str
    ttl: timedelta
    cookie_name: str
    role_cookie_name: str
    cookie_secure: bool


@dataclass(frozen=True, slots=True)
class SessionClaims:
    """Lo que recuperamos de un token válido."""

    identity: Identity
    created_at: datetime


def get_session_settings() -> SessionSettings:
    """Construye un snapshot de settings de sesión."""
    s = get_settings()
    return SessionSettings(
        secret=s.session_secret,
        ttl=timedelta(hours=s.session_ttl_hours),
        cookie_name=s.session_cookie_name,
        role_cookie_name=s.role_cookie_name,
        cookie_secure=s.session_cookie_secure,
    )


def _to_epoch_us(value: datetime) -> int:
    return (value - _EPOCH) // timedelta(microseconds=1)


def _created_at_from(payload: dict) -> datetime:
    created_us = payload.get(CLAIM_CREATED_US)
    if created_us is None:
        return datetime.fromtimestamp(int(payload[CLAIM_IAT]), tz=timezone.utc)
    return _EPOCH + timedelta(microseconds=int(created_us))


def issue_session_token(
    identity: Identity, created_at: datetime, settings: SessionSettings
) -> str:
    """Firma el token de identidad para una sesión creada en created_at."""
    issued_at = int(created_at.timestamp())
    payload: dict[str, object] = {
        CLAIM_SUB: identity.id,
        CLAIM_ROLE: identity.role.value,
        CLAIM_NAME: identity.name,
        CLAIM_IAT: issued_at,
        CLAIM_EXP: issued_at + int(settings.ttl.total_seconds()),
        CLAIM_TYP: TOKEN_TYPE_SESSION,
        CLAIM_CREATED_US: _to_epoch_us(created_at),
    }
    if identity.email:
        payload[CLAIM_EMAIL] = identity.email
    if identity.username:
        payload[CLAIM_USERNAME] = identity.username

    return jwt.encode(payload, settings.secret, algorithm=JWT_ALGORITHM)


def decode_session_token(
    token: str | None, settings: SessionSettings
) -> SessionClaims | None:
    """Valida firma y claims; None si el token falta o es inválido."""
    if not token:
        return None

    try:
        payload = jwt.decode(
            token,
            settings.secret,
            algorithms=[JWT_ALGORITHM],
            options={
                "require": [CLAIM_SUB, CLAIM_ROLE, CLAIM_NAME, CLAIM_IAT],
                "verify_exp": False,
                "verify_iat": False,
            },
        )
    except jwt.InvalidTokenError as exc:
        logger.info("Token de sesión rechazado", extra={"reason": type(exc).__name__})
        return None

    if payload.get(CLAIM_TYP) != TOKEN_TYPE_SESSION:
        return None

    try:
        role = Role(str(payload[CLAIM_ROLE]))
        created_at = _created_at_from(payload)
    except (TypeError, ValueError, OverflowError, OSError):
        return None

    identity = Identity(
        id=str(payload[CLAIM_SUB]),
        name=str(payload[CLAIM_NAME]),
        role=role,
        created_at=created_at,
        is_active=True,
        email=payload.get(CLAIM_EMAIL),
        username=payload.get(CLAIM_USERNAME),
    )
    return SessionClaims(identity=identity, created_at=created_at)
