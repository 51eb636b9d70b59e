"""
===============================================================================
TARJETA CRC - identity/session.py
===============================================================================

Módulo:
    Session Store (sesión explícita por request)

Responsabilidades:
    - Guardar la Identity autenticada + timestamp de creación.
    - Decidir expiración pasiva (now - created_at >= TTL) con reloj inyectable.
    - Invalidar (logout / expiración) de forma idempotente.
    - Producir los marcadores de sesión (auth_token + user_role) a escribir
      como cookies.

Colaboradores:
    - identity.tokens: emitir / decodificar auth_token.
    - identity.authenticator: llama establish() tras un login válido.
    - identity.dependencies: construye un SessionStore por request.
    - api.auth_routes: escribe/borra cookies según markers()/invalidated.

Máquina de estados:
    Anonymous --establish()--> Authenticated
    Authenticated --invalidate() / expiración--> Anonymous
    (no hay renovación: el TTL corre desde el login)
===============================================================================
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from ..crosscutting.logger import logger
from ..domain.entities import Identity
from .tokens import (
    SessionSettings,
    decode_session_token,
    get_session_settings,
    issue_session_token,
)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class Session:
    identity: Identity
    created_at: datetime


@dataclass(frozen=True, slots=True)
class SessionMarkers:
    """Valores a escribir como cookies (token firmado + rol informativo)."""

    token: str
    role: str
    max_age: int


class SessionStore:
    """
    Sesión del request actual.

    Notas:
      - No es un singleton: cada request arma el suyo desde la cookie.
      - invalidated indica que hay que borrar cookies en la respuesta.
    """

    def __init__(
        self,
        *,
        settings: SessionSettings | None = None,
        clock: Clock = utcnow,
        session: Session | None = None,
    ) -> None:
        self._settings = settings or get_session_settings()
        self._clock = clock
        self._session = session
        self._invalidated = False

    @classmethod
    def from_token(
        cls,
        token: str | None,
        *,
        settings: SessionSettings | None = None,
        clock: Clock = utcnow,
    ) -> "SessionStore":
        """Reconstruye la sesión desde el marcador firmado (o anónima)."""
        settings = settings or get_session_settings()
        claims = decode_session_token(token, settings)
        session = (
            Session(identity=claims.identity, created_at=claims.created_at)
            if claims
            else None
        )
        return cls(settings=settings, clock=clock, session=session)

    @property
    def settings(self) -> SessionSettings:
        return self._settings

    @property
    def invalidated(self) -> bool:
        return self._invalidated

    @property
    def created_at(self) -> datetime | None:
        return self._session.created_at if self._session else None

    # =========================================================
    # Operaciones
    # =========================================================
    def establish(self, identity: Identity) -> Session:
        """Autentica: guarda la identidad (sin hash) y estampa la creación."""
        self._session = Session(identity=identity.public(), created_at=self._clock())
        self._invalidated = False
        return self._session

    def current(self) -> Identity | None:
        if self._session is None:
            return None

        if self.is_expired():
            logger.info(
                "Sesión expirada; cerrando",
                extra={"actor_id": self._session.identity.id},
            )
            self.invalidate()
            return None

        return self._session.identity

    def is_expired(self) -> bool:
        if self._session is None:
            return False
        return self._clock() - self._session.created_at >= self._settings.ttl

    def invalidate(self) -> None:
        self._session = None
        self._invalidated = True

    def markers(self) -> SessionMarkers | None:
        """Marcadores de la sesión viva; None si es anónima o expiró."""
        identity = self.current()
        if identity is None or self._session is None:
            return None

        remaining = self._settings.ttl - (self._clock() - self._session.created_at)
        return SessionMarkers(
            token=issue_session_token(
                identity, self._session.created_at, self._settings
            ),
            role=identity.role.value,
            max_age=max(0, math.ceil(remaining.total_seconds())),
        )
