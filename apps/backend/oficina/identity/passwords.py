"""
===============================================================================
TARJETA CRC - identity/passwords.py
===============================================================================

Módulo:
    Hash y verificación de contraseñas (Argon2)

Responsabilidades:
    - Hashear contraseñas con sal (Argon2id vía argon2-cffi).
    - Verificar contraseñas contra el hash almacenado.
    - Aceptar filas legadas en texto plano (comparación en tiempo constante)
      y señalar que deben re-hashearse.

Colaboradores:
    - identity.authenticator: verifica credenciales de funcionário/admin.
    - application.employees: hashea contraseñas nuevas.
    - infrastructure.store.fixtures: siembra hashes (inyectado por container).

Decisiones de seguridad:
    - Nunca loguear contraseñas ni hashes.
    - Un hash vacío nunca verifica.
===============================================================================
"""

from __future__ import annotations

import hmac

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

_ARGON2_PREFIX: str = "$argon2"

_password_hasher = PasswordHasher()


def _constant_time_compare(a: str, b: str) -> bool:
    """Comparación en tiempo constante (mitiga timing attacks)."""
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def is_hashed(stored: str | None) -> bool:
    return bool(stored) and stored.startswith(_ARGON2_PREFIX)


def hash_password(password: str) -> str:
    """Hashea un password usando Argon2."""
    return _password_hasher.hash(password)


def verify_password(password: str, stored: str | None) -> bool:
    """Verifica password vs valor almacenado (hash Argon2 o texto plano legado)."""
    if not stored or password is None:
        return False

    if not is_hashed(stored):
        return _constant_time_compare(password, stored)

    try:
        return _password_hasher.verify(stored, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def needs_rehash(stored: str | None) -> bool:
    """True si el valor almacenado es texto plano o usa parámetros viejos."""
    if not is_hashed(stored):
        return True
    return _password_hasher.check_needs_rehash(stored)
