# apps/backend/oficina/crosscutting/exceptions.py
"""
===============================================================================
MÓDULO: Excepciones tipadas del backend (errores internos)
===============================================================================

Objetivo
--------
Tener excepciones internas coherentes, con:
- error_code estable
- error_id para correlación con logs
- message “humana” (sin filtrar secretos)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  OficinaError + subclases

Responsabilidades:
  - Estandarizar errores internos que luego se mapean a HTTP
  - Generar error_id para rastreo

Colaboradores:
  - api/exception_handlers.py (mapea a AppHTTPException)
  - infrastructure/store (StorageUnavailableError / MalformedDataError)
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class OficinaError(Exception):
    """Base para errores internos del sistema (error_code + error_id + message)."""

    error_code: str = "OFICINA_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class StorageUnavailableError(OficinaError):
    """El almacenamiento local (archivo/perfil) no está accesible."""

    error_code: str = "STORAGE_UNAVAILABLE"


class MalformedDataError(OficinaError):
    """Una entrada persistida no se pudo interpretar (JSON roto o forma inválida)."""

    error_code: str = "MALFORMED_DATA"


class CredentialsUpdateError(OficinaError):
    """Validación fallida al actualizar credenciales del administrador."""

    error_code: str = "CREDENTIALS_UPDATE_ERROR"
