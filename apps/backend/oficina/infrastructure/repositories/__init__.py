"""
============================================================
TARJETA CRC
============================================================
Class: oficina.infrastructure.repositories (Package exports)

Responsibilities:
- Exponer los repositorios respaldados por el Mock Data Store en un único
  punto de importación.

Collaborators:
- infrastructure.store.MockDataStore
- tables (mapeo filas <-> registros)
============================================================
"""

from .activity_log_repository import StoreActivityLogRepository
from .identity_repository import StoreIdentityRepository

__all__ = [
    "StoreActivityLogRepository",
    "StoreIdentityRepository",
]
