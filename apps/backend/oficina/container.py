"""
===============================================================================
TARJETA CRC - oficina/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (storage, data store, repositorios, use cases).
  - Exponer factories para FastAPI (Depends).
  - Mantener singletons con caching (lru_cache): el data store vive lo que
    vive el proceso (equivalente al perfil del navegador).
  - Centralizar decisiones runtime basadas en Settings (config).

Colaboradores:
  - oficina.crosscutting.config.get_settings
  - oficina.infrastructure.store (InMemoryStorage / JsonFileStorage)
  - oficina.infrastructure.repositories
  - oficina.application (ActivityLogger + use cases)
  - oficina.identity.authenticator.Authenticator

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO debe depender de FastAPI (solo expone factories).
  - Tests limpian los singletons con reset_container().
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache, partial

from .application.activity_log import ActivityLogger
from .application.usecases.employees import (
    CreateEmployeeUseCase,
    DeleteEmployeeUseCase,
    ListEmployeesUseCase,
    ToggleEmployeeStatusUseCase,
    UpdateAdminCredentialsUseCase,
    UpdateEmployeeUseCase,
)
from .crosscutting.config import get_settings
from .crosscutting.logger import logger
from .domain.repositories import (
    ActivityLogRepository,
    DataStore,
    IdentityRepository,
    KeyValueStorage,
)
from .identity.authenticator import Authenticator
from .identity.passwords import hash_password
from .infrastructure.repositories import (
    StoreActivityLogRepository,
    StoreIdentityRepository,
)
from .infrastructure.store import (
    InMemoryStorage,
    JsonFileStorage,
    MockDataStore,
    fixture_rows,
)


def _is_test_env() -> bool:
    """
    Determina si estamos en entorno de test.

    Regla:
      - app_env ∈ {"test", "testing", "ci"} => siempre storage en memoria.
    """
    env = get_settings().app_env.strip().lower()
    return env in {"test", "testing", "ci"}


# =============================================================================
# Persistencia (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_storage() -> KeyValueStorage:
    """Storage clave/valor: archivo JSON si DATA_STORE_PATH, si no memoria."""
    path = get_settings().data_store_path.strip()
    if path and not _is_test_env():
        logger.info("Data store respaldado por archivo", extra={"path": path})
        return JsonFileStorage(path)
    return InMemoryStorage()


@lru_cache(maxsize=1)
def get_data_store() -> DataStore:
    return MockDataStore(
        get_storage(), seed=partial(fixture_rows, password_hasher=hash_password)
    )


@lru_cache(maxsize=1)
def get_identity_repository() -> IdentityRepository:
    return StoreIdentityRepository(get_data_store())


@lru_cache(maxsize=1)
def get_activity_log_repository() -> ActivityLogRepository:
    return StoreActivityLogRepository(
        get_data_store(), max_entries=get_settings().activity_log_max_entries
    )


# =============================================================================
# Servicios
# =============================================================================


def get_authenticator() -> Authenticator:
    return Authenticator(get_identity_repository())


def get_activity_logger() -> ActivityLogger:
    return ActivityLogger(get_activity_log_repository())


# =============================================================================
# Use cases (funcionários / admin)
# =============================================================================


def get_list_employees_use_case() -> ListEmployeesUseCase:
    return ListEmployeesUseCase(get_identity_repository())


def get_create_employee_use_case() -> CreateEmployeeUseCase:
    return CreateEmployeeUseCase(get_identity_repository(), get_activity_logger())


def get_update_employee_use_case() -> UpdateEmployeeUseCase:
    return UpdateEmployeeUseCase(get_identity_repository(), get_activity_logger())


def get_delete_employee_use_case() -> DeleteEmployeeUseCase:
    return DeleteEmployeeUseCase(get_identity_repository(), get_activity_logger())


def get_toggle_employee_status_use_case() -> ToggleEmployeeStatusUseCase:
    return ToggleEmployeeStatusUseCase(
        get_identity_repository(), get_activity_logger()
    )


def get_update_admin_credentials_use_case() -> UpdateAdminCredentialsUseCase:
    return UpdateAdminCredentialsUseCase(
        get_identity_repository(), get_activity_logger()
    )


def reset_container() -> None:
    """Limpia los singletons (tests / recarga de settings)."""
    for factory in (
        get_storage,
        get_data_store,
        get_identity_repository,
        get_activity_log_repository,
    ):
        factory.cache_clear()
