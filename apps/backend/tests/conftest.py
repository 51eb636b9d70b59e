"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Provide reusable test fixtures (fake clock, seeded data store, sessions)
  - Configure test environment (APP_ENV=test, no .env file)
  - Reset container singletons between tests

Collaborators:
  - pytest: Test framework
  - oficina.infrastructure.store: in-memory storage + fixtures
  - oficina.identity: SessionStore / Authenticator

Notes:
  - Fixtures are auto-discovered by pytest
  - The clock is injected everywhere expiry matters, never patched globally
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from functools import partial
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")

from oficina.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from oficina.application.activity_log import ActivityLogger  # noqa: E402
from oficina.container import reset_container  # noqa: E402
from oficina.identity.authenticator import Authenticator  # noqa: E402
from oficina.identity.passwords import hash_password  # noqa: E402
from oficina.identity.session import SessionStore  # noqa: E402
from oficina.identity.tokens import SessionSettings  # noqa: E402
from oficina.infrastructure.repositories import (  # noqa: E402
    StoreActivityLogRepository,
    StoreIdentityRepository,
)
from oficina.infrastructure.store import (  # noqa: E402
    InMemoryStorage,
    MockDataStore,
    fixture_rows,
)


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


# ============================================================================
# Clock
# ============================================================================


class FakeClock:
    """Reloj manual: now() solo avanza con advance()."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 5, 10, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ============================================================================
# Container isolation
# ============================================================================


@pytest.fixture(autouse=True)
def _isolated_container():
    reset_container()
    app_config.get_settings.cache_clear()
    yield
    reset_container()
    app_config.get_settings.cache_clear()


# ============================================================================
# Persistence fixtures
# ============================================================================


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def data_store(storage: InMemoryStorage) -> MockDataStore:
    return MockDataStore(
        storage, seed=partial(fixture_rows, password_hasher=hash_password)
    )


@pytest.fixture
def identity_repository(data_store: MockDataStore) -> StoreIdentityRepository:
    return StoreIdentityRepository(data_store)


@pytest.fixture
def activity_repository(data_store: MockDataStore) -> StoreActivityLogRepository:
    return StoreActivityLogRepository(data_store, max_entries=1000)


# ============================================================================
# Session / identity fixtures
# ============================================================================


@pytest.fixture
def session_settings() -> SessionSettings:
    return SessionSettings(
        secret="test-secret",
        ttl=timedelta(hours=8),
        cookie_name="auth_token",
        role_cookie_name="user_role",
        cookie_secure=False,
    )


@pytest.fixture
def session(session_settings: SessionSettings, clock: FakeClock) -> SessionStore:
    return SessionStore(settings=session_settings, clock=clock)


@pytest.fixture
def authenticator(identity_repository: StoreIdentityRepository) -> Authenticator:
    return Authenticator(identity_repository)


@pytest.fixture
def activity_logger(
    activity_repository: StoreActivityLogRepository, clock: FakeClock
) -> ActivityLogger:
    return ActivityLogger(activity_repository, clock=clock)
