"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A registration service wired to in-memory collaborators
- A PostgreSQL connection pool (tests using it skip when no database
  is reachable)
"""

from collections.abc import Generator

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.postgres import run_migrations
from src.config.settings import get_settings
from src.domain.registration import RegistrationService
from tests.fakes import (
    FakeCredentialHasher,
    FakeIdentityStore,
    FakeNotificationDispatcher,
    FakeRoleResolver,
    FakeSettingsProvider,
    FakeTokenIssuer,
)


@pytest.fixture
def settings_provider() -> FakeSettingsProvider:
    return FakeSettingsProvider()


@pytest.fixture
def identity_store() -> FakeIdentityStore:
    return FakeIdentityStore()


@pytest.fixture
def dispatcher() -> FakeNotificationDispatcher:
    return FakeNotificationDispatcher()


@pytest.fixture
def service(
    settings_provider: FakeSettingsProvider,
    identity_store: FakeIdentityStore,
    dispatcher: FakeNotificationDispatcher,
) -> RegistrationService:
    """Registration service over in-memory collaborators."""
    return RegistrationService(
        settings_provider=settings_provider,
        role_resolver=FakeRoleResolver(),
        identity_store=identity_store,
        credential_hasher=FakeCredentialHasher(),
        token_issuer=FakeTokenIssuer(),
        notification_dispatcher=dispatcher,
    )


@pytest.fixture(scope="session")
def pool() -> Generator[ConnectionPool, None, None]:
    """Migrated connection pool; skips the requesting test without PostgreSQL."""
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=10,
        open=False,
    )
    try:
        pool.open(wait=True, timeout=3.0)
    except PoolTimeout:
        pool.close()
        pytest.skip("PostgreSQL is not available")

    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Empty users and reset registration settings before each test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM users")
        conn.execute(
            """
            UPDATE registration_settings
            SET allow_register = TRUE, default_role = 'authenticated',
                email_confirmation = FALSE, unique_email = TRUE
            WHERE id = 1
            """
        )
        conn.commit()
    yield
