"""
Shared fixtures for adversarial tests.

Provides a registration service wired to the real PostgreSQL adapters
for race condition and mass-assignment tests.
"""

import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import (
    PostgresIdentityStore,
    PostgresRoleResolver,
    PostgresSettingsProvider,
)
from src.adapters.security.bcrypt_hasher import BcryptCredentialHasher
from src.adapters.security.jwt_issuer import JwtTokenIssuer
from src.domain.registration import RegistrationService
from tests.fakes import FakeNotificationDispatcher


@pytest.fixture
def dispatcher() -> FakeNotificationDispatcher:
    return FakeNotificationDispatcher()


@pytest.fixture
def pg_service(
    pool: ConnectionPool, clean_database: None, dispatcher: FakeNotificationDispatcher
) -> RegistrationService:
    """Registration service over the real store, hasher and token issuer."""
    return RegistrationService(
        settings_provider=PostgresSettingsProvider(pool),
        role_resolver=PostgresRoleResolver(pool),
        identity_store=PostgresIdentityStore(pool),
        credential_hasher=BcryptCredentialHasher(rounds=10),
        token_issuer=JwtTokenIssuer("adversarial-test-secret-long-enough-for-hs256"),
        notification_dispatcher=dispatcher,
    )
