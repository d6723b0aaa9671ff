"""Repository adapters - Database implementations."""

from .postgres import (
    PostgresIdentityStore,
    PostgresRoleResolver,
    PostgresSettingsProvider,
    run_migrations,
)

__all__ = [
    "PostgresIdentityStore",
    "PostgresRoleResolver",
    "PostgresSettingsProvider",
    "run_migrations",
]
