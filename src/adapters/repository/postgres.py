"""
PostgreSQL repository adapters - Implement the store-facing domain ports.

This module provides the PostgreSQL implementations of the domain's
IdentityStore, RoleResolver and SettingsProvider ports using psycopg3
with raw SQL.

Uniqueness Design:
------------------
The pipeline looks a user up by email before inserting, which leaves a
check-then-act window between two concurrent registrations. The
``users_email_provider_key`` UNIQUE constraint on (email, provider) closes
it: the losing insert raises UniqueViolation, surfaced here as
DuplicateIdentity, which the pipeline reports as EMAIL_TAKEN.

Emails are stored lowercased (CHECK constraint), so the constraint is
case-insensitive in effect.

Error Mapping:
--------------
Every psycopg error (including pool timeouts) is re-raised as
IdentityStoreError so the domain never sees driver exceptions.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import psycopg
from psycopg.errors import UniqueViolation
from psycopg_pool import ConnectionPool

from src.domain.exceptions import DuplicateIdentity, IdentityStoreError
from src.domain.models import NewUser, RegistrationSettings, Role, User

logger = logging.getLogger(__name__)

_USER_COLUMNS = """
    u.id, u.first_name, u.last_name, u.email, u.password, u.provider,
    u.confirmed, u.blocked, u.confirmation_token, u.reset_password_token,
    r.id, r.type, r.name
"""


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    """Translate driver errors into domain store errors."""
    try:
        yield
    except psycopg.Error as e:
        logger.error(f"Identity store failure while {action}: {e}")
        raise IdentityStoreError(f"Identity store failure while {action}") from e


def _row_to_user(row: tuple) -> User:
    role = Role(id=row[10], type=row[11], name=row[12] or "") if row[10] is not None else None
    return User(
        id=row[0],
        first_name=row[1],
        last_name=row[2],
        email=row[3],
        password=row[4],
        provider=row[5],
        confirmed=row[6],
        blocked=row[7],
        confirmation_token=row[8],
        reset_password_token=row[9],
        role=role,
    )


class PostgresIdentityStore:
    """
    Implements IdentityStore protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize store with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def find_user_by_email(self, email: str, provider: str | None = None) -> User | None:
        """
        Find the oldest user with this (already normalized) email.

        Args:
            email: Lowercased email address
            provider: Restrict to one provider; None searches all providers

        Returns:
            Matching user with its role, or None
        """
        sql = f"""
            SELECT {_USER_COLUMNS}
            FROM users u
            LEFT JOIN roles r ON r.id = u.role_id
            WHERE u.email = %s
        """
        params: tuple = (email,)
        if provider is not None:
            sql += " AND u.provider = %s"
            params = (email, provider)
        sql += " ORDER BY u.id LIMIT 1"

        with _store_errors("finding user by email"):
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, params)
                row = cursor.fetchone()
        return _row_to_user(row) if row is not None else None

    def find_user_by_id(self, user_id: int) -> User | None:
        sql = f"""
            SELECT {_USER_COLUMNS}
            FROM users u
            LEFT JOIN roles r ON r.id = u.role_id
            WHERE u.id = %s
        """
        with _store_errors("finding user by id"):
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (user_id,))
                row = cursor.fetchone()
        return _row_to_user(row) if row is not None else None

    def create_user(self, fields: NewUser) -> User:
        """
        Insert a fully populated user in one statement.

        Args:
            fields: Every column value, already validated and hashed

        Returns:
            The persisted user

        Raises:
            DuplicateIdentity: (email, provider) already taken
            IdentityStoreError: Any other database failure
        """
        sql = """
            INSERT INTO users (first_name, last_name, email, password, provider,
                               confirmed, blocked, role_id, confirmation_token)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING id
        """
        params = (
            fields.first_name,
            fields.last_name,
            fields.email,
            fields.password,
            fields.provider,
            fields.confirmed,
            fields.blocked,
            fields.role.id,
            fields.confirmation_token,
        )

        with _store_errors("creating user"):
            try:
                with self._pool.connection() as conn, conn.cursor() as cursor:
                    cursor.execute(sql, params)
                    row = cursor.fetchone()
                    conn.commit()
            except UniqueViolation as e:
                # Lost the race to a concurrent registration
                logger.info(f"Insert conflict on ({fields.email}, {fields.provider})")
                raise DuplicateIdentity(fields.email, fields.provider) from e

        return User(
            id=row[0],
            first_name=fields.first_name,
            last_name=fields.last_name,
            email=fields.email,
            password=fields.password,
            provider=fields.provider,
            confirmed=fields.confirmed,
            blocked=fields.blocked,
            role=fields.role,
            confirmation_token=fields.confirmation_token,
        )

    def delete_user(self, user_id: int) -> None:
        with _store_errors("deleting user"):
            with self._pool.connection() as conn:
                conn.execute("DELETE FROM users WHERE id = %s", (user_id,))
                conn.commit()


class PostgresRoleResolver:
    """Implements RoleResolver protocol via psycopg3."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def resolve_role(self, role_type: str) -> Role | None:
        with _store_errors("resolving role"):
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute("SELECT id, type, name FROM roles WHERE type = %s", (role_type,))
                row = cursor.fetchone()
        if row is None:
            return None
        return Role(id=row[0], type=row[1], name=row[2] or "")


class PostgresSettingsProvider:
    """
    Implements SettingsProvider protocol via psycopg3.

    Reads the single ``registration_settings`` row on every call so an
    operator change applies to the next registration.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def get_settings(self) -> RegistrationSettings:
        sql = """
            SELECT allow_register, default_role, email_confirmation, unique_email
            FROM registration_settings
            WHERE id = 1
        """
        with _store_errors("loading registration settings"):
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql)
                row = cursor.fetchone()

        if row is None:
            logger.warning("registration_settings row missing, using defaults")
            return RegistrationSettings()

        return RegistrationSettings(
            allow_register=row[0],
            default_role=row[1],
            email_confirmation=row[2],
            unique_email=row[3],
        )


MIGRATIONS_DIR = Path(__file__).resolve().parents[3] / "migrations"


def run_migrations(pool: ConnectionPool, migrations_dir: Path = MIGRATIONS_DIR) -> None:
    """
    Apply every ``*.sql`` file in filename order.

    Files must be idempotent (``IF NOT EXISTS``, ``ON CONFLICT DO NOTHING``);
    they run on every startup. Each file commits on its own.

    Raises:
        RuntimeError: A migration failed; startup should abort
    """
    sql_files = sorted(migrations_dir.glob("*.sql")) if migrations_dir.exists() else []
    if not sql_files:
        logger.warning(f"No migrations found in {migrations_dir}")
        return

    for sql_file in sql_files:
        try:
            with pool.connection() as conn:
                conn.execute(sql_file.read_text())
        except (OSError, psycopg.Error) as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
        logger.info(f"Applied migration {sql_file.name}")
