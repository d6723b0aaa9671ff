"""Direct SQL helpers for tests that run against PostgreSQL."""

from psycopg_pool import ConnectionPool


def set_flags(pool: ConnectionPool, **flags: object) -> None:
    """Update the registration_settings row."""
    assignments = ", ".join(f"{name} = %s" for name in flags)
    with pool.connection() as conn:
        conn.execute(
            f"UPDATE registration_settings SET {assignments} WHERE id = 1",
            tuple(flags.values()),
        )
        conn.commit()


def count_users(pool: ConnectionPool, email: str | None = None) -> int:
    with pool.connection() as conn, conn.cursor() as cursor:
        if email is None:
            cursor.execute("SELECT COUNT(*) FROM users")
        else:
            cursor.execute("SELECT COUNT(*) FROM users WHERE email = %s", (email,))
        return cursor.fetchone()[0]


def insert_user(pool: ConnectionPool, email: str, provider: str) -> None:
    """Seed a user the way another provider's sign-in would."""
    with pool.connection() as conn:
        conn.execute(
            """
            INSERT INTO users (first_name, last_name, email, provider, confirmed)
            VALUES ('Existing', 'User', %s, %s, TRUE)
            """,
            (email, provider),
        )
        conn.commit()
