"""
Adversarial tests for mass-assignment attacks.

A caller may send any attribute alongside the registration fields.
None of them may influence the stored account: confirmation state,
tokens, role, provider and blocked flag are always set by the server.
"""

import pytest
from fastapi.testclient import TestClient
from psycopg_pool import ConnectionPool

from src.api.main import app
from tests.db import set_flags

pytestmark = pytest.mark.adversarial

REGISTER_URL = "/v1/auth/local/register"

VALID_BODY = {
    "firstName": "Mallory",
    "lastName": "Attacker",
    "email": "mallory@example.com",
    "password": "secure123",
}


@pytest.fixture
def client(pool: ConnectionPool, clean_database: None) -> TestClient:
    app.state.pool = pool
    return TestClient(app)


def stored(pool: ConnectionPool) -> tuple:
    with pool.connection() as conn, conn.cursor() as cursor:
        cursor.execute(
            """
            SELECT u.confirmed, u.confirmation_token, u.reset_password_token,
                   u.provider, u.blocked, r.type
            FROM users u LEFT JOIN roles r ON r.id = u.role_id
            WHERE u.email = %s
            """,
            ("mallory@example.com",),
        )
        return cursor.fetchone()


class TestMassAssignment:
    def test_cannot_self_confirm(self, client: TestClient, pool: ConnectionPool) -> None:
        set_flags(pool, email_confirmation=True)

        response = client.post(
            REGISTER_URL,
            json={
                **VALID_BODY,
                "confirmed": True,
                "confirmationToken": "attacker-chosen",
                "resetPasswordToken": "attacker-reset",
                "avatar": "http://evil.example.com/x.png",
            },
        )

        assert response.status_code == 200
        assert "jwt" not in response.json()
        confirmed, confirmation_token, reset_token, *_ = stored(pool)
        assert confirmed is False
        assert confirmation_token != "attacker-chosen"
        assert reset_token is None

    @pytest.mark.parametrize(
        "extra",
        [
            {"role": 2},
            {"role": {"type": "public"}},
            {"provider": "github"},
            {"blocked": True},
            {"id": 1},
        ],
    )
    def test_server_controlled_fields_ignored(
        self, client: TestClient, pool: ConnectionPool, extra: dict
    ) -> None:
        response = client.post(REGISTER_URL, json={**VALID_BODY, **extra})

        assert response.status_code == 200
        _, _, _, provider, blocked, role_type = stored(pool)
        assert provider == "local"
        assert blocked is False
        assert role_type == "authenticated"
