"""
Adversarial tests for race condition attack prevention.

Verifies that concurrent registrations for the same email are decided by
the (email, provider) unique constraint, so an attacker racing the
pipeline's lookup-then-insert window cannot:
- Create duplicate accounts
- Leave half-registered users behind when a side effect fails
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from psycopg_pool import ConnectionPool

from src.domain.models import ErrorCode, Rejected, RegistrationOutcome, RegistrationRequest, Success
from src.domain.registration import RegistrationService
from tests.db import count_users, set_flags
from tests.fakes import FakeNotificationDispatcher

# Apply adversarial marker to all tests in this module
pytestmark = pytest.mark.adversarial


def request_for(email: str, first_name: str = "Ada") -> RegistrationRequest:
    return RegistrationRequest(
        first_name=first_name,
        last_name="Lovelace",
        email=email,
        password="secure123",
    )


def race(service: RegistrationService, requests: list[RegistrationRequest]) -> list[RegistrationOutcome]:
    """Submit all requests at once, released together by a barrier."""
    barrier = threading.Barrier(len(requests))
    results: list[RegistrationOutcome] = []
    results_lock = threading.Lock()

    def attack(request: RegistrationRequest) -> None:
        barrier.wait()
        outcome = service.register(request)
        with results_lock:
            results.append(outcome)

    with ThreadPoolExecutor(max_workers=len(requests)) as executor:
        futures = [executor.submit(attack, r) for r in requests]
        for f in futures:
            f.result()
    return results


class TestRaceConditionAttacks:
    """
    Adversarial tests simulating race condition attacks.

    These tests simulate an attacker rapidly submitting concurrent
    registrations to slip past the email lookup.
    """

    def test_concurrent_registration_attack_exactly_one_succeeds(
        self, pg_service: RegistrationService, pool: ConnectionPool
    ) -> None:
        email = "attack@example.com"
        num_attackers = 5

        results = race(pg_service, [request_for(email) for _ in range(num_attackers)])

        successes = [r for r in results if isinstance(r, Success)]
        rejections = [r for r in results if isinstance(r, Rejected)]
        assert len(successes) == 1, (
            f"Race condition vulnerability: {len(successes)} registrations succeeded "
            f"(expected exactly 1)"
        )
        assert len(rejections) == num_attackers - 1
        assert all(r.code == ErrorCode.EMAIL_TAKEN for r in rejections)
        assert count_users(pool, email) == 1

    def test_case_variants_race_as_one_identity(
        self, pg_service: RegistrationService, pool: ConnectionPool
    ) -> None:
        """Case variants normalize to the same key before the insert."""
        variants = ["case@example.com", "CASE@example.com", "Case@Example.com", " case@EXAMPLE.com "]

        results = race(pg_service, [request_for(v) for v in variants])

        assert sum(isinstance(r, Success) for r in results) == 1
        assert count_users(pool, "case@example.com") == 1

    def test_winner_data_is_uncorrupted(
        self, pg_service: RegistrationService, pool: ConnectionPool
    ) -> None:
        email = "integrity@example.com"

        results = race(pg_service, [request_for(email, first_name=f"Attacker{i}") for i in range(5)])

        winner = next(r for r in results if isinstance(r, Success))
        with pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT id, first_name FROM users WHERE email = %s", (email,))
            row = cursor.fetchone()

        assert row[0] == winner.user.id
        assert row[1] == winner.user.first_name


class TestCompensationUnderConcurrency:
    """A failed confirmation email never leaves a user row behind."""

    def test_failed_notifications_leave_no_rows(
        self,
        pg_service: RegistrationService,
        pool: ConnectionPool,
        dispatcher: FakeNotificationDispatcher,
    ) -> None:
        set_flags(pool, email_confirmation=True)
        dispatcher.fail = True

        results = race(pg_service, [request_for("mailfail@example.com") for _ in range(5)])

        assert all(isinstance(r, Rejected) for r in results)
        assert {r.code for r in results} <= {ErrorCode.NOTIFICATION_FAILED, ErrorCode.EMAIL_TAKEN}
        assert count_users(pool, "mailfail@example.com") == 0

    def test_retry_after_failed_notification_succeeds(
        self,
        pg_service: RegistrationService,
        pool: ConnectionPool,
        dispatcher: FakeNotificationDispatcher,
    ) -> None:
        set_flags(pool, email_confirmation=True)
        dispatcher.fail = True
        first = pg_service.register(request_for("retry@example.com"))

        dispatcher.fail = False
        second = pg_service.register(request_for("retry@example.com"))

        assert first.code == ErrorCode.NOTIFICATION_FAILED
        assert second.user.email == "retry@example.com"
        assert count_users(pool, "retry@example.com") == 1
