"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the registration
pipeline requires from infrastructure. Adapters implement these
protocols through structural subtyping.
"""

from typing import Any, Protocol

from .models import NewUser, RegistrationSettings, Role, User


class SettingsProvider(Protocol):
    """Port interface for registration settings."""

    def get_settings(self) -> RegistrationSettings:
        """
        Load the current registration settings.

        Called once per registration; implementations must not cache
        across requests so operator changes apply immediately.
        """
        ...


class RoleResolver(Protocol):
    """Port interface for role lookup."""

    def resolve_role(self, role_type: str) -> Role | None:
        """
        Resolve a symbolic role name (e.g. ``authenticated``).

        Returns:
            The role, or None when no role has that type
        """
        ...


class IdentityStore(Protocol):
    """Port interface for user persistence."""

    def find_user_by_email(self, email: str, provider: str | None = None) -> User | None:
        """
        Find a user by normalized email.

        Args:
            email: Lowercased email address
            provider: Restrict to one provider; None searches all providers

        Returns:
            The first matching user, or None
        """
        ...

    def find_user_by_id(self, user_id: int) -> User | None:
        """Find a user by primary key."""
        ...

    def create_user(self, fields: NewUser) -> User:
        """
        Insert a user in a single statement.

        Raises:
            DuplicateIdentity: (email, provider) already exists
            IdentityStoreError: Any other store fault
        """
        ...

    def delete_user(self, user_id: int) -> None:
        """
        Delete a user by primary key.

        Raises:
            IdentityStoreError: Store fault
        """
        ...


class CredentialHasher(Protocol):
    """Port interface for password hashing."""

    def is_already_hashed(self, password: str) -> bool:
        """True when the value already looks like this hasher's output."""
        ...

    def hash_password(self, plaintext: str) -> str:
        """
        Hash a plaintext password.

        Raises:
            CredentialHashingError: Hashing failed
        """
        ...


class TokenIssuer(Protocol):
    """Port interface for session tokens."""

    def issue(self, subject_id: int) -> str:
        """
        Mint a token bound to a user id.

        Raises:
            TokenIssueError: Token could not be signed
        """
        ...

    def verify(self, token: str) -> dict[str, Any]:
        """
        Decode and validate a token.

        Raises:
            InvalidToken: Bad signature, malformed, or expired
        """
        ...


class NotificationDispatcher(Protocol):
    """Port interface for confirmation emails."""

    def send_confirmation_email(self, user: User) -> None:
        """
        Send the account confirmation email.

        Args:
            user: Persisted user; ``confirmation_token`` is set

        Raises:
            NotificationError: The email could not be dispatched
        """
        ...
