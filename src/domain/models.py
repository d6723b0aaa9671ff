"""
Domain models - Registration data model and tagged outcomes.

Plain dataclasses only. The persisted ``User`` carries internal-only
fields (hashed password, confirmation and reset tokens); anything that
crosses the system boundary is a ``PublicUser``, which has no slot for
them.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

LOCAL_PROVIDER = "local"

# Fields a caller may never set on their own account
SERVER_ONLY_FIELDS = frozenset({"avatar", "confirmed", "confirmationToken", "resetPasswordToken"})


class ErrorKind(str, Enum):
    """Taxonomy bucket of a rejection."""

    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    SIDE_EFFECT = "side_effect"


class ErrorCode(str, Enum):
    """Stable machine-readable rejection codes."""

    REGISTRATION_DISABLED = "REGISTRATION_DISABLED"
    MISSING_FIRSTNAME = "MISSING_FIRSTNAME"
    MISSING_LASTNAME = "MISSING_LASTNAME"
    MISSING_EMAIL = "MISSING_EMAIL"
    MISSING_PASSWORD = "MISSING_PASSWORD"
    BAD_PASSWORD_FORMAT = "BAD_PASSWORD_FORMAT"
    ROLE_NOT_FOUND = "ROLE_NOT_FOUND"
    BAD_EMAIL_FORMAT = "BAD_EMAIL_FORMAT"
    EMAIL_TAKEN = "EMAIL_TAKEN"
    NOTIFICATION_FAILED = "NOTIFICATION_FAILED"

    @property
    def kind(self) -> ErrorKind:
        return _KINDS[self]


_KINDS = {
    ErrorCode.REGISTRATION_DISABLED: ErrorKind.CONFIGURATION,
    ErrorCode.ROLE_NOT_FOUND: ErrorKind.CONFIGURATION,
    ErrorCode.MISSING_FIRSTNAME: ErrorKind.VALIDATION,
    ErrorCode.MISSING_LASTNAME: ErrorKind.VALIDATION,
    ErrorCode.MISSING_EMAIL: ErrorKind.VALIDATION,
    ErrorCode.MISSING_PASSWORD: ErrorKind.VALIDATION,
    ErrorCode.BAD_PASSWORD_FORMAT: ErrorKind.VALIDATION,
    ErrorCode.BAD_EMAIL_FORMAT: ErrorKind.VALIDATION,
    ErrorCode.EMAIL_TAKEN: ErrorKind.CONFLICT,
    ErrorCode.NOTIFICATION_FAILED: ErrorKind.SIDE_EFFECT,
}


@dataclass(frozen=True)
class RegistrationSettings:
    """Operator-controlled registration flags, read fresh per request."""

    allow_register: bool = True
    default_role: str = "authenticated"
    email_confirmation: bool = False
    unique_email: bool = True


@dataclass(frozen=True)
class Role:
    id: int
    type: str
    name: str = ""


@dataclass(frozen=True)
class RegistrationRequest:
    """
    Caller-supplied registration input.

    ``extra`` holds every other attribute the caller sent. It is carried
    for inspection only and never reaches the store: ``NewUser`` is built
    from the named fields alone. Server-only keys found in it are dropped
    and logged as an injection attempt.
    """

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    password: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def server_fields(self) -> list[str]:
        """Server-only keys the caller tried to set, sorted."""
        return sorted(k for k in self.extra if k in SERVER_ONLY_FIELDS)

    def without_server_fields(self) -> "RegistrationRequest":
        """Return a copy with caller-supplied server-only fields dropped."""
        cleaned = {k: v for k, v in self.extra.items() if k not in SERVER_ONLY_FIELDS}
        return RegistrationRequest(
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            password=self.password,
            extra=cleaned,
        )


@dataclass(frozen=True)
class NewUser:
    """Fully populated user fields for a single store insert."""

    first_name: str
    last_name: str
    email: str
    password: str
    provider: str
    confirmed: bool
    role: Role
    confirmation_token: str | None = None
    blocked: bool = False


@dataclass(frozen=True)
class User:
    """Persisted user record, including internal-only fields."""

    id: int
    first_name: str
    last_name: str
    email: str
    password: str | None
    provider: str
    confirmed: bool
    blocked: bool
    role: Role | None
    confirmation_token: str | None = None
    reset_password_token: str | None = None


@dataclass(frozen=True)
class PublicUser:
    """Sanitized user safe to return across the system boundary."""

    id: int
    first_name: str
    last_name: str
    email: str
    provider: str
    confirmed: bool
    blocked: bool
    role: Role | None

    @classmethod
    def from_user(cls, user: User) -> "PublicUser":
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            provider=user.provider,
            confirmed=user.confirmed,
            blocked=user.blocked,
            role=user.role,
        )


@dataclass(frozen=True)
class Success:
    """User created and confirmed; carries a session token."""

    user: PublicUser
    jwt: str


@dataclass(frozen=True)
class PendingConfirmation:
    """User created; a confirmation email is on its way. No token."""

    user: PublicUser


@dataclass(frozen=True)
class Rejected:
    """
    Business-rule or validation failure.

    ``message_id`` is the translation key clients use to localize
    ``message``; ``field`` names the offending input when there is one.
    """

    code: ErrorCode
    message: str
    field: str | None = None
    message_id: str | None = None

    @property
    def kind(self) -> ErrorKind:
        return self.code.kind


RegistrationOutcome = Success | PendingConfirmation | Rejected
