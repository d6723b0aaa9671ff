"""
Registration domain service - Validation and provisioning pipeline.

This module contains the core business logic for local user
registration. Every collaborator is injected, and every business-rule
failure comes back as a ``Rejected`` outcome rather than an exception.

Pipeline (strict order; the first failing step decides the outcome)
===================================================================

1. Settings gate         allow_register            REGISTRATION_DISABLED
2. Strip server-only fields (avatar, confirmed, tokens)
3. firstName present                               MISSING_FIRSTNAME
4. lastName present                                MISSING_LASTNAME
5. email present                                   MISSING_EMAIL
6. password present                                MISSING_PASSWORD
7. password not already hashed                     BAD_PASSWORD_FORMAT
8. default role resolves                           ROLE_NOT_FOUND
9. email grammar, then lowercase                   BAD_EMAIL_FORMAT
10. hash password
11. uniqueness (same provider, or any provider
    when unique_email is on)                       EMAIL_TAKEN
12. single insert (store constraint is the
    authoritative uniqueness check)                EMAIL_TAKEN
13. email_confirmation on: dispatch, delete the
    row again if dispatch fails                    NOTIFICATION_FAILED
14. otherwise issue a token (row deleted again if minting fails)

Infrastructure faults (store, hasher, token issuer) propagate as
``InfrastructureError`` subclasses and are never mapped to a rejection.
A fault after the insert removes the row before propagating.
"""

import logging
import re
import secrets
from dataclasses import dataclass

from .exceptions import DuplicateIdentity, InvalidToken, NotificationError, TokenIssueError
from .models import (
    LOCAL_PROVIDER,
    ErrorCode,
    NewUser,
    PendingConfirmation,
    PublicUser,
    RegistrationOutcome,
    RegistrationRequest,
    Rejected,
    Success,
)
from .ports import (
    CredentialHasher,
    IdentityStore,
    NotificationDispatcher,
    RoleResolver,
    SettingsProvider,
    TokenIssuer,
)

logger = logging.getLogger(__name__)

# \s plus U+FEFF is whitespace; a quoted local part may not contain a line terminator
EMAIL_PATTERN = re.compile(
    r"(([^<>()\[\]\\.,;:\s\ufeff@\"]+(\.[^<>()\[\]\\.,;:\s\ufeff@\"]+)*)|(\"[^\n\r\u2028\u2029]+\"))"
    r"@((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\])|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))"
)

_REJECTIONS: dict[ErrorCode, tuple[str | None, str, str]] = {
    ErrorCode.REGISTRATION_DISABLED: (
        None,
        "Auth.advanced.allow_register",
        "Register action is currently disabled.",
    ),
    ErrorCode.MISSING_FIRSTNAME: (
        "firstName",
        "Auth.form.error.firstName.provide",
        "Please provide your first name.",
    ),
    ErrorCode.MISSING_LASTNAME: (
        "lastName",
        "Auth.form.error.lastName.provide",
        "Please provide your last name.",
    ),
    ErrorCode.MISSING_EMAIL: (
        "email",
        "Auth.form.error.email.provide",
        "Please provide your email.",
    ),
    ErrorCode.MISSING_PASSWORD: (
        "password",
        "Auth.form.error.password.provide",
        "Please provide your password.",
    ),
    ErrorCode.BAD_PASSWORD_FORMAT: (
        "password",
        "Auth.form.error.password.format",
        "Your password cannot contain more than three times the symbol `$`.",
    ),
    ErrorCode.ROLE_NOT_FOUND: (
        None,
        "Auth.form.error.role.notFound",
        "Impossible to find the default role.",
    ),
    ErrorCode.BAD_EMAIL_FORMAT: (
        "email",
        "Auth.form.error.email.format",
        "Please provide valid email address.",
    ),
    ErrorCode.EMAIL_TAKEN: (
        "email",
        "Auth.form.error.email.taken",
        "Email is already taken.",
    ),
    ErrorCode.NOTIFICATION_FAILED: (
        "email",
        "Auth.form.error.email.send",
        "Unable to send the confirmation email.",
    ),
}


def reject(code: ErrorCode) -> Rejected:
    """Build the canonical rejection for a code."""
    field, message_id, message = _REJECTIONS[code]
    return Rejected(code=code, message=message, field=field, message_id=message_id)


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.fullmatch(email) is not None


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return email.strip().lower()


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


@dataclass
class RegistrationService:
    """
    Domain service for user registration.

    Orchestrates settings, role lookup, validation, hashing, the
    uniqueness check, persistence and the confirmation-or-token branch.
    """

    settings_provider: SettingsProvider
    role_resolver: RoleResolver
    identity_store: IdentityStore
    credential_hasher: CredentialHasher
    token_issuer: TokenIssuer
    notification_dispatcher: NotificationDispatcher

    def register(self, request: RegistrationRequest) -> RegistrationOutcome:
        """
        Register a new local user.

        Args:
            request: Raw caller input

        Returns:
            Success (with jwt), PendingConfirmation, or Rejected

        Raises:
            InfrastructureError: A collaborator failed; nothing half-written
                is left behind
        """
        provider = LOCAL_PROVIDER
        settings = self.settings_provider.get_settings()

        if not settings.allow_register:
            return self._rejected(ErrorCode.REGISTRATION_DISABLED)

        injected = request.server_fields()
        if injected:
            logger.warning("Ignoring server-only fields in registration request: %s", ", ".join(injected))
            request = request.without_server_fields()

        if _blank(request.first_name):
            return self._rejected(ErrorCode.MISSING_FIRSTNAME)
        if _blank(request.last_name):
            return self._rejected(ErrorCode.MISSING_LASTNAME)
        if _blank(request.email):
            return self._rejected(ErrorCode.MISSING_EMAIL)
        if not request.password:
            return self._rejected(ErrorCode.MISSING_PASSWORD)

        if self.credential_hasher.is_already_hashed(request.password):
            return self._rejected(ErrorCode.BAD_PASSWORD_FORMAT)

        role = self.role_resolver.resolve_role(settings.default_role)
        if role is None:
            logger.error("Default role %r not found; check registration settings", settings.default_role)
            return self._rejected(ErrorCode.ROLE_NOT_FOUND)

        email = request.email.strip()
        if not is_valid_email(email):
            return self._rejected(ErrorCode.BAD_EMAIL_FORMAT)
        email = normalize_email(email)

        password_hash = self.credential_hasher.hash_password(request.password)

        existing = self.identity_store.find_user_by_email(email)
        if existing is not None:
            if existing.provider == provider or settings.unique_email:
                return self._rejected(ErrorCode.EMAIL_TAKEN)

        confirmation_token = secrets.token_hex(20) if settings.email_confirmation else None
        fields = NewUser(
            first_name=request.first_name.strip(),
            last_name=request.last_name.strip(),
            email=email,
            password=password_hash,
            provider=provider,
            confirmed=not settings.email_confirmation,
            role=role,
            confirmation_token=confirmation_token,
        )

        try:
            user = self.identity_store.create_user(fields)
        except DuplicateIdentity:
            # Lost the race between the lookup above and the insert
            return self._rejected(ErrorCode.EMAIL_TAKEN)

        if settings.email_confirmation:
            try:
                self.notification_dispatcher.send_confirmation_email(user)
            except NotificationError:
                logger.exception("Confirmation email failed for user %s; removing account", user.id)
                self.identity_store.delete_user(user.id)
                return self._rejected(ErrorCode.NOTIFICATION_FAILED)

            logger.info("Registered user %s (%s), confirmation pending", user.id, provider)
            return PendingConfirmation(user=PublicUser.from_user(user))

        try:
            jwt = self.token_issuer.issue(user.id)
        except TokenIssueError:
            logger.exception("Token issue failed for user %s; removing account", user.id)
            self.identity_store.delete_user(user.id)
            raise

        logger.info("Registered user %s (%s)", user.id, provider)
        return Success(user=PublicUser.from_user(user), jwt=jwt)

    def current_user(self, token: str) -> PublicUser:
        """
        Resolve the user a session token was issued for.

        Raises:
            InvalidToken: Token invalid, or its user no longer exists
        """
        claims = self.token_issuer.verify(token)
        user_id = claims.get("id")
        if not isinstance(user_id, int):
            raise InvalidToken("Token has no user id")

        user = self.identity_store.find_user_by_id(user_id)
        if user is None:
            raise InvalidToken("Token user not found")
        return PublicUser.from_user(user)

    def _rejected(self, code: ErrorCode) -> Rejected:
        logger.info("Registration rejected: %s", code.value)
        return reject(code)
