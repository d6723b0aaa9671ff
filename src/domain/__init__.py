"""
Domain layer - Pure business logic with zero framework imports.

This package contains the registration pipeline, its data model and
tagged outcomes, and the port interfaces it requires from
infrastructure, keeping the core decoupled from web, database and
crypto libraries.
"""

from .exceptions import (
    CredentialHashingError,
    DuplicateIdentity,
    IdentityStoreError,
    InfrastructureError,
    InvalidToken,
    NotificationError,
    RegistrationError,
    TokenIssueError,
)
from .models import (
    ErrorCode,
    ErrorKind,
    NewUser,
    PendingConfirmation,
    PublicUser,
    RegistrationOutcome,
    RegistrationRequest,
    RegistrationSettings,
    Rejected,
    Role,
    Success,
    User,
)
from .ports import (
    CredentialHasher,
    IdentityStore,
    NotificationDispatcher,
    RoleResolver,
    SettingsProvider,
    TokenIssuer,
)
from .registration import RegistrationService

__all__ = [
    "CredentialHasher",
    "CredentialHashingError",
    "DuplicateIdentity",
    "ErrorCode",
    "ErrorKind",
    "IdentityStore",
    "IdentityStoreError",
    "InfrastructureError",
    "InvalidToken",
    "NewUser",
    "NotificationDispatcher",
    "NotificationError",
    "PendingConfirmation",
    "PublicUser",
    "RegistrationError",
    "RegistrationOutcome",
    "RegistrationRequest",
    "RegistrationService",
    "RegistrationSettings",
    "Rejected",
    "Role",
    "RoleResolver",
    "SettingsProvider",
    "Success",
    "TokenIssueError",
    "TokenIssuer",
    "User",
]
