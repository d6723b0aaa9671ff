"""
Domain exceptions - Infrastructure fault types for registration.

Business-rule and validation failures are never raised: the pipeline
returns them as ``Rejected`` outcomes. The exceptions below cover the
faults a caller may retry (store, hashing, token minting) plus the
collaborator-level signals the pipeline translates into outcomes.
"""


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    pass


class InfrastructureError(RegistrationError):
    """A collaborator failed; the request may be retried."""

    pass


class IdentityStoreError(InfrastructureError):
    """The identity store is unavailable or a statement failed."""

    pass


class DuplicateIdentity(IdentityStoreError):
    """The store rejected an insert on its (email, provider) constraint."""

    def __init__(self, email: str, provider: str) -> None:
        super().__init__(f"{email} ({provider})")
        self.email = email
        self.provider = provider


class CredentialHashingError(InfrastructureError):
    """The credential hasher could not produce a hash."""

    pass


class TokenIssueError(InfrastructureError):
    """The token issuer could not mint a token."""

    pass


class NotificationError(RegistrationError):
    """A confirmation notification could not be dispatched."""

    pass


class InvalidToken(RegistrationError):
    """Token is malformed, expired, or signed with another key."""

    pass
