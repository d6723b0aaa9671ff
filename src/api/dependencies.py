"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting the registration
service and every infrastructure adapter it is built from.
"""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import (
    PostgresIdentityStore,
    PostgresRoleResolver,
    PostgresSettingsProvider,
)
from src.adapters.security.bcrypt_hasher import BcryptCredentialHasher
from src.adapters.security.jwt_issuer import JwtTokenIssuer
from src.adapters.smtp.console import ConsoleNotificationDispatcher
from src.adapters.smtp.sender import SmtpNotificationDispatcher
from src.config.settings import Settings, get_settings
from src.domain.ports import NotificationDispatcher
from src.domain.registration import RegistrationService


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_identity_store(pool: ConnectionPool = Depends(get_pool)) -> PostgresIdentityStore:
    return PostgresIdentityStore(pool)


def get_role_resolver(pool: ConnectionPool = Depends(get_pool)) -> PostgresRoleResolver:
    return PostgresRoleResolver(pool)


def get_settings_provider(pool: ConnectionPool = Depends(get_pool)) -> PostgresSettingsProvider:
    return PostgresSettingsProvider(pool)


def get_credential_hasher(settings: Settings = Depends(get_settings)) -> BcryptCredentialHasher:
    return BcryptCredentialHasher(rounds=settings.bcrypt_cost)


def get_token_issuer(settings: Settings = Depends(get_settings)) -> JwtTokenIssuer:
    return JwtTokenIssuer(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_in_seconds=settings.jwt_expires_in_seconds,
    )


def get_notification_dispatcher(settings: Settings = Depends(get_settings)) -> NotificationDispatcher:
    """Pick the email backend named by ``email_backend``."""
    if settings.email_backend == "smtp":
        return SmtpNotificationDispatcher(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.email_from,
            confirmation_url=settings.email_confirmation_url,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
        )
    return ConsoleNotificationDispatcher(confirmation_url=settings.email_confirmation_url)


def get_registration_service(
    settings_provider: PostgresSettingsProvider = Depends(get_settings_provider),
    role_resolver: PostgresRoleResolver = Depends(get_role_resolver),
    identity_store: PostgresIdentityStore = Depends(get_identity_store),
    credential_hasher: BcryptCredentialHasher = Depends(get_credential_hasher),
    token_issuer: JwtTokenIssuer = Depends(get_token_issuer),
    notification_dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together every collaborator the registration pipeline needs.
    """
    return RegistrationService(
        settings_provider=settings_provider,
        role_resolver=role_resolver,
        identity_store=identity_store,
        credential_hasher=credential_hasher,
        token_issuer=token_issuer,
        notification_dispatcher=notification_dispatcher,
    )


# Bearer scheme for OpenAPI documentation; missing headers handled below
http_bearer = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
) -> str:
    """
    Extract the JWT from an ``Authorization: Bearer <token>`` header.

    Raises:
        HTTPException: 401 when the header is missing or not a bearer token
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials


def get_optional_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
) -> str | None:
    """Same as get_bearer_token, but None instead of a 401 (GraphQL context)."""
    if credentials is None:
        return None
    return credentials.credentials or None
