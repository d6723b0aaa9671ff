"""
API v1 routes.

Defines REST endpoints for local registration and the current user.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from src.api.dependencies import get_bearer_token, get_registration_service
from src.api.models import (
    ErrorResponse,
    RegisterRequest,
    RegisterResponse,
    RejectionResponse,
    UserResponse,
)
from src.api.presenters import register_response, rejection_response, user_response
from src.domain.exceptions import InfrastructureError, InvalidToken
from src.domain.models import Rejected
from src.domain.registration import RegistrationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["v1"])

SERVICE_UNAVAILABLE = "Service temporarily unavailable"


@router.post(
    "/auth/local/register",
    response_model=RegisterResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": RejectionResponse, "description": "Registration rejected"},
        409: {"model": RejectionResponse, "description": "Email already taken"},
        503: {"model": ErrorResponse, "description": "Infrastructure failure, retry later"},
    },
    summary="Register a new user",
    description="Create a local account. Returns a JWT unless email confirmation "
    "is enabled, in which case a confirmation link is emailed instead.",
)
async def register(
    request_data: RegisterRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> RegisterResponse | JSONResponse:
    """
    Register a new local user.

    - **firstName**, **lastName**: Required, non-blank
    - **email**: Valid email address, unique per provider
    - **password**: Plaintext password (never an existing hash)
    """
    try:
        outcome = service.register(request_data.to_domain())
    except InfrastructureError:
        logger.exception("Registration failed on an infrastructure error")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=SERVICE_UNAVAILABLE,
        ) from None

    if isinstance(outcome, Rejected):
        body = rejection_response(outcome)
        return JSONResponse(
            status_code=body.status_code,
            content=body.model_dump(by_alias=True),
        )
    return register_response(outcome)


@router.get(
    "/users/me",
    response_model=UserResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid token"},
        503: {"model": ErrorResponse, "description": "Infrastructure failure, retry later"},
    },
    summary="Get the authenticated user",
)
async def me(
    token: str = Depends(get_bearer_token),
    service: RegistrationService = Depends(get_registration_service),
) -> UserResponse:
    """Return the sanitized user the bearer token was issued for."""
    try:
        user = service.current_user(token)
    except InvalidToken:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None
    except InfrastructureError:
        logger.exception("Current user lookup failed on an infrastructure error")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=SERVICE_UNAVAILABLE,
        ) from None
    return user_response(user)
