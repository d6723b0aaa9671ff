"""
REST presentation of registration outcomes.

Stateless translation only: the outcome's code, message and field are
copied through unchanged, never re-derived.
"""

from collections.abc import Mapping, Sequence
from http import HTTPStatus
from typing import Any

from src.api.models import (
    ErrorDetail,
    RegisterResponse,
    RejectionResponse,
    RoleResponse,
    UserResponse,
)
from src.domain.models import (
    ErrorKind,
    PendingConfirmation,
    PublicUser,
    Rejected,
    Success,
)

_STATUS_BY_KIND = {
    ErrorKind.CONFIGURATION: HTTPStatus.BAD_REQUEST,
    ErrorKind.VALIDATION: HTTPStatus.BAD_REQUEST,
    ErrorKind.CONFLICT: HTTPStatus.CONFLICT,
    ErrorKind.SIDE_EFFECT: HTTPStatus.BAD_REQUEST,
}


def rejection_status(rejected: Rejected) -> int:
    return int(_STATUS_BY_KIND[rejected.kind])


def rejection_response(rejected: Rejected) -> RejectionResponse:
    status = rejection_status(rejected)
    return RejectionResponse(
        status_code=status,
        error=HTTPStatus(status).phrase,
        message=[
            ErrorDetail(
                field=rejected.field,
                message=rejected.message,
                code=rejected.code.value,
                id=rejected.message_id,
            )
        ],
    )


def user_response(user: PublicUser) -> UserResponse:
    role = None
    if user.role is not None:
        role = RoleResponse(id=user.role.id, name=user.role.name, type=user.role.type)
    return UserResponse(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        provider=user.provider,
        confirmed=user.confirmed,
        blocked=user.blocked,
        role=role,
    )


def register_response(outcome: Success | PendingConfirmation) -> RegisterResponse:
    jwt = outcome.jwt if isinstance(outcome, Success) else None
    return RegisterResponse(jwt=jwt, user=user_response(outcome.user))


INVALID_FIELD_CODE = "INVALID_FIELD"
INVALID_FIELD_ID = "Auth.form.error.invalid"


def validation_rejection_response(errors: Sequence[Mapping[str, Any]]) -> RejectionResponse:
    """
    Render request-body validation errors in the rejection shape.

    One entry per error; ``field`` is the offending JSON key, or None when
    the body as a whole is malformed.
    """
    details = []
    for error in errors:
        loc = [part for part in error.get("loc", ()) if part != "body"]
        field = loc[-1] if loc and isinstance(loc[-1], str) else None
        details.append(
            ErrorDetail(
                field=field,
                message=error.get("msg", "Invalid value"),
                code=INVALID_FIELD_CODE,
                id=INVALID_FIELD_ID,
            )
        )
    return RejectionResponse(
        status_code=int(HTTPStatus.BAD_REQUEST),
        error=HTTPStatus.BAD_REQUEST.phrase,
        message=details,
    )
