"""GraphQL presentation of registration outcomes."""

import strawberry

from src.api.graphql.errors import ApplicationError
from src.api.graphql.types import UserMe, UsersLoginPayload, UsersPermissionsMeRole
from src.api.presenters import rejection_response
from src.domain.models import PublicUser, RegistrationOutcome, Rejected, Success


def user_me(user: PublicUser) -> UserMe:
    role = None
    if user.role is not None:
        role = UsersPermissionsMeRole(
            id=strawberry.ID(str(user.role.id)),
            name=user.role.name,
            type=user.role.type,
        )
    return UserMe(
        id=strawberry.ID(str(user.id)),
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        confirmed=user.confirmed,
        blocked=user.blocked,
        role=role,
    )


def login_payload(outcome: RegistrationOutcome) -> UsersLoginPayload:
    """
    Map an outcome to the ``{jwt, user}`` payload.

    Raises:
        ApplicationError: The outcome is a rejection; carries the same
            status and body as the REST response
    """
    if isinstance(outcome, Rejected):
        body = rejection_response(outcome)
        raise ApplicationError(
            outcome.message,
            code=outcome.code.value,
            status_code=body.status_code,
            data=body.model_dump(by_alias=True),
        )

    jwt = outcome.jwt if isinstance(outcome, Success) else None
    return UsersLoginPayload(jwt=jwt, user=user_me(outcome.user))
