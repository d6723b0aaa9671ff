"""
GraphQL schema and FastAPI router.

The ``userRegister`` mutation calls the same ``RegistrationService.register``
entry point as the REST endpoint and only reshapes its outcome. Resolvers
read their collaborators from the request context, which the router
builds from the regular FastAPI dependencies.
"""

import logging
from typing import Any

import strawberry
from fastapi import Depends
from strawberry.fastapi import GraphQLRouter
from strawberry.types import Info

from src.api.dependencies import get_optional_bearer_token, get_registration_service
from src.api.graphql.errors import service_unavailable, unauthenticated
from src.api.graphql.presenter import login_payload, user_me
from src.api.graphql.types import UserMe, UsersLoginPayload, UsersRegisterInput
from src.domain.exceptions import InfrastructureError, InvalidToken
from src.domain.models import RegistrationRequest
from src.domain.registration import RegistrationService

logger = logging.getLogger(__name__)


@strawberry.type
class Query:
    @strawberry.field(description="The user the bearer token was issued for")
    def user_me(self, info: Info) -> UserMe | None:
        token = info.context.get("token")
        if not token:
            raise unauthenticated()

        service: RegistrationService = info.context["registration_service"]
        try:
            user = service.current_user(token)
        except InvalidToken:
            raise unauthenticated() from None
        except InfrastructureError as e:
            logger.exception("Current user lookup failed on an infrastructure error")
            raise service_unavailable() from e
        return user_me(user)


@strawberry.type
class Mutation:
    @strawberry.mutation(description="Register a user")
    def user_register(self, info: Info, input: UsersRegisterInput) -> UsersLoginPayload:
        service: RegistrationService = info.context["registration_service"]
        request = RegistrationRequest(
            first_name=input.first_name,
            last_name=input.last_name,
            email=input.email,
            password=input.password,
        )
        try:
            outcome = service.register(request)
        except InfrastructureError as e:
            logger.exception("Registration failed on an infrastructure error")
            raise service_unavailable() from e
        return login_payload(outcome)


schema = strawberry.Schema(query=Query, mutation=Mutation)


def get_context(
    service: RegistrationService = Depends(get_registration_service),
    token: str | None = Depends(get_optional_bearer_token),
) -> dict[str, Any]:
    """Build the resolver context from FastAPI dependencies."""
    return {"registration_service": service, "token": token}


graphql_router = GraphQLRouter(schema, context_getter=get_context)
