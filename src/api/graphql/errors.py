"""
Typed GraphQL application errors.

Raised from resolvers so the failure is reported in the response's
``errors`` list (never as a silent null), with ``extensions`` carrying
the machine-readable code, the HTTP-equivalent status and the same
error body the REST endpoint would have returned.
"""

from typing import Any

from graphql import GraphQLError


class ApplicationError(GraphQLError):
    """Application-level GraphQL error with structured extensions."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        status_code: int,
        data: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            extensions={"code": code, "statusCode": status_code, "data": data},
        )
        self.code = code
        self.status_code = status_code
        self.data = data


def service_unavailable() -> ApplicationError:
    return ApplicationError(
        "Service temporarily unavailable",
        code="SERVICE_UNAVAILABLE",
        status_code=503,
    )


def unauthenticated() -> ApplicationError:
    return ApplicationError("Invalid token", code="UNAUTHENTICATED", status_code=401)
