"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
JSON keys are camelCase (``firstName``); Python attributes are snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field

from src.domain.models import RegistrationRequest


class RegisterRequest(BaseModel):
    """
    Request model for user registration.

    Every field is optional here: presence and format are checked by the
    registration pipeline, in order, so callers get its specific error
    codes rather than a generic 422. Unknown keys are kept and handed to
    the pipeline, which strips the server-only ones.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    email: str | None = None
    password: str | None = None

    def to_domain(self) -> RegistrationRequest:
        return RegistrationRequest(
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            password=self.password,
            extra=dict(self.model_extra or {}),
        )


class RoleResponse(BaseModel):
    """Role embedded in a user response."""

    id: int
    name: str
    type: str


class UserResponse(BaseModel):
    """Sanitized user. Never carries the password or internal tokens."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    email: str
    provider: str
    confirmed: bool
    blocked: bool
    role: RoleResponse | None = None


class RegisterResponse(BaseModel):
    """Response model for successful registration (jwt omitted while confirmation is pending)."""

    jwt: str | None = None
    user: UserResponse


class ErrorDetail(BaseModel):
    """One field-level error."""

    field: str | None = None
    message: str
    code: str
    id: str | None = None


class RejectionResponse(BaseModel):
    """Structured error response for rejected registrations."""

    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(alias="statusCode")
    error: str
    message: list[ErrorDetail]


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
