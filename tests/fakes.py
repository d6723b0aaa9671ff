"""
In-memory collaborators for exercising the registration pipeline.

They follow the same contracts as the PostgreSQL, bcrypt, JWT and email
adapters (including the (email, provider) uniqueness constraint) without
any infrastructure.
"""

from typing import Any

from src.domain.exceptions import DuplicateIdentity, InvalidToken, NotificationError
from src.domain.models import NewUser, RegistrationSettings, Role, User


class FakeSettingsProvider:
    def __init__(self, settings: RegistrationSettings | None = None) -> None:
        self.settings = settings or RegistrationSettings()
        self.calls = 0

    def get_settings(self) -> RegistrationSettings:
        self.calls += 1
        return self.settings


class FakeRoleResolver:
    def __init__(self, roles: list[Role] | None = None) -> None:
        if roles is None:
            roles = [Role(id=1, type="authenticated", name="Authenticated")]
        self.roles = {role.type: role for role in roles}

    def resolve_role(self, role_type: str) -> Role | None:
        return self.roles.get(role_type)


class FakeIdentityStore:
    def __init__(self) -> None:
        self.users: dict[int, User] = {}
        self._next_id = 1

    def add(self, email: str, provider: str = "local", **overrides: Any) -> User:
        """Seed an existing user directly."""
        user = User(
            id=self._next_id,
            first_name=overrides.get("first_name", "Existing"),
            last_name=overrides.get("last_name", "User"),
            email=email,
            password=overrides.get("password", "$2b$10$existinghash"),
            provider=provider,
            confirmed=overrides.get("confirmed", True),
            blocked=overrides.get("blocked", False),
            role=overrides.get("role"),
        )
        self.users[user.id] = user
        self._next_id += 1
        return user

    def find_user_by_email(self, email: str, provider: str | None = None) -> User | None:
        for user in sorted(self.users.values(), key=lambda u: u.id):
            if user.email == email and (provider is None or user.provider == provider):
                return user
        return None

    def find_user_by_id(self, user_id: int) -> User | None:
        return self.users.get(user_id)

    def create_user(self, fields: NewUser) -> User:
        if self.find_user_by_email(fields.email, fields.provider) is not None:
            raise DuplicateIdentity(fields.email, fields.provider)
        user = User(
            id=self._next_id,
            first_name=fields.first_name,
            last_name=fields.last_name,
            email=fields.email,
            password=fields.password,
            provider=fields.provider,
            confirmed=fields.confirmed,
            blocked=fields.blocked,
            role=fields.role,
            confirmation_token=fields.confirmation_token,
        )
        self.users[user.id] = user
        self._next_id += 1
        return user

    def delete_user(self, user_id: int) -> None:
        self.users.pop(user_id, None)


class FakeCredentialHasher:
    """Deterministic stand-in producing bcrypt-shaped output."""

    def is_already_hashed(self, password: str) -> bool:
        return bool(password) and password.count("$") == 3

    def hash_password(self, plaintext: str) -> str:
        return f"$2b$10$fakehash{len(plaintext)}"


class FakeTokenIssuer:
    def issue(self, subject_id: int) -> str:
        return f"token-for-{subject_id}"

    def verify(self, token: str) -> dict[str, Any]:
        if not token.startswith("token-for-"):
            raise InvalidToken("bad token")
        return {"id": int(token.removeprefix("token-for-"))}


class FakeNotificationDispatcher:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[User] = []

    def send_confirmation_email(self, user: User) -> None:
        if self.fail:
            raise NotificationError("SMTP relay refused connection")
        self.sent.append(user)
