"""
GraphQL object and input types.

Field names are snake_case here; strawberry exposes them camelCased
(``first_name`` -> ``firstName``).
"""

import strawberry


@strawberry.type
class UsersPermissionsMeRole:
    id: strawberry.ID
    name: str
    type: str


@strawberry.type
class UserMe:
    id: strawberry.ID
    first_name: str
    last_name: str
    email: str
    confirmed: bool | None
    blocked: bool | None
    role: UsersPermissionsMeRole | None


@strawberry.input
class UsersRegisterInput:
    first_name: str
    last_name: str
    email: str
    password: str


@strawberry.type
class UsersLoginPayload:
    jwt: str | None
    user: UserMe
