"""
JWT token issuer adapter - Implements TokenIssuer protocol.

Tokens are HS256-signed with the configured secret and carry the user
id plus ``iat``/``exp`` claims. Verification failures of any kind
(bad signature, malformed, expired) surface as InvalidToken.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from src.domain.exceptions import InvalidToken, TokenIssueError

logger = logging.getLogger(__name__)


class JwtTokenIssuer:
    """
    Implements TokenIssuer protocol via PyJWT.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expires_in_seconds: int = 2592000) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._expires_in = timedelta(seconds=expires_in_seconds)

    def issue(self, subject_id: int) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "id": subject_id,
            "iat": now,
            "exp": now + self._expires_in,
        }
        try:
            return jwt.encode(payload, self._secret, algorithm=self._algorithm)
        except (jwt.PyJWTError, NotImplementedError, TypeError) as e:
            logger.error(f"Token signing failed: {e}")
            raise TokenIssueError("Token signing failed") from e

    def verify(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.PyJWTError as e:
            raise InvalidToken(str(e)) from e
