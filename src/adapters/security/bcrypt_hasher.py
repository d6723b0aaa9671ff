"""
bcrypt credential hasher adapter - Implements CredentialHasher protocol.

bcrypt output has the shape ``$2b$<cost>$<salt+hash>``: exactly three
``$`` separators. A submitted password with that shape is treated as an
already-hashed credential and refused by the pipeline, so a client that
re-posts a stored hash never gets it hashed a second time.
"""

import logging

import bcrypt

from src.domain.exceptions import CredentialHashingError

logger = logging.getLogger(__name__)


class BcryptCredentialHasher:
    """
    Implements CredentialHasher protocol via bcrypt.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, rounds: int = 10) -> None:
        """
        Args:
            rounds: bcrypt cost factor (>= 10)
        """
        if rounds < 10:
            raise ValueError("bcrypt cost factor must be at least 10")
        self._rounds = rounds

    def is_already_hashed(self, password: str) -> bool:
        if not password:
            return False
        return password.count("$") == 3

    def hash_password(self, plaintext: str) -> str:
        """
        Hash password using bcrypt with the configured cost factor.

        Input is cut to bcrypt's 72-byte limit up front, which older
        releases did silently and bcrypt 5 refuses to do.
        """
        secret = plaintext.encode()[:72]
        try:
            return bcrypt.hashpw(secret, bcrypt.gensalt(rounds=self._rounds)).decode()
        except ValueError as e:
            logger.error(f"Password hashing failed: {e}")
            raise CredentialHashingError("Password hashing failed") from e
