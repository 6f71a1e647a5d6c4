"""
bcrypt password hashing.

Passwords are pre-hashed with SHA-256 before bcrypt so inputs longer than
bcrypt's 72-byte limit are handled consistently. Such digests carry a
``$bcrypt-sha256`` prefix. Unprefixed digests were written by the previous
Node server (plain bcrypt, cost 10) and are checked against the raw password.

Example:
    hasher = PasswordHasher()
    digest = hasher.hash("secret")
    hasher.verify("secret", digest)   # True
    hasher.verify("other", digest)    # False
"""

import base64
import hashlib
import logging

import bcrypt as bcrypt_lib

logger = logging.getLogger(__name__)


class PasswordHasher:
    """One-way hash and verify for stored credentials."""

    DEFAULT_ROUNDS = 10
    PREHASH_PREFIX = "$bcrypt-sha256"

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self.rounds = rounds

    def _prehash_password(self, password: str) -> bytes:
        sha256_hash = hashlib.sha256(password.encode("utf-8")).digest()
        return base64.b64encode(sha256_hash)

    def hash(self, password: str) -> str:
        """Hash a password with a fresh salt at the fixed cost factor."""
        salt = bcrypt_lib.gensalt(rounds=self.rounds)
        digest = bcrypt_lib.hashpw(self._prehash_password(password), salt).decode("utf-8")
        return self.PREHASH_PREFIX + digest

    def verify(self, password: str, hashed: str) -> bool:
        """
        Verify a password against its hash.

        Each digest is checked under exactly one scheme, chosen by its prefix.
        Never raises: an empty or malformed digest is simply not a match.
        """
        if not password or not hashed or not isinstance(hashed, str):
            return False

        if hashed.startswith(self.PREHASH_PREFIX):
            candidate = self._prehash_password(password)
            hashed = hashed[len(self.PREHASH_PREFIX):]
        else:
            # Legacy hashes were bcrypt over the raw password
            candidate = password.encode("utf-8")

        try:
            return bcrypt_lib.checkpw(candidate, hashed.encode("utf-8"))
        except (ValueError, TypeError) as e:
            logger.debug(f"Password check rejected by bcrypt: {e}")
            return False
