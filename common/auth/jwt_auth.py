"""
JWT session credentials.

Tokens are self-contained: the signature and the ``exp`` claim are the only
things that make one valid. Nothing is stored server-side, so there is no
revocation; a token lives until it expires or the client drops the cookie.

Example:
    auth = JWTAuth(secret="your-secret-key")

    token = auth.issue(user_id, role="user")
    claims = auth.decode(token)
    print(claims["sub"], claims["role"])
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional

from jose import jwt, JWTError

logger = logging.getLogger(__name__)


class JWTAuth:
    """
    Mints and checks signed, time-bounded session tokens.

    One instance is created at startup with the process-wide secret.
    """

    DEFAULT_EXPIRE_DAYS = 7

    def __init__(
        self,
        secret: Optional[str],
        algorithm: str = "HS256",
        expire_days: int = DEFAULT_EXPIRE_DAYS,
    ):
        """
        Initialize the issuer.

        Args:
            secret: Secret key for JWT signing (keep this secure!)
            algorithm: JWT algorithm (default: HS256)
            expire_days: Token lifetime in days

        Raises:
            ValueError: If the secret is missing
        """
        if not secret:
            raise ValueError("JWT secret is not configured")

        self.secret = secret
        self.algorithm = algorithm
        self.expire = timedelta(days=expire_days)

    @property
    def max_age_seconds(self) -> int:
        """Token lifetime in seconds, for matching cookie max-age."""
        return int(self.expire.total_seconds())

    def issue(self, user_id: Any, role: Optional[str] = None, **claims: Any) -> str:
        """Create a signed token for the user."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "role": role or "user",
            "iat": now,
            "exp": now + self.expire,
            **claims,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a token.

        Raises:
            ValueError: If the token is malformed, badly signed or expired
        """
        if not token:
            raise ValueError("Invalid token: empty")

        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
            )
        except JWTError as e:
            raise ValueError(f"Invalid token: {e}")

        if not payload.get("sub"):
            raise ValueError("Invalid token: missing subject")
        return payload
