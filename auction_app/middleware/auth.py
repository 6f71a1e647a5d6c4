"""
Authentication middleware for protected routes.

Validates the session cookie and attaches the user to the request.
"""

import logging
from typing import Optional

from fastapi import Request

from common.auth.jwt_auth import JWTAuth
from common.utils.exceptions import AuthenticationError
from auction_app.services.auth.cookie_policy import SessionCookiePolicy
from auction_app.services.user.user_service import UserService

logger = logging.getLogger(__name__)


class AuthMiddleware:
    """
    Checks the session cookie and loads the user it names.
    """

    def __init__(
        self,
        jwt_auth: JWTAuth,
        cookie_policy: SessionCookiePolicy,
        user_service: UserService,
    ):
        self._jwt_auth = jwt_auth
        self._cookie_policy = cookie_policy
        self._user_service = user_service

    async def require_auth(self, request: Request) -> dict:
        """
        Validate request is authenticated.

        Returns:
            The authenticated user document

        Raises:
            AuthenticationError: No cookie, bad/expired token, or unknown user
        """
        user = await self.optional_auth(request)
        if user is None:
            raise AuthenticationError(
                message="Not authenticated",
                code="AUTH_REQUIRED",
            )
        return user

    async def optional_auth(self, request: Request) -> Optional[dict]:
        """Return the user named by a valid cookie, or None."""
        token = self._cookie_policy.read(request)
        if not token:
            return None

        try:
            claims = self._jwt_auth.decode(token)
        except ValueError as e:
            logger.debug(f"Session token rejected: {e}")
            return None

        user = await self._user_service.get_user_by_id(claims["sub"])
        if not user:
            logger.debug(f"Session token names unknown user {claims['sub']}")
            return None

        return user
