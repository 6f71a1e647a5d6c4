"""
Session cookie attributes.

The same http-only/secure/same-site/path attributes are used for setting and
clearing, otherwise browsers ignore the deletion.
"""

from typing import Optional

from fastapi import Request, Response


class SessionCookiePolicy:
    """
    Sets, clears and reads the session cookie.
    """

    SAME_SITE = "lax"
    PATH = "/"

    def __init__(
        self,
        cookie_name: str = "auth_token",
        secure: bool = False,
        max_age_seconds: int = 7 * 24 * 60 * 60,
    ):
        """
        Initialize SessionCookiePolicy.

        Args:
            cookie_name: Name of the session cookie
            secure: Send only over HTTPS (enabled in production)
            max_age_seconds: Cookie lifetime, matches the token expiry
        """
        self.cookie_name = cookie_name
        self.secure = secure
        self.max_age_seconds = max_age_seconds

    def attach(self, response: Response, token: str) -> None:
        """Set the session cookie carrying ``token``."""
        response.set_cookie(
            key=self.cookie_name,
            value=token,
            max_age=self.max_age_seconds,
            path=self.PATH,
            secure=self.secure,
            httponly=True,
            samesite=self.SAME_SITE,
        )

    def clear(self, response: Response) -> None:
        """Expire the session cookie."""
        response.delete_cookie(
            key=self.cookie_name,
            path=self.PATH,
            secure=self.secure,
            httponly=True,
            samesite=self.SAME_SITE,
        )

    def read(self, request: Request) -> Optional[str]:
        """Return the session token sent by the client, if any."""
        token = request.cookies.get(self.cookie_name)
        return token or None
