"""
Custom HTTP exceptions with error codes.

Extends FastAPI's HTTPException with standardized error codes so every
failure in the auth flows maps to one status code and a short message.
Internal diagnostics stay in the logs; only ``message`` and ``code`` reach
the client.

Example:
    from common.utils import NotFoundError

    @router.post("/auth/login")
    async def login(body: LoginRequest):
        user = await users.find_one({"email": body.email})
        if not user:
            raise NotFoundError("User not found")
"""

from typing import Optional, Dict
from fastapi import HTTPException


class APIException(HTTPException):
    """
    Base API exception with error code support.

    Provides consistent error response format across the API.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        code: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Create an API exception.

        Args:
            status_code: HTTP status code
            message: Human-readable error message (safe to show clients)
            code: Machine-readable error code
            headers: Optional response headers
        """
        self.message = message
        self.code = code

        detail: Dict[str, str] = {"message": message}
        if code:
            detail["code"] = code

        super().__init__(
            status_code=status_code,
            detail=detail,
            headers=headers,
        )


class ValidationError(APIException):
    """400 Bad Request - Missing or malformed input."""

    def __init__(
        self,
        message: str = "All fields are required",
        code: str = "VALIDATION_ERROR",
    ):
        super().__init__(400, message, code)


class NotFoundError(APIException):
    """400 Bad Request - Unknown user (kept at 400 for client compatibility)."""

    def __init__(
        self,
        message: str = "User not found",
        code: str = "USER_NOT_FOUND",
    ):
        super().__init__(400, message, code)


class AuthenticationError(APIException):
    """401 Unauthorized - Bad credentials or missing/invalid session."""

    def __init__(
        self,
        message: str = "Invalid credentials",
        code: str = "INVALID_CREDENTIALS",
    ):
        super().__init__(401, message, code)


class ConflictError(APIException):
    """400 Bad Request - Resource already exists."""

    def __init__(
        self,
        message: str = "User already exists",
        code: str = "USER_ALREADY_EXISTS",
    ):
        super().__init__(400, message, code)


class DependencyError(APIException):
    """500 Internal Server Error - Database or other dependency failed."""

    def __init__(
        self,
        message: str = "Server error",
        code: str = "SERVER_ERROR",
    ):
        super().__init__(500, message, code)


class PartialAuditError(DependencyError):
    """
    One or both of the post-login writes failed.

    Raised only after both the user touch and the audit insert were
    attempted, so a failure in one never prevents the other.
    """

    def __init__(self, failed: list, message: str = "Server error"):
        self.failed = list(failed)
        super().__init__(message=message, code="AUDIT_WRITE_FAILED")
