"""
Standard API response helpers.

Provides consistent response formatting for success and error cases.
The browser client reads ``message`` on success and ``error`` on failure.

Example:
    from common.utils import success_response, error_response

    @router.get("/user")
    async def me(user: dict = Depends(require_auth)):
        return success_response(public_profile(user))
"""

from typing import Any, Optional, Dict


def success_response(
    data: Any = None,
    message: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create a standard success response.

    Args:
        data: The response data (can be dict, list, or any serializable type)
        message: Optional success message

    Returns:
        Dictionary with success=True and optional data/message
    """
    response: Dict[str, Any] = {"success": True}

    if data is not None:
        response["data"] = data

    if message:
        response["message"] = message

    return response


def error_response(
    message: str,
    code: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create a standard error response.

    Args:
        message: Human-readable error message
        code: Machine-readable error code (e.g., "USER_NOT_FOUND")

    Returns:
        Dictionary with success=False, the message under ``error`` and the code
    """
    response: Dict[str, Any] = {"success": False, "error": message}

    if code:
        response["code"] = code

    return response
