"""
Pydantic request/response schemas.
"""

from auction_app.schemas.auth import (
    LoginRequest,
    SignupRequest,
    MessageResponse,
    GeoRecordSchema,
)
from auction_app.schemas.user import (
    UserProfile,
    UserProfileResponse,
    LoginEventSchema,
    LoginHistoryResponse,
)

__all__ = [
    "LoginRequest",
    "SignupRequest",
    "MessageResponse",
    "GeoRecordSchema",
    "UserProfile",
    "UserProfileResponse",
    "LoginEventSchema",
    "LoginHistoryResponse",
]
