"""
Pydantic models for the current-user endpoints.
"""

from typing import Optional, List
from pydantic import BaseModel

from auction_app.schemas.auth import GeoRecordSchema


class UserProfile(BaseModel):
    """Public view of a user; never carries the password hash."""
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: str = "user"
    avatar: Optional[str] = None
    location: Optional[GeoRecordSchema] = None
    lastLogin: Optional[str] = None
    signupAt: Optional[str] = None


class UserProfileResponse(BaseModel):
    success: bool = True
    data: UserProfile


class LoginEventSchema(BaseModel):
    id: str
    ipAddress: Optional[str] = None
    userAgent: Optional[str] = None
    location: GeoRecordSchema
    loginAt: Optional[str] = None


class LoginHistoryResponse(BaseModel):
    success: bool = True
    data: List[LoginEventSchema]
