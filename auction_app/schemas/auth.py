"""
Pydantic models for Auth request/response validation.

Request fields are optional at the schema level so that a missing field
produces the same 400 "All fields are required" as an empty one.
"""

from typing import Optional
from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Request body for user login."""
    email: Optional[str] = Field(None, max_length=254)
    password: Optional[str] = Field(None, max_length=1024)


class SignupRequest(BaseModel):
    """Request body for user signup."""
    name: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=254)
    password: Optional[str] = Field(None, max_length=1024)


class MessageResponse(BaseModel):
    """Response for login, signup and logout."""
    success: bool = True
    message: str


class GeoRecordSchema(BaseModel):
    """Best-effort location of a client address."""
    country: str = "Unknown"
    region: str = "Unknown"
    city: str = "Unknown"
    isp: str = "Unknown"
