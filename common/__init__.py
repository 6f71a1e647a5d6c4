"""
Common library for reusable infrastructure components.

- database: Async MongoDB connection via Motor
- auth: bcrypt password hashing and JWT session tokens
- utils: Standard responses and HTTP exceptions
- config: Base settings class
"""

from common.database import MongoDB
from common.auth import PasswordHasher, JWTAuth
from common.utils import (
    success_response,
    error_response,
    APIException,
    ValidationError,
    NotFoundError,
    AuthenticationError,
    ConflictError,
    DependencyError,
)
from common.config import BaseAppSettings

__all__ = [
    # Database
    "MongoDB",
    # Auth
    "PasswordHasher",
    "JWTAuth",
    # Utils
    "success_response",
    "error_response",
    "APIException",
    "ValidationError",
    "NotFoundError",
    "AuthenticationError",
    "ConflictError",
    "DependencyError",
    # Config
    "BaseAppSettings",
]
