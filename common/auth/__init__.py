"""
Authentication module - bcrypt password hashing and JWT session tokens.
"""

from common.auth.password import PasswordHasher
from common.auth.jwt_auth import JWTAuth

__all__ = ["PasswordHasher", "JWTAuth"]
