"""
User service for the ``users`` collection.

Handles user creation and retrieval for the auth flows.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from common.utils.exceptions import ConflictError
from auction_app.services.auth.geo_resolver import GeoRecord

logger = logging.getLogger(__name__)


def normalize_email(email: Optional[str]) -> str:
    """Canonical form used for lookup and storage."""
    return (email or "").strip().lower()


class UserService:
    """
    Manages user records.
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        default_avatar: str,
        default_role: str = "user",
    ):
        """
        Initialize UserService.

        Args:
            db: MongoDB database connection
            default_avatar: Avatar URL given to new users
            default_role: Role given to new users
        """
        self._db = db
        self._users_collection = db["users"]
        self._default_avatar = default_avatar
        self._default_role = default_role

    async def get_user_by_email(self, email: str) -> Optional[dict]:
        """Get user by email address."""
        return await self._users_collection.find_one({"email": normalize_email(email)})

    async def get_user_by_id(self, user_id: Any) -> Optional[dict]:
        """Get user by id; malformed ids are simply not found."""
        try:
            oid = user_id if isinstance(user_id, ObjectId) else ObjectId(str(user_id))
        except (InvalidId, TypeError):
            return None
        return await self._users_collection.find_one({"_id": oid})

    async def create_user(
        self,
        name: str,
        email: str,
        password_hash: str,
        ip_address: str,
        user_agent: str,
        location: GeoRecord,
    ) -> dict:
        """
        Create a new user record.

        Returns:
            Created user document

        Raises:
            ConflictError: email already registered (unique index race)
        """
        now = datetime.now(timezone.utc)
        user_doc = {
            "name": name.strip(),
            "email": normalize_email(email),
            "password": password_hash,
            "role": self._default_role,
            "avatar": self._default_avatar,
            "ipAddress": ip_address,
            "userAgent": user_agent,
            "location": dict(location),
            "signupAt": now,
            "lastLogin": now,
        }

        try:
            result = await self._users_collection.insert_one(user_doc)
        except DuplicateKeyError:
            raise ConflictError()
        user_doc["_id"] = result.inserted_id

        logger.info(f"User created: {result.inserted_id}")
        return user_doc


def public_profile(user: dict) -> dict:
    """User document as returned to the client; the password never leaves."""
    return {
        "id": str(user["_id"]),
        "name": user.get("name"),
        "email": user.get("email"),
        "role": user.get("role", "user"),
        "avatar": user.get("avatar"),
        "location": user.get("location"),
        "lastLogin": _isoformat(user.get("lastLogin")),
        "signupAt": _isoformat(user.get("signupAt")),
    }


def _isoformat(value):
    return value.isoformat() if isinstance(value, datetime) else value
