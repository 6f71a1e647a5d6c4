"""
Login audit trail.

Every successful login or signup appends one immutable document to the
``logins`` collection. The user's own last-seen fields are a separate,
mutable write; the two share no transaction.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Optional, TypedDict

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.utils.exceptions import PartialAuditError
from auction_app.services.auth.geo_resolver import GeoRecord

logger = logging.getLogger(__name__)


class LoginEvent(TypedDict):
    """One authentication occurrence."""
    _id: ObjectId
    userId: ObjectId
    ipAddress: str
    userAgent: str
    location: GeoRecord
    loginAt: datetime


def as_object_id(value: Any) -> ObjectId:
    """Coerce a user id (ObjectId or its hex string) to ObjectId."""
    if isinstance(value, ObjectId):
        return value
    return ObjectId(str(value))


class LoginAuditWriter:
    """
    Writes login events and refreshes the user's last-seen fields.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize LoginAuditWriter.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._logins_collection = db["logins"]
        self._users_collection = db["users"]

    async def record(
        self,
        user_id: Any,
        ip_address: str,
        user_agent: str,
        geo: GeoRecord,
        timestamp: Optional[datetime] = None,
    ) -> LoginEvent:
        """
        Append a new login event. Existing events are never touched.

        Returns:
            The inserted event document
        """
        event = {
            "userId": as_object_id(user_id),
            "ipAddress": ip_address,
            "userAgent": user_agent,
            "location": dict(geo),
            "loginAt": timestamp or datetime.now(timezone.utc),
        }
        result = await self._logins_collection.insert_one(event)
        event["_id"] = result.inserted_id

        logger.info(f"Login event recorded for user {event['userId']}")
        return event

    async def touch_user(
        self,
        user_id: Any,
        ip_address: str,
        user_agent: str,
        geo: GeoRecord,
        timestamp: Optional[datetime] = None,
    ) -> None:
        """Update the user's last-seen fields in place (last write wins)."""
        await self._users_collection.update_one(
            {"_id": as_object_id(user_id)},
            {
                "$set": {
                    "lastLogin": timestamp or datetime.now(timezone.utc),
                    "location": dict(geo),
                    "ipAddress": ip_address,
                    "userAgent": user_agent,
                }
            },
        )

    async def record_login(
        self,
        user_id: Any,
        ip_address: str,
        user_agent: str,
        geo: GeoRecord,
    ) -> LoginEvent:
        """
        Touch the user and append the audit event.

        Both writes are always attempted. If either fails, each failure is
        logged on its own and PartialAuditError names the failed writes.
        """
        now = datetime.now(timezone.utc)
        touch_result, record_result = await asyncio.gather(
            self.touch_user(user_id, ip_address, user_agent, geo, now),
            self.record(user_id, ip_address, user_agent, geo, now),
            return_exceptions=True,
        )

        failed = []
        if isinstance(touch_result, Exception):
            logger.error(f"Failed to update last-seen fields for user {user_id}: {touch_result!r}")
            failed.append("user")
        if isinstance(record_result, Exception):
            logger.error(f"Failed to write login event for user {user_id}: {record_result!r}")
            failed.append("audit")

        if failed:
            raise PartialAuditError(failed)
        return record_result

    async def list_for_user(self, user_id: Any, limit: int = 20) -> list[dict]:
        """Most recent login events for a user, newest first."""
        cursor = (
            self._logins_collection.find({"userId": as_object_id(user_id)})
            .sort("loginAt", -1)
            .limit(limit)
        )
        return await cursor.to_list(length=limit)
