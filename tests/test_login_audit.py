"""Unit tests for LoginAuditWriter (Motor collections mocked)."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId

from common.utils.exceptions import PartialAuditError
from auction_app.services.auth.geo_resolver import default_geo_record
from auction_app.services.auth.login_audit import LoginAuditWriter, as_object_id


GEO = {"country": "Germany", "region": "Berlin", "city": "Berlin", "isp": "Telekom"}


# ─────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def logins_collection():
    collection = AsyncMock()
    collection.insert_one = AsyncMock(return_value=SimpleNamespace(inserted_id=ObjectId()))
    return collection


@pytest.fixture
def users_collection():
    collection = AsyncMock()
    collection.update_one = AsyncMock(return_value=SimpleNamespace(modified_count=1))
    return collection


@pytest.fixture
def audit_db(logins_collection, users_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(
        side_effect=lambda name: {"logins": logins_collection, "users": users_collection}[name]
    )
    return db


@pytest.fixture
def writer(audit_db):
    return LoginAuditWriter(audit_db)


# ─────────────────────────────────────────────────────────────────
# Tests
# ─────────────────────────────────────────────────────────────────


class TestRecord:

    @pytest.mark.asyncio
    async def test_inserts_complete_event(self, writer, logins_collection, sample_user_id):
        event = await writer.record(sample_user_id, "203.0.113.7", "agent", GEO)

        logins_collection.insert_one.assert_awaited_once()
        doc = logins_collection.insert_one.call_args.args[0]
        assert doc["userId"] == ObjectId(sample_user_id)
        assert doc["ipAddress"] == "203.0.113.7"
        assert doc["userAgent"] == "agent"
        assert doc["location"] == GEO
        assert doc["loginAt"] is not None
        assert event["_id"] == logins_collection.insert_one.return_value.inserted_id

    @pytest.mark.asyncio
    async def test_never_updates_existing_events(self, writer, logins_collection, sample_user_id):
        await writer.record(sample_user_id, "203.0.113.7", "agent", GEO)
        logins_collection.update_one.assert_not_called()
        logins_collection.delete_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_location_is_a_snapshot(self, writer, logins_collection, sample_user_id):
        geo = default_geo_record()
        await writer.record(sample_user_id, "203.0.113.7", "agent", geo)
        geo["city"] = "changed later"

        doc = logins_collection.insert_one.call_args.args[0]
        assert doc["location"]["city"] == "Unknown"


class TestTouchUser:

    @pytest.mark.asyncio
    async def test_sets_last_seen_fields(self, writer, users_collection, sample_user_id):
        await writer.touch_user(sample_user_id, "203.0.113.7", "agent", GEO)

        query, update = users_collection.update_one.call_args.args
        assert query == {"_id": ObjectId(sample_user_id)}
        assert set(update["$set"]) == {"lastLogin", "location", "ipAddress", "userAgent"}
        assert update["$set"]["location"] == GEO


class TestRecordLogin:

    @pytest.mark.asyncio
    async def test_both_writes_share_timestamp(
        self, writer, logins_collection, users_collection, sample_user_id
    ):
        await writer.record_login(sample_user_id, "203.0.113.7", "agent", GEO)

        event = logins_collection.insert_one.call_args.args[0]
        update = users_collection.update_one.call_args.args[1]["$set"]
        assert event["loginAt"] == update["lastLogin"]

    @pytest.mark.asyncio
    async def test_audit_written_when_user_touch_fails(
        self, writer, logins_collection, users_collection, sample_user_id
    ):
        users_collection.update_one.side_effect = RuntimeError("primary stepped down")

        with pytest.raises(PartialAuditError) as exc_info:
            await writer.record_login(sample_user_id, "203.0.113.7", "agent", GEO)

        assert exc_info.value.failed == ["user"]
        assert exc_info.value.status_code == 500
        logins_collection.insert_one.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_user_touched_when_audit_fails(
        self, writer, logins_collection, users_collection, sample_user_id
    ):
        logins_collection.insert_one.side_effect = RuntimeError("write concern timeout")

        with pytest.raises(PartialAuditError) as exc_info:
            await writer.record_login(sample_user_id, "203.0.113.7", "agent", GEO)

        assert exc_info.value.failed == ["audit"]
        users_collection.update_one.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_both_failures_reported(
        self, writer, logins_collection, users_collection, sample_user_id
    ):
        users_collection.update_one.side_effect = RuntimeError("down")
        logins_collection.insert_one.side_effect = RuntimeError("down")

        with pytest.raises(PartialAuditError) as exc_info:
            await writer.record_login(sample_user_id, "203.0.113.7", "agent", GEO)

        assert exc_info.value.failed == ["user", "audit"]


class TestAsObjectId:

    def test_passthrough(self):
        oid = ObjectId()
        assert as_object_id(oid) is oid

    def test_from_string(self):
        oid = ObjectId()
        assert as_object_id(str(oid)) == oid
