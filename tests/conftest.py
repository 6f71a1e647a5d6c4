"""Shared test fixtures for the auction API tests."""

import copy
import os
from types import SimpleNamespace
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

# Settings are read at import time; give them a secret before any app import
os.environ.setdefault("JWT_SECRET", "test-secret")

import httpx
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from api import app
from common.auth import PasswordHasher
from auction_app.config import Settings
from auction_app.dependencies import init_all_services
from auction_app.services.auth.geo_resolver import GeoResolver

PUBLIC_IP = "203.0.113.7"
USER_AGENT = "pytest-agent/1.0"


# ─────────────────────────────────────────────────────────────────
# In-memory stand-in for the Motor collections the services use
# ─────────────────────────────────────────────────────────────────


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    def sort(self, key, direction=1):
        self._docs.sort(key=lambda d: d.get(key), reverse=direction < 0)
        return self

    def limit(self, n):
        self._docs = self._docs[:n]
        return self

    async def to_list(self, length=None):
        docs = self._docs if length is None else self._docs[:length]
        return [copy.deepcopy(d) for d in docs]


class FakeCollection:
    """Equality-match subset of AsyncIOMotorCollection."""

    def __init__(self):
        self.docs = []
        self.fail_reads: Optional[Exception] = None
        self.fail_writes: Optional[Exception] = None

    @staticmethod
    def _matches(doc, query):
        return all(doc.get(k) == v for k, v in (query or {}).items())

    async def find_one(self, query, projection=None):
        if self.fail_reads:
            raise self.fail_reads
        for doc in self.docs:
            if self._matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query=None):
        return FakeCursor([copy.deepcopy(d) for d in self.docs if self._matches(d, query)])

    async def insert_one(self, doc):
        if self.fail_writes:
            raise self.fail_writes
        doc.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def update_one(self, query, update):
        if self.fail_writes:
            raise self.fail_writes
        for doc in self.docs:
            if self._matches(doc, query):
                doc.update(copy.deepcopy(update.get("$set", {})))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def create_index(self, *args, **kwargs):
        return "index"


class FakeDatabase(dict):
    def __missing__(self, name):
        collection = self[name] = FakeCollection()
        return collection


def _geo_transport(payload=None, status_code=200, exc=None):
    """httpx transport answering every geo lookup the same way."""
    def handler(request):
        if exc is not None:
            raise exc
        return httpx.Response(status_code, json=payload)
    return httpx.MockTransport(handler)


# ─────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def sample_user_id():
    return str(ObjectId())


@pytest.fixture
def mock_collection():
    collection = AsyncMock()
    # Motor's find() returns a cursor synchronously
    collection.find = MagicMock()
    return collection


@pytest.fixture
def mock_db(mock_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=mock_collection)
    return db


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def fast_hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def geo_payload():
    return {
        "status": "success",
        "country": "Germany",
        "regionName": "Berlin",
        "city": "Berlin",
        "isp": "Deutsche Telekom AG",
    }


@pytest.fixture
def auction_settings():
    return Settings(JWT_SECRET="test-secret", ENVIRONMENT="development")


@pytest.fixture
def seeded_user(fake_db, fast_hasher):
    """a@x.com / secret, stored the way signup stores users."""
    user = {
        "_id": ObjectId(),
        "name": "Alice",
        "email": "a@x.com",
        "password": fast_hasher.hash("secret"),
        "role": "user",
        "avatar": "https://avatar.iran.liara.run/public/7",
    }
    fake_db["users"].docs.append(user)
    return user


@pytest.fixture
def make_client(fake_db, auction_settings):
    """Build a TestClient wired to fake_db and the given geo transport.

    The client is not used as a context manager, so the real lifespan
    (database connection) never runs.
    """
    def _make(transport):
        resolver = GeoResolver(
            lookup_url="http://geo.test/json/{ip}",
            timeout_seconds=1.0,
            transport=transport,
        )
        init_all_services(db=fake_db, app_settings=auction_settings, geo_resolver=resolver)
        return TestClient(
            app,
            headers={"X-Forwarded-For": PUBLIC_IP, "User-Agent": USER_AGENT},
        )
    return _make


@pytest.fixture
def client(make_client, geo_payload):
    return make_client(_geo_transport(geo_payload))


@pytest.fixture
def geo_down_client(make_client):
    return make_client(_geo_transport(exc=httpx.ConnectError("geo service unreachable")))


@pytest.fixture
def geo_transport():
    """Factory for httpx mock transports answering geo lookups."""
    return _geo_transport
