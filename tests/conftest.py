"""
Pytest configuration and fixtures for the test suite.

This module provides shared fixtures for unit and integration tests.
"""

import copy
import os
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
import pytest_asyncio
import bson
from bson import ObjectId
from faker import Faker
from httpx import AsyncClient, ASGITransport
from pymongo.errors import DuplicateKeyError

# Set test environment before importing app modules
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017/exercise-tracker-test")
os.environ.setdefault("MONGO_ENSURE_INDEXES", "false")

fake = Faker()


# =============================================================================
# Test Data Generators
# =============================================================================

@pytest.fixture
def username() -> str:
    """Generate a random username."""
    return f"{fake.user_name()}_{fake.random_int(min=1000, max=9999)}"


@pytest.fixture
def user_document(username: str) -> Dict[str, Any]:
    """A stored user document."""
    return {"_id": ObjectId(), "username": username}


def make_exercise_document(
    user_id: ObjectId,
    day: str,
    description: Optional[str] = None,
    duration: Optional[int] = None,
) -> Dict[str, Any]:
    """Build a stored exercise document for a ``YYYY-MM-DD`` day."""
    return {
        "_id": ObjectId(),
        "userId": user_id,
        "description": description or fake.word(),
        "duration": duration if duration is not None else fake.random_int(min=5, max=90),
        "date": datetime.fromisoformat(day).replace(tzinfo=timezone.utc),
    }


# =============================================================================
# Mock Objects
# =============================================================================

def create_mock_cursor(documents: List[Dict[str, Any]]) -> Mock:
    """Create a mock motor cursor whose chain methods return itself."""
    cursor = Mock()
    cursor.sort = Mock(return_value=cursor)
    cursor.limit = Mock(return_value=cursor)
    cursor.to_list = AsyncMock(return_value=documents)
    return cursor


@pytest.fixture
def mock_collections() -> Dict[str, Mock]:
    """Mock ``users`` and ``exercises`` collections."""
    collections = {}
    for name in ("users", "exercises"):
        collection = Mock()
        collection.insert_one = AsyncMock()
        collection.find_one = AsyncMock(return_value=None)
        collection.find = Mock(return_value=create_mock_cursor([]))
        collections[name] = collection
    return collections


@pytest.fixture
def mock_database(mock_collections: Dict[str, Mock]) -> MagicMock:
    """Mock motor database indexed by collection name."""
    database = MagicMock()
    database.__getitem__.side_effect = lambda name: mock_collections[name]
    return database


# =============================================================================
# In-memory document store
# =============================================================================

class FakeCursor:
    """Cursor over a snapshot of matching documents."""

    def __init__(self, documents: List[Dict[str, Any]]):
        self._documents = documents
        self._limit = 0

    def sort(self, keys, direction=None):
        if isinstance(keys, str):
            keys = [(keys, direction or 1)]
        for field, order in reversed(keys):
            self._documents.sort(key=lambda doc: doc[field], reverse=order < 0)
        return self

    def limit(self, count: int):
        self._limit = count
        return self

    async def to_list(self, length=None):
        documents = self._documents[: self._limit] if self._limit else self._documents
        return [copy.deepcopy(doc) for doc in documents]


class FakeCollection:
    """Collection supporting the operations the services issue."""

    def __init__(self, unique_fields: tuple = ()):
        self.documents: List[Dict[str, Any]] = []
        self.unique_fields = unique_fields

    @staticmethod
    def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
        for field, condition in query.items():
            value = document.get(field)
            if isinstance(condition, dict):
                if "$gte" in condition and not value >= condition["$gte"]:
                    return False
                if "$lte" in condition and not value <= condition["$lte"]:
                    return False
            elif value != condition:
                return False
        return True

    async def create_index(self, keys, unique: bool = False, name: Optional[str] = None):
        if unique:
            self.unique_fields = tuple(self.unique_fields) + tuple(field for field, _ in keys)
        return name

    async def insert_one(self, document: Dict[str, Any]):
        # Raises like the driver for values BSON cannot hold
        bson.encode(document)
        for field in self.unique_fields:
            if any(doc.get(field) == document.get(field) for doc in self.documents):
                raise DuplicateKeyError(f"E11000 duplicate key error: {field}")
        stored = dict(document)
        stored.setdefault("_id", ObjectId())
        self.documents.append(stored)
        return Mock(inserted_id=stored["_id"])

    async def find_one(self, query: Dict[str, Any]):
        for document in self.documents:
            if self._matches(document, query):
                return copy.deepcopy(document)
        return None

    def find(self, query: Dict[str, Any], projection=None):
        return FakeCursor([doc for doc in self.documents if self._matches(doc, query)])


@pytest.fixture
def fake_database() -> Dict[str, FakeCollection]:
    """In-memory stand-in for the motor database."""
    return {
        "users": FakeCollection(unique_fields=("username",)),
        "exercises": FakeCollection(),
    }


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def mock_mongo_manager() -> Mock:
    """Mock MongoManager stored on app.state."""
    manager = Mock()
    manager.test_connection = AsyncMock(return_value=True)
    manager.close = AsyncMock()
    return manager


@pytest.fixture
def app(fake_database, mock_mongo_manager):
    """Create a test FastAPI application wired to the in-memory store."""
    # Import here to ensure test environment is set
    from app.main import app as fastapi_app
    from app.core.db_client import get_database

    fastapi_app.state.mongo = mock_mongo_manager
    fastapi_app.dependency_overrides[get_database] = lambda: fake_database
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


# =============================================================================
# Helper Functions
# =============================================================================

async def create_user(client: AsyncClient, name: str) -> Dict[str, Any]:
    """Create a user through the API and return the response body."""
    response = await client.post("/api/users", data={"username": name})
    assert response.status_code == 200
    return response.json()


__all__ = [
    "fake",
    "create_mock_cursor",
    "make_exercise_document",
    "create_user",
    "FakeCollection",
]
