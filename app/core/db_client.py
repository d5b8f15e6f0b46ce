"""
MongoDB async connection management using motor.

The client is created once in the application lifespan and stored on
``app.state``; request handlers receive the database handle through the
``get_database`` dependency rather than importing a module global.

Username uniqueness rests on the index created by ``ensure_indexes``. If
startup could not create it (server not yet reachable, transient error),
``get_database`` retries before handing out the database, so no request
writes to the store until the index exists.
"""

import asyncio
from typing import Optional

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING

from app.core.config import Settings
from app.core.exceptions import DatabaseError
from app.core.logging import get_db_logger

logger = get_db_logger()

USERS_COLLECTION = "users"
EXERCISES_COLLECTION = "exercises"


class MongoManager:
    """Owns the motor client and the database handle derived from it."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._client: Optional[AsyncIOMotorClient] = None
        self._indexes_ready = False
        self._index_lock = asyncio.Lock()

    @property
    def client(self) -> AsyncIOMotorClient:
        if self._client is None:
            raise RuntimeError(
                "MongoDB client not initialized. Call 'await manager.connect()' first."
            )
        return self._client

    @property
    def database(self) -> AsyncIOMotorDatabase:
        """Get the application database."""
        return self.client[self.settings.mongo_database_name]

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def indexes_ready(self) -> bool:
        return self._indexes_ready

    async def connect(self) -> AsyncIOMotorDatabase:
        """Create the client. The driver connects lazily on first operation."""
        if self._client is None:
            self._client = AsyncIOMotorClient(
                self.settings.MONGO_URI,
                serverSelectionTimeoutMS=self.settings.MONGO_SERVER_SELECTION_TIMEOUT_MS,
                tz_aware=True,
            )
            # Log target without credentials - NEVER log the full URI
            logger.info(
                "MongoDB client created", database=self.settings.mongo_database_name
            )
        return self.database

    async def test_connection(self, timeout: float = 5.0) -> bool:
        """Ping the server with a timeout."""
        if self._client is None:
            logger.warning("No MongoDB client available")
            return False

        try:
            await asyncio.wait_for(
                self._client.admin.command("ping"), timeout=timeout
            )
            return True
        except asyncio.TimeoutError:
            logger.error("MongoDB ping timed out", timeout=timeout)
            return False
        except Exception as e:
            logger.error("MongoDB ping failed", error=str(e))
            return False

    async def ensure_indexes(self) -> None:
        """Create the indexes the API relies on. Safe to repeat."""
        database = self.database
        await database[USERS_COLLECTION].create_index(
            [("username", ASCENDING)], unique=True, name="username_unique"
        )
        await database[EXERCISES_COLLECTION].create_index(
            [("userId", ASCENDING), ("date", ASCENDING)], name="user_date"
        )
        self._indexes_ready = True
        logger.info("MongoDB indexes ensured")

    async def ensure_indexes_once(self) -> None:
        """Create the indexes unless an earlier call already did."""
        if self._indexes_ready:
            return
        async with self._index_lock:
            if not self._indexes_ready:
                await self.ensure_indexes()

    async def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("MongoDB connection closed")


async def get_database(request: Request) -> AsyncIOMotorDatabase:
    """Dependency injection helper for FastAPI."""
    manager: MongoManager = request.app.state.mongo
    if manager.settings.MONGO_ENSURE_INDEXES and not manager.indexes_ready:
        try:
            await manager.ensure_indexes_once()
        except Exception as e:
            logger.error("Failed to create indexes", error=str(e))
            raise DatabaseError("Database unavailable")
    return manager.database
