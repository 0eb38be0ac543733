"""MongoDB database connection using Motor (async driver)."""
import logging
from contextlib import asynccontextmanager

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from performance_track.config import settings

logger = logging.getLogger(__name__)


class Database:
    """MongoDB database connection manager."""

    client: AsyncIOMotorClient | None = None
    db: AsyncIOMotorDatabase | None = None

    async def connect(self) -> None:
        """Connect to MongoDB and make sure the lookup indexes exist."""
        self.client = AsyncIOMotorClient(settings.mongodb_url)
        self.db = self.client[settings.mongodb_db_name]
        await self.ensure_indexes()
        logger.info("Connected to MongoDB: %s", settings.mongodb_db_name)

    async def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")

    async def ensure_indexes(self) -> None:
        """Create the indexes used by goal, notification and audit queries."""
        await self.db["users"].create_index("email", unique=True)
        await self.db["goals"].create_index([("assigned_to_user.id", 1), ("status", 1)])
        await self.db["goals"].create_index([("assigned_manager.id", 1), ("status", 1)])
        await self.db["goals"].create_index([("status", 1), ("created_at", 1)])
        await self.db["notifications"].create_index([("user_id", 1), ("created_at", -1)])
        await self.db["audit_logs"].create_index([("timestamp", -1)])
        await self.db["goal_completion_approvals"].create_index("goal_id")
        await self.db["feedback"].create_index("goal_id")

    def get_collection(self, name: str):
        """Get a MongoDB collection."""
        if self.db is None:
            raise RuntimeError("Database not connected")
        return self.db[name]


# Global database instance
database = Database()


async def get_database() -> AsyncIOMotorDatabase:
    """Dependency to get database instance."""
    if database.db is None:
        raise RuntimeError("Database not connected")
    return database.db


@asynccontextmanager
async def transaction(db):
    """
    Run a block of writes as one unit.

    Yields the session to pass as ``session=`` to every write. When
    transactions are disabled (standalone mongod) the session is None and
    writes are applied individually.
    """
    if not settings.mongodb_use_transactions:
        yield None
        return

    async with await db.client.start_session() as session:
        async with session.start_transaction():
            yield session
