"""
Database management for ticketkeeper
Provides the MongoDB connection used by the ticket and blacklist stores
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure, PyMongoError, ServerSelectionTimeoutError

from .config import DatabaseConfig
from .exceptions import DatabaseError
from .logger import LoggerMixin


TICKETS_COLLECTION = "tickets"
BLACKLIST_COLLECTION = "blacklist"


class DatabaseManager(LoggerMixin):
    """Database manager for MongoDB connections."""

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None

    async def connect(self) -> None:
        """Connect to MongoDB and verify the server answers.

        Raises:
            DatabaseError: the server could not be reached
        """
        self.logger.info(f"Connecting to MongoDB database: {self.config.database_name}")

        self.client = AsyncIOMotorClient(
            self.config.url,
            serverSelectionTimeoutMS=self.config.server_selection_timeout,
            connectTimeoutMS=self.config.connect_timeout,
            retryWrites=True,
            retryReads=True,
        )

        try:
            await self.client.admin.command('ping')
        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            self.client.close()
            self.client = None
            raise DatabaseError(f"Failed to connect to MongoDB: {e}") from e

        self.database = self.client[self.config.database_name]
        self.logger.info(f"Successfully connected to database: {self.config.database_name}")

    async def disconnect(self) -> None:
        """Disconnect from MongoDB database."""
        if self.client:
            self.client.close()
            self.client = None
            self.database = None
            self.logger.info("Disconnected from MongoDB")

    def get_collection(self, collection_name: str):
        """Get a collection from the database."""
        if self.database is None:
            raise DatabaseError("Database not connected")
        return self.database[collection_name]

    async def create_indexes(self) -> None:
        """Create the indexes the periodic sweeps filter on."""
        if self.database is None:
            self.logger.warning("Cannot create indexes: database not connected")
            return

        try:
            await self.get_collection(TICKETS_COLLECTION).create_index("status")
            await self.get_collection(BLACKLIST_COLLECTION).create_index("expiresAt")
            self.logger.info("Database indexes created successfully")
        except PyMongoError as e:
            self.logger.error(f"Failed to create indexes: {e}")
