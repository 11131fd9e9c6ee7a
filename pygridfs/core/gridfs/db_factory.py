"""MongoDB connection factory for GridFS buckets."""

from __future__ import annotations

from gridfs import GridFSBucket
from pymongo import MongoClient
from pymongo.database import Database

from pygridfs.config.settings import MongoSettings
from pygridfs.logging.setup import get_logger

logger = get_logger(__name__)

DEFAULT_BUCKET = "fs"


class MongoDbFactory:
    """
    Supplies the target database and bucket-scoped GridFS clients.

    Connection pooling belongs to the MongoClient; the factory only hands
    out handles.

    Args:
        client: Connected (or lazily connecting) MongoClient
        database_name: Name of the database holding the buckets
    """

    def __init__(self, client: MongoClient, database_name: str):
        if client is None:
            raise ValueError("MongoClient must not be None")
        if not database_name or not database_name.strip():
            raise ValueError("Database name must not be empty")
        self.client = client
        self.database_name = database_name

    @classmethod
    def from_settings(cls, settings: MongoSettings) -> MongoDbFactory:
        """Create a factory and its MongoClient from configuration."""
        client = MongoClient(
            settings.uri,
            connectTimeoutMS=settings.connect_timeout_ms,
            serverSelectionTimeoutMS=settings.connect_timeout_ms,
        )
        logger.debug(f"Created MongoClient for database '{settings.database}'")
        return cls(client, settings.database)

    def get_db(self) -> Database:
        return self.client[self.database_name]

    def get_bucket(self, bucket_name: str | None = None) -> GridFSBucket:
        """
        GridFS bucket in the target database.

        Args:
            bucket_name: Bucket name; None selects the default ``fs`` bucket
        """
        return GridFSBucket(self.get_db(), bucket_name=bucket_name or DEFAULT_BUCKET)

    def close(self) -> None:
        self.client.close()
