"""
MongoDB client lifecycle.

This module provides:
- Motor client connection (async driver)
- Database handle lookup
- Health check utilities

Repositories never read the client from here themselves; they receive a
collection handle explicitly (see docrepo.repository.factory).
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from docrepo.config import Settings, get_settings
from docrepo.exceptions import DatabaseNotInitializedError

logger = logging.getLogger(__name__)

_client: Optional[AsyncIOMotorClient] = None
_settings: Optional[Settings] = None


def init_client(settings: Optional[Settings] = None) -> AsyncIOMotorClient:
    """
    Create the process-wide Motor client.

    Motor connects lazily, so this does not perform I/O; use
    check_connection() to verify the server is reachable.
    """
    global _client, _settings

    settings = settings or get_settings()
    if _client is not None:
        logger.debug("MongoDB client already initialized, reusing it")
        return _client

    _client = AsyncIOMotorClient(
        settings.mongo.url,
        serverSelectionTimeoutMS=settings.mongo.server_selection_timeout_ms,
        appname=settings.mongo.app_name,
    )
    _settings = settings
    logger.info(f"MongoDB client created for {_sanitize_mongodb_url(settings.mongo.url)}")
    return _client


def close_client() -> None:
    """
    Close MongoDB connection.
    """
    global _client, _settings
    if _client is not None:
        _client.close()
        _client = None
        _settings = None
        logger.info("MongoDB client closed")


def get_client() -> AsyncIOMotorClient:
    """
    Get the MongoDB client instance.
    """
    if _client is None:
        raise DatabaseNotInitializedError("Database not initialized. Call init_client() first.")
    return _client


def get_database(name: Optional[str] = None) -> AsyncIOMotorDatabase:
    """
    Get a database handle, defaulting to the configured database name.
    """
    client = get_client()
    if name is None:
        name = (_settings or get_settings()).mongo.database
    return client[name]


async def check_connection() -> bool:
    """
    Check if MongoDB connection is healthy.
    """
    if _client is None:
        return False

    try:
        await _client.admin.command("ping")
        return True
    except PyMongoError as e:
        logger.warning(f"MongoDB ping failed: {e}")
        return False


def get_connection_info(settings: Optional[Settings] = None) -> dict:
    """
    Get database connection information and status.
    """
    settings = settings or _settings or get_settings()

    return {
        "status": "connected" if _client is not None else "disconnected",
        "url": _sanitize_mongodb_url(settings.mongo.url),
        "database": settings.mongo.database,
        "environment": settings.environment,
    }


def _sanitize_mongodb_url(url: str) -> str:
    """
    Hide password in MongoDB URL for safe logging.
    """
    if "@" not in url or "://" not in url:
        return url

    protocol, rest = url.split("://", 1)
    credentials, host = rest.rsplit("@", 1)
    if ":" in credentials:
        username = credentials.split(":", 1)[0]
        return f"{protocol}://{username}:***@{host}"
    return url
