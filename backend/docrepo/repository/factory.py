"""Builds one GenericRepository per collection from settings."""

import logging
from typing import Optional, Type

from motor.motor_asyncio import AsyncIOMotorDatabase

from docrepo.config import Settings, get_settings
from docrepo.connection import get_database

from .base import GenericRepository
from .types import RecordBase, RecordT

logger = logging.getLogger(__name__)


def create_repository(
    collection_name: str,
    database: Optional[AsyncIOMotorDatabase] = None,
    settings: Optional[Settings] = None,
    record_type: Type[RecordT] = RecordBase,  # type: ignore[assignment]
) -> GenericRepository[RecordT]:
    """
    Create a repository bound to ``collection_name``.

    Args:
        collection_name: Collection the repository reads and writes
        database: Database handle; defaults to docrepo.connection.get_database()
        settings: Source of page-size and upsert defaults
        record_type: Record TypedDict, used only for static typing

    Returns:
        GenericRepository for the collection
    """
    settings = settings or get_settings()
    if database is None:
        database = get_database(settings.mongo.database)

    repository: GenericRepository[RecordT] = GenericRepository(
        database[collection_name],
        default_take=settings.repository.default_page_size,
        atomic_upsert=settings.repository.atomic_upsert,
    )
    logger.debug(f"Created {repository!r} ({record_type.__name__})")
    return repository
