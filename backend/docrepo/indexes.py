"""
MongoDB index definitions for repository-managed collections.

Every record carries createTime/updateTime; sorting recent-first on either
field is the common listing pattern, so both get a descending index.
"""

import logging

from pymongo import DESCENDING

from docrepo.repository.types import DocumentCollection

logger = logging.getLogger(__name__)

TIMESTAMP_INDEXES = [
    ("createTime", "createTime_desc_idx"),
    ("updateTime", "updateTime_desc_idx"),
]


async def ensure_timestamp_indexes(collection: DocumentCollection) -> list[str]:
    """Create the timestamp indexes on a collection. Idempotent."""
    created = []
    for field, index_name in TIMESTAMP_INDEXES:
        name = await collection.create_index([(field, DESCENDING)], name=index_name)
        created.append(name)

    logger.info(f"Ensured timestamp indexes on '{collection.name}': {created}")
    return created
