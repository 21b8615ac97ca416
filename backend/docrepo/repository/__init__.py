"""Repository layer for MongoDB collections.

This package provides:
- GenericRepository: collection-bound CRUD, count, paginated query, upsert
- Aggregation: chainable pipeline builder returned by GenericRepository.aggregate()
- create_repository(): factory applying configured defaults
- Result envelopes (CreateResult, CreateManyResult, DeleteResult, Page)
"""

from .aggregation import Aggregation
from .base import DEFAULT_TAKE, GenericRepository, now_ms
from .factory import create_repository
from .results import CreateManyResult, CreateResult, DeleteResult, Page
from .types import DocumentCollection, RecordBase, RecordT

__all__ = [
    "Aggregation",
    "DEFAULT_TAKE",
    "GenericRepository",
    "now_ms",
    "create_repository",
    "CreateManyResult",
    "CreateResult",
    "DeleteResult",
    "Page",
    "DocumentCollection",
    "RecordBase",
    "RecordT",
]
