"""docrepo: generic repository and search-request translation for MongoDB collections."""

__version__ = "0.1.0"
__author__ = "docrepo maintainers"

from docrepo.query import Query, SearchRequest, translate
from docrepo.repository import (
    Aggregation,
    CreateManyResult,
    CreateResult,
    DeleteResult,
    GenericRepository,
    Page,
    RecordBase,
    create_repository,
)

__all__ = [
    "__version__",
    "__author__",
    "Query",
    "SearchRequest",
    "translate",
    "Aggregation",
    "CreateManyResult",
    "CreateResult",
    "DeleteResult",
    "GenericRepository",
    "Page",
    "RecordBase",
    "create_repository",
]
