"""Search-request translation into repository queries."""

from .models import Query, SearchRequest
from .translator import NEGATION_OPERATOR, translate

__all__ = [
    "Query",
    "SearchRequest",
    "NEGATION_OPERATOR",
    "translate",
]
