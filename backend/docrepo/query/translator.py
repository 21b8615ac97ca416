"""
Search Request Translator

Converts a SearchRequest (page, page size, sort string, filter tree) into a
Query the repository understands:

- take = page_size; skip = page * page_size when both are given
- "field:DIR" -> {field: "dir"}; anything unparseable is dropped
- every "$not" value in the filter tree becomes a compiled pattern

Translation is pure: the input tree is copied, never mutated.
"""

import logging
import re
from typing import Any, Dict, Mapping, Optional, Union

from docrepo.exceptions import InvalidFilterError

from .models import Query, SearchRequest

logger = logging.getLogger(__name__)

NEGATION_OPERATOR = "$not"


def _transform_sort(sort: Optional[str]) -> Dict[str, Any]:
    if not sort:
        return {}
    field_path, _, direction = sort.partition(":")
    if not field_path or not direction:
        logger.debug(f"Dropping unparseable sort clause: {sort!r}")
        return {}
    # Direction is not validated; the store rejects what it does not understand
    return {"order_by": {field_path: direction.lower()}}


def _compile_pattern(value: Any) -> re.Pattern:
    pattern = str(value)
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidFilterError(
            f"Invalid pattern for {NEGATION_OPERATOR}: {pattern!r} ({e})",
            pattern=pattern,
        ) from e


def _transform_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return _transform_node(value) if value else {}
    if isinstance(value, list):
        return [_transform_value(item) for item in value]
    return value


def _transform_node(node: Mapping[str, Any]) -> Dict[str, Any]:
    transformed = {}
    for key, value in node.items():
        if key == NEGATION_OPERATOR:
            transformed[key] = _compile_pattern(value)
        else:
            transformed[key] = _transform_value(value)
    return transformed


def _transform_filters(filters: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    conjuncts = (filters or {}).get("$and") or []
    if not conjuncts:
        return {}
    return {"where": {"$and": [_transform_node(node) for node in conjuncts]}}


def translate(request: Union[SearchRequest, Mapping[str, Any]]) -> Query:
    """
    Translate a search request into a repository Query.

    Args:
        request: SearchRequest, or a mapping accepted by SearchRequest
            (camelCase ``pageSize`` or snake_case ``page_size``)

    Returns:
        Query with only the clauses the request could supply

    Raises:
        InvalidFilterError: If a $not value does not compile as a pattern
        pydantic.ValidationError: If a mapping fails SearchRequest validation
    """
    if not isinstance(request, SearchRequest):
        request = SearchRequest.model_validate(request)

    page, page_size = request.page, request.page_size

    return Query(
        take=page_size,
        skip=page * page_size if page is not None and page_size is not None else None,
        **_transform_sort(request.sort),
        **_transform_filters(request.filters),
    )
