"""Result envelopes returned by repository operations."""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class CreateResult(BaseModel):
    """Confirmation of a single insert, with the stamped record as stored."""

    id: str
    record: Dict[str, Any]


class CreateManyResult(BaseModel):
    """Confirmation of a bulk insert; ids are in input order."""

    ids: List[str]


class DeleteResult(BaseModel):
    deleted: int


class Page(BaseModel):
    """Paginated query envelope.

    Note: ``page`` is ``skip * take`` rather than the caller's page number
    (skip=1, take=10 reports page 10). Consumers depending on the current
    value would break if it were changed to echo the page index.
    """

    model_config = ConfigDict(populate_by_name=True)

    list: List[Dict[str, Any]]
    total: int
    page_size: int = Field(alias="pageSize")
    page: int
