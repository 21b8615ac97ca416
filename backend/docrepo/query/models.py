"""Pydantic models for search requests and the queries they translate into."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

# Predicate in MongoDB query-language shape; opaque to this package
Where = Dict[str, Any]
OrderBy = Dict[str, str]


class SearchRequest(BaseModel):
    """Externally supplied paginated/sorted/filtered search.

    Attributes:
        page: Zero-based page number
        page_size: Records per page (``pageSize`` on the wire)
        sort: ``"<field>:<asc|desc>"``
        filters: Filter tree of the form ``{"$and": [node, ...]}``
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    page: Optional[int] = Field(default=None, ge=0)
    page_size: Optional[int] = Field(default=None, gt=0, alias="pageSize")
    sort: Optional[str] = None
    filters: Optional[Dict[str, Any]] = None


class Query(BaseModel):
    """Repository query produced by translate().

    Unset fields mean "use the repository default": skip 0, the default page
    size, natural order, and match-all.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    skip: Optional[int] = Field(default=None, ge=0)
    take: Optional[int] = Field(default=None, gt=0)
    order_by: Optional[OrderBy] = Field(default=None, alias="orderBy")
    where: Optional[Where] = None

    def as_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for GenericRepository.query(), set fields only."""
        return {
            name: value
            for name, value in (
                ("skip", self.skip),
                ("take", self.take),
                ("order_by", self.order_by),
                ("where", self.where),
            )
            if value is not None
        }
