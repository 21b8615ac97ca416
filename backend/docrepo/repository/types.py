"""Record and store-collection types shared by the repository layer."""

from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, TypedDict, TypeVar


class RecordBase(TypedDict):
    """Reserved fields present on every stored record."""

    _id: str
    createTime: int
    updateTime: int


RecordT = TypeVar("RecordT", bound=RecordBase)

Where = Mapping[str, Any]
OrderBy = Mapping[str, str]
Select = Mapping[str, Any]


class Cursor(Protocol):
    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]: ...


class DocumentCollection(Protocol):
    """The subset of AsyncIOMotorCollection the repository relies on."""

    @property
    def name(self) -> str: ...

    async def insert_one(self, document: Dict[str, Any]) -> Any: ...

    async def insert_many(self, documents: Sequence[Dict[str, Any]]) -> Any: ...

    def find(self, filter: Optional[Where] = None, projection: Optional[Select] = None, **kwargs: Any) -> Cursor: ...

    async def find_one_and_update(self, filter: Where, update: Mapping[str, Any], **kwargs: Any) -> Optional[Dict[str, Any]]: ...

    async def update_many(self, filter: Where, update: Mapping[str, Any]) -> Any: ...

    async def delete_one(self, filter: Where) -> Any: ...

    async def delete_many(self, filter: Where) -> Any: ...

    async def count_documents(self, filter: Where) -> int: ...

    def aggregate(self, pipeline: List[Dict[str, Any]]) -> Cursor: ...

    async def create_index(self, keys: Any, **kwargs: Any) -> str: ...
