"""
GenericRepository

Collection-bound façade over a Motor collection providing CRUD, counting,
paginated queries and aggregation for records shaped as
``{_id, createTime, updateTime, ...fields}``.

Timestamps are epoch milliseconds taken from an injectable clock. Store
errors are never caught or wrapped; a where-clause that matches nothing is
reported as None or a zero count, not as an error.

Upsert has two implementations behind the same call:
- upsert_atomic(): an atomic insert-if-absent (find_one_and_update with
  upsert=True and only $setOnInsert), then update() when a record matched
- the check-then-act fallback (find_unique, then update or create). Two
  concurrent fallback upserts with the same where-clause can both observe
  "not found" and both insert; callers needing uniqueness should enable
  atomic_upsert or back the match fields with a unique index.
"""

import asyncio
import logging
import re
import time
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Sequence, Union, cast

import logfire
from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, ReturnDocument

from docrepo.query import Query, SearchRequest, translate

from .aggregation import Aggregation
from .results import CreateManyResult, CreateResult, DeleteResult, Page
from .types import DocumentCollection, OrderBy, RecordT, Select, Where

logger = logging.getLogger(__name__)

DEFAULT_TAKE = 10

SORT_DIRECTIONS = {"asc": ASCENDING, "desc": DESCENDING}


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def _id_equals(id: str) -> Dict[str, Any]:
    return {"_id": {"$eq": id}}


def _equality_value(condition: Any) -> Any:
    """Value an _id condition pins on insert: a literal or {"$eq": v}, else None."""
    if isinstance(condition, Mapping):
        if set(condition) == {"$eq"}:
            return condition["$eq"]
        return None
    if isinstance(condition, re.Pattern):
        return None
    return condition


def _is_operator_document(data: Mapping[str, Any]) -> bool:
    return any(key.startswith("$") for key in data)


class GenericRepository(Generic[RecordT]):
    """Repository bound to a single collection.

    Args:
        collection: Motor collection (or anything satisfying DocumentCollection)
        clock: Returns the current time in epoch milliseconds
        default_take: Page size used when find_many/query get no take
        atomic_upsert: Route upsert() through upsert_atomic()
    """

    def __init__(
        self,
        collection: DocumentCollection,
        *,
        clock: Callable[[], int] = now_ms,
        default_take: int = DEFAULT_TAKE,
        atomic_upsert: bool = False,
    ):
        if default_take <= 0:
            raise ValueError(f"default_take must be positive, got {default_take}")

        self._collection = collection
        self._clock = clock
        self._default_take = default_take
        self._atomic_upsert = atomic_upsert

    @property
    def name(self) -> str:
        return self._collection.name

    @property
    def collection(self) -> DocumentCollection:
        return self._collection

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(collection={self.name!r}, atomic_upsert={self._atomic_upsert})"

    # ------------------------------------------------------------------
    # Write helpers
    # ------------------------------------------------------------------

    def _stamp_new(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        now = self._clock()
        # Caller-supplied timestamps and _id take precedence
        document = {"updateTime": now, "createTime": now, **data}
        if "_id" not in document:
            document["_id"] = str(ObjectId())
        return document

    def _update_document(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Build the update spec, merging updateTime into $set."""
        now = self._clock()
        if _is_operator_document(data):
            document = dict(data)
            document["$set"] = {"updateTime": now, **data.get("$set", {})}
            return document
        return {"$set": {"updateTime": now, **data}}

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create(self, data: Mapping[str, Any]) -> CreateResult:
        """Insert one record stamped with createTime = updateTime = now."""
        document = self._stamp_new(data)
        result = await self._collection.insert_one(document)

        record_id = str(result.inserted_id)
        logger.debug(f"Created record {record_id} in '{self.name}'")
        return CreateResult(id=record_id, record=document)

    async def create_many(self, items: Sequence[Mapping[str, Any]]) -> CreateManyResult:
        """Insert several records, each stamped with its own clock reading."""
        documents = [self._stamp_new(item) for item in items]
        if not documents:
            return CreateManyResult(ids=[])

        result = await self._collection.insert_many(documents)

        ids = [str(inserted_id) for inserted_id in result.inserted_ids]
        logger.debug(f"Created {len(ids)} records in '{self.name}'")
        return CreateManyResult(ids=ids)

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    async def update(self, where: Where, data: Mapping[str, Any]) -> Optional[RecordT]:
        """
        Update at most one record matching ``where``.

        Args:
            where: MongoDB filter
            data: Field values to set, or an update-operator document
                ({"$inc": ...}); updateTime is refreshed either way

        Returns:
            The record after the update, or None if nothing matched
        """
        document = await self._collection.find_one_and_update(
            dict(where),
            self._update_document(data),
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            logger.debug(f"update matched nothing in '{self.name}'")
        return cast(Optional[RecordT], document)

    async def update_many(self, where: Where, data: Mapping[str, Any]) -> None:
        """Update every record matching ``where``; returns nothing."""
        result = await self._collection.update_many(dict(where), self._update_document(data))
        logger.debug(f"update_many modified {result.modified_count} records in '{self.name}'")

    async def update_by_id(self, id: str, data: Mapping[str, Any]) -> Optional[RecordT]:
        return await self.update(_id_equals(id), data)

    # ------------------------------------------------------------------
    # Upsert
    # ------------------------------------------------------------------

    async def upsert(
        self,
        where: Where,
        update: Mapping[str, Any],
        create: Mapping[str, Any],
    ) -> Optional[RecordT]:
        """
        Update the record matching ``where`` or create one from ``create``.

        Uses upsert_atomic() when the repository was built with
        atomic_upsert=True. Otherwise this is a read followed by a write with
        no isolation in between: concurrent calls with the same ``where`` may
        each create a record.

        Returns:
            The updated or newly created record (None if the matched
            record was removed between the read and the write)
        """
        if self._atomic_upsert:
            return await self.upsert_atomic(where, update, create)

        with logfire.span("repository.upsert", collection=self.name, atomic=False):
            existing = await self.find_unique(where)
            if existing is not None:
                return await self.update(where, update)

            created = await self.create(create)
            return cast(RecordT, created.record)

    async def upsert_atomic(
        self,
        where: Where,
        update: Mapping[str, Any],
        create: Mapping[str, Any],
    ) -> Optional[RecordT]:
        """
        Upsert whose create step is a single insert-if-absent.

        find_one_and_update(upsert=True) with only $setOnInsert either inserts
        the stamped ``create`` record or leaves the matching record untouched;
        in the latter case ``update`` is applied with update(). Concurrent
        calls therefore never both create (given a unique index on the match
        fields), and results match the check-then-act path: a fresh record
        holds ``create`` (plus the equality fields of ``where``, which the
        store copies on insert), an existing one gets ``update``.
        """
        document = self._stamp_new(create)
        id_match = _equality_value(where.get("_id"))
        if id_match is not None:
            # The store copies _id from an equality match on insert
            document["_id"] = id_match
        on_insert = dict(document)
        if id_match is not None:
            del on_insert["_id"]

        with logfire.span("repository.upsert", collection=self.name, atomic=True):
            previous = await self._collection.find_one_and_update(
                dict(where),
                {"$setOnInsert": on_insert},
                upsert=True,
                return_document=ReturnDocument.BEFORE,
            )
            if previous is None:
                logger.debug(f"upsert created {document['_id']} in '{self.name}'")
                return cast(RecordT, document)

            return await self.update(where, update)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def delete(self, where: Where) -> DeleteResult:
        """Remove at most one record matching ``where``."""
        result = await self._collection.delete_one(dict(where))
        return DeleteResult(deleted=result.deleted_count)

    async def delete_many(self, where: Where) -> DeleteResult:
        result = await self._collection.delete_many(dict(where))
        logger.debug(f"delete_many removed {result.deleted_count} records from '{self.name}'")
        return DeleteResult(deleted=result.deleted_count)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def find_many(
        self,
        where: Optional[Where] = None,
        skip: int = 0,
        take: Optional[int] = None,
        order_by: Optional[OrderBy] = None,
        select: Optional[Select] = None,
    ) -> List[RecordT]:
        """
        Find records matching ``where`` (all records when omitted).

        Args:
            where: MongoDB filter
            skip: Records to skip
            take: Maximum records to return (repository default when None)
            order_by: {field: "asc" | "desc"}; only the first entry is used
            select: Projection, e.g. {"name": True}

        Returns:
            Matching records in store order (possibly empty)
        """
        find_kwargs: Dict[str, Any] = {
            "skip": skip,
            "limit": take if take is not None else self._default_take,
        }

        if order_by:
            field, direction = next(iter(order_by.items()))
            # Unknown directions go to the driver as-is
            find_kwargs["sort"] = [(field, SORT_DIRECTIONS.get(direction, direction))]

        cursor = self._collection.find(
            dict(where or {}),
            dict(select) if select else None,
            **find_kwargs,
        )
        documents = await cursor.to_list(length=None)
        return cast(List[RecordT], documents)

    async def find_unique(
        self,
        where: Optional[Where] = None,
        order_by: Optional[OrderBy] = None,
    ) -> Optional[RecordT]:
        records = await self.find_many(where=where, take=1, order_by=order_by)
        return records[0] if records else None

    async def find_by_id(self, id: str) -> Optional[RecordT]:
        return await self.find_unique(_id_equals(id))

    async def count(self, where: Optional[Where] = None) -> int:
        """Count records matching ``where``, ignoring pagination."""
        return await self._collection.count_documents(dict(where or {}))

    async def query(
        self,
        where: Optional[Where] = None,
        skip: Optional[int] = None,
        take: Optional[int] = None,
        order_by: Optional[OrderBy] = None,
        select: Optional[Select] = None,
    ) -> Page:
        """
        Fetch one page of records together with the total match count.

        find_many and count are issued concurrently.

        Returns:
            Page with list, total, pageSize (= take) and page (= skip * take)
        """
        skip = skip if skip is not None else 0
        take = take if take is not None else self._default_take

        with logfire.span("repository.query", collection=self.name, skip=skip, take=take):
            records, total = await asyncio.gather(
                self.find_many(where=where, skip=skip, take=take, order_by=order_by, select=select),
                self.count(where),
            )

        return Page(list=records, total=total, pageSize=take, page=skip * take)

    async def search(self, request: Union[SearchRequest, Query, Mapping[str, Any]]) -> Page:
        """Translate a search request (unless already a Query) and run it."""
        query = request if isinstance(request, Query) else translate(request)
        return await self.query(**query.as_kwargs())

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    def aggregate(self) -> Aggregation:
        """Start an aggregation pipeline on this collection."""
        return Aggregation(self._collection)
