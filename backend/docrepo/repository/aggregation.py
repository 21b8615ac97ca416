"""Chainable aggregation pipeline builder bound to one collection.

Stages are appended as given; nothing is validated or translated before
end() hands the pipeline to the driver.
"""

import logging
from typing import Any, Dict, List, Mapping

from .types import DocumentCollection

logger = logging.getLogger(__name__)


class Aggregation:
    def __init__(self, collection: DocumentCollection):
        self._collection = collection
        self._stages: List[Dict[str, Any]] = []

    @property
    def pipeline(self) -> List[Dict[str, Any]]:
        return list(self._stages)

    def stage(self, operator: str, spec: Any) -> "Aggregation":
        """Append an arbitrary stage, e.g. stage("$facet", {...})."""
        self._stages.append({operator: spec})
        return self

    def match(self, spec: Mapping[str, Any]) -> "Aggregation":
        return self.stage("$match", dict(spec))

    def group(self, spec: Mapping[str, Any]) -> "Aggregation":
        return self.stage("$group", dict(spec))

    def sort(self, spec: Mapping[str, int]) -> "Aggregation":
        return self.stage("$sort", dict(spec))

    def project(self, spec: Mapping[str, Any]) -> "Aggregation":
        return self.stage("$project", dict(spec))

    def add_fields(self, spec: Mapping[str, Any]) -> "Aggregation":
        return self.stage("$addFields", dict(spec))

    def lookup(self, spec: Mapping[str, Any]) -> "Aggregation":
        return self.stage("$lookup", dict(spec))

    def unwind(self, path: Any) -> "Aggregation":
        return self.stage("$unwind", path)

    def skip(self, n: int) -> "Aggregation":
        return self.stage("$skip", n)

    def limit(self, n: int) -> "Aggregation":
        return self.stage("$limit", n)

    def sample(self, size: int) -> "Aggregation":
        return self.stage("$sample", {"size": size})

    def count(self, field: str) -> "Aggregation":
        return self.stage("$count", field)

    async def end(self) -> List[Dict[str, Any]]:
        """Run the pipeline and return every output document."""
        logger.debug(f"Running {len(self._stages)}-stage aggregation on '{self._collection.name}'")
        cursor = self._collection.aggregate(self.pipeline)
        return await cursor.to_list(length=None)
