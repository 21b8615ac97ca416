"""Shared fixtures: in-memory Motor collection and a deterministic clock."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import logfire
import pytest
from mongomock_motor import AsyncMongoMockClient

from docrepo.repository import GenericRepository

logfire.configure(send_to_logfire=False, console=False)


class CounterClock:
    """Epoch-millisecond clock that advances by one on every reading."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


@pytest.fixture
def clock() -> CounterClock:
    return CounterClock()


@pytest.fixture
def database():
    return AsyncMongoMockClient()["docrepo_test"]


@pytest.fixture
def collection(database):
    return database["records"]


@pytest.fixture
def repository(collection, clock) -> GenericRepository:
    return GenericRepository(collection, clock=clock)
