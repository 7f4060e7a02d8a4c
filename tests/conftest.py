"""Shared pytest fixtures."""

import asyncio
import copy
from typing import Any

import pytest

from mongoseq.core.modules.counter.service import SequenceCounter


class InMemoryStore:
    """Store fake keeping records in dicts; increments are serialized with a lock."""

    def __init__(self) -> None:
        self.collections: dict[str, dict[str, dict[str, Any]]] = {}
        self.calls: list[str] = []
        self._lock = asyncio.Lock()

    def _collection(self, name: str) -> dict[str, dict[str, Any]]:
        return self.collections.setdefault(name, {})

    async def find_one(self, collection_name: str, key: str) -> dict[str, Any] | None:
        self.calls.append("find_one")
        await asyncio.sleep(0)
        doc = self._collection(collection_name).get(key)
        return copy.deepcopy(doc) if doc is not None else None

    async def upsert(self, collection_name: str, key: str, fields: dict[str, Any]) -> None:
        self.calls.append("upsert")
        await asyncio.sleep(0)
        self._collection(collection_name).setdefault(key, {"_id": key}).update(fields)

    async def insert_if_absent(self, collection_name: str, key: str, fields: dict[str, Any]) -> bool:
        self.calls.append("insert_if_absent")
        await asyncio.sleep(0)
        collection = self._collection(collection_name)
        if key in collection:
            return False
        collection[key] = {"_id": key, **fields}
        return True

    async def atomic_increment(self, collection_name: str, key: str, field: str, amount: int) -> dict[str, Any] | None:
        self.calls.append("atomic_increment")
        async with self._lock:
            await asyncio.sleep(0)
            doc = self._collection(collection_name).get(key)
            if doc is None:
                return None
            doc[field] = doc.get(field, 0) + amount
            return copy.deepcopy(doc)


@pytest.fixture
def store():
    """Create an empty in-memory store."""
    return InMemoryStore()


@pytest.fixture
def counter(store):
    """Create a sequence counter with default settings."""
    return SequenceCounter(store)
