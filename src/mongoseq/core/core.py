from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import urlparse

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from mongoseq.config import Config
from mongoseq.core.db import MongoStore
from mongoseq.core.modules.counter.service import SequenceCounter


class Core:
    """Container providing config, database, store and the sequence counter."""

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]]
    database: AsyncDatabase[dict[str, Any]]
    store: MongoStore
    counter: SequenceCounter

    def __init__(self, config: Config) -> None:
        """Initialize core with config, MongoDB client and a counter bound to the configured collection."""
        self.config = config
        self.mongo_client = AsyncMongoClient(config.database_url)
        self.database = self.mongo_client.get_database(urlparse(config.database_url).path[1:])
        self.store = MongoStore(self.database)
        self.counter = SequenceCounter(
            self.store,
            step=config.step,
            collection_name=config.collection_name,
            default_initial_value=config.initial_value,
        )

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Close the MongoDB client when the block exits."""
        try:
            yield
        finally:
            await self.mongo_client.aclose()
