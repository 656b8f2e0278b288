"""Gremlin endpoint connection management over the gremlinpython driver."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Sequence
from typing import Any, ClassVar, TYPE_CHECKING

from gremlin_python.driver import client as gremlin_client
from gremlin_python.driver import serializer
from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from gremlin_python.driver.resultset import ResultSet

    from gremlin_orm.graph import AsyncGraph

log = logging.getLogger(__name__)


class Collection(BaseModel):
    """Identity of the document collection that holds a graph."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    database: str
    name: str

    @property
    def resource_link(self) -> str:
        """The collection link the endpoint expects as the username."""
        return f"/dbs/{self.database}/colls/{self.name}"


class GremlinResultFeed:
    """Adapts a driver `ResultSet` to the `ResultFeed` protocol.

    Results are pending while the response has not completed or batches are
    still queued on the stream. Each fetch waits for the response to complete,
    so afterwards only queued batches count as pending.
    """

    def __init__(self, result_set: "ResultSet"):
        self._result_set = result_set

    def has_more_results(self) -> bool:
        done = self._result_set.done
        return done is None or not done.done() or not self._result_set.stream.empty()

    def _next_batch(self):
        # one() returns as soon as a batch is queued; the response is only
        # complete once the receive task finishes
        batch = self._result_set.one()
        self._result_set.done.result()
        return batch

    async def fetch_next_batch(self) -> Sequence[dict[str, Any]]:
        batch = await asyncio.to_thread(self._next_batch)
        return list(batch or [])


class AsyncDatabase:
    """Asynchronous connection manager for a Gremlin endpoint.

    Holds one driver client per collection; the collection link is sent as the
    username so every command is scoped to it.

    Usage:
        async with AsyncDatabase("wss://host:443/", key, "graphdb") as db:
            graph = await db.graph("users")
    """

    def __init__(self, endpoint: str, auth_key: str, database: str, **client_kwargs):
        self._endpoint = endpoint
        self._auth_key = auth_key
        self._database = database
        client_kwargs.setdefault("pool_size", 4)
        client_kwargs.setdefault("message_serializer", serializer.GraphSONSerializersV2d0())
        self._client_kwargs = client_kwargs
        self._clients: dict[Collection, gremlin_client.Client] = {}
        self._lock = threading.Lock()

    @property
    def database(self) -> str:
        return self._database

    def collection(self, name: str) -> Collection:
        return Collection(database=self._database, name=name)

    def _client_for(self, collection: Collection) -> gremlin_client.Client:
        client = self._clients.get(collection)
        if client is not None:
            return client

        with self._lock:
            client = self._clients.get(collection)
            if client is None:
                client = gremlin_client.Client(
                    self._endpoint,
                    "g",
                    username=collection.resource_link,
                    password=self._auth_key,
                    **self._client_kwargs,
                )
                self._clients[collection] = client
                log.info("Opened Gremlin client for %s", collection.resource_link)
        return client

    async def graph(self, name: str) -> "AsyncGraph":
        """Get an AsyncGraph handle for the named collection."""
        from gremlin_orm.graph import AsyncGraph

        collection = self.collection(name)
        await asyncio.to_thread(self._client_for, collection)
        return AsyncGraph(collection=collection, submitter=self)

    async def submit(self, collection: Collection, script: str) -> GremlinResultFeed:
        """Submit a script on the collection's client and return its result feed."""
        client = await asyncio.to_thread(self._client_for, collection)
        future = await asyncio.to_thread(client.submit_async, script)
        result_set = await asyncio.wrap_future(future)
        return GremlinResultFeed(result_set)

    async def close(self) -> None:
        """Close every open client."""
        with self._lock:
            clients = list(self._clients.items())
            self._clients.clear()

        for collection, client in clients:
            await asyncio.to_thread(client.close)
            log.info("Closed Gremlin client for %s", collection.resource_link)

    async def __aenter__(self) -> "AsyncDatabase":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()
