"""Single-result script execution against a Gremlin query engine."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol, TypeVar, TYPE_CHECKING

from gremlin_orm.exceptions import (
    EntityNotFoundError,
    InvalidArgumentError,
    InvalidFeedStateError,
    MultipleResultsError,
    QueryExecutionError,
)
from gremlin_orm.models.vertex import Vertex
from gremlin_orm.utils.serialization import document_to_vertex

if TYPE_CHECKING:
    from gremlin_orm.database import Collection

log = logging.getLogger(__name__)

V = TypeVar("V", bound=Vertex)


class ResultFeed(Protocol):
    """A lazily fetched result collection returned by the query engine."""

    def has_more_results(self) -> bool: ...

    async def fetch_next_batch(self) -> Sequence[dict[str, Any]]: ...


class QuerySubmitter(Protocol):
    """Submits one Gremlin script, scoped to a collection."""

    async def submit(self, collection: "Collection", script: str) -> ResultFeed: ...


async def submit_with_single_result(
    submitter: QuerySubmitter,
    collection: "Collection",
    script: str,
    model_class: type[V] | None = None,
    allow_null_result: bool = False,
) -> V | dict[str, Any] | None:
    """Submit a script that must yield at most one result document.

    Exactly one batch is fetched. An empty batch is an error unless
    `allow_null_result` is set, in which case None is returned. A second
    document, in the batch or still pending on the feed, is always an error.

    Args:
        submitter: The query engine.
        collection: The collection every command is scoped to.
        script: The Gremlin script.
        model_class: Vertex type to hydrate the document into. When None the
            raw document is returned.
        allow_null_result: Treat an empty result as "not found".

    Raises:
        QueryExecutionError: Wrapping the underlying fault as its cause.
    """
    try:
        if submitter is None:
            raise InvalidArgumentError("submitter is required")
        if collection is None:
            raise InvalidArgumentError("collection is required")
        if not script or not script.strip():
            raise InvalidArgumentError("script is required")

        log.debug("Submitting: %s", script)
        feed = await submitter.submit(collection, script)

        if not feed.has_more_results():
            raise InvalidFeedStateError(
                "Cannot execute single-vertex script because has_more_results() is false."
            )

        batch = await feed.fetch_next_batch()
        if not batch:
            if not allow_null_result:
                log.warning("Script returned no results: %s", script)
                raise EntityNotFoundError(
                    "The Gremlin script executed but did not return any results."
                )
            return None

        if len(batch) > 1 or feed.has_more_results():
            log.warning("Script returned more than one result: %s", script)
            raise MultipleResultsError("More than one result was returned from the Gremlin script.")

        document = batch[0]
        if model_class is None:
            return document
        return document_to_vertex(document, model_class)
    except Exception as exc:
        raise QueryExecutionError("Failed to execute a single-result Gremlin query.") from exc
