"""AsyncGraph: vertex CRUD and edge creation against one graph collection."""

from __future__ import annotations

import logging
from typing import Any, TypeVar, TYPE_CHECKING

from gremlin_orm.commands import (
    to_add_edge_command,
    to_create_command,
    to_drop_command,
    to_get_command,
    to_update_command,
    require_argument,
)
from gremlin_orm.exceptions import GraphOperationError
from gremlin_orm.executor import submit_with_single_result
from gremlin_orm.models.vertex import Vertex

if TYPE_CHECKING:
    from gremlin_orm.database import Collection
    from gremlin_orm.executor import QuerySubmitter

log = logging.getLogger(__name__)

V = TypeVar("V", bound=Vertex)


class AsyncGraph:
    """Asynchronous vertex operations on a graph collection.

    Every operation submits exactly one Gremlin script and expects at most
    one result document. Failures are re-raised as `GraphOperationError` with
    the underlying fault chained as ``__cause__``. Task cancellation is not
    wrapped.

    Usage:
        graph = await db.graph("users")
        user = await graph.add_vertex(User(balance=185))
        same = await graph.get_vertex(User, user.id)
    """

    def __init__(self, collection: "Collection", submitter: "QuerySubmitter"):
        self._collection = collection
        self._submitter = submitter

    @property
    def collection(self) -> "Collection":
        return self._collection

    # === Vertex Operations ===

    async def add_vertex(self, vertex: V) -> V:
        """Create a vertex and return the store's copy, including its generated id."""
        require_argument(vertex, "vertex")

        try:
            script = to_create_command(vertex)
            added = await submit_with_single_result(
                self._submitter, self._collection, script, type(vertex)
            )
        except Exception as exc:
            raise GraphOperationError("Failed to add a vertex to the graph.") from exc

        log.info("Added %s vertex: %s", added.label, added.id)
        return added

    async def update_vertex(self, vertex: V) -> V:
        """Write every declared property of an existing vertex.

        Fails when the vertex no longer exists.
        """
        require_argument(vertex, "vertex")

        try:
            script = to_update_command(vertex)
            return await submit_with_single_result(
                self._submitter, self._collection, script, type(vertex)
            )
        except Exception as exc:
            raise GraphOperationError("Failed to update a vertex in the graph.") from exc

    async def delete_vertex(self, vertex_id: str) -> None:
        """Drop a vertex. Dropping a missing vertex is not an error."""
        require_argument(vertex_id, "vertex_id")

        try:
            script = to_drop_command(vertex_id)
            await submit_with_single_result(
                self._submitter, self._collection, script, allow_null_result=True
            )
        except Exception as exc:
            raise GraphOperationError("Failed to delete a vertex from the graph.") from exc

        log.info("Deleted vertex: %s", vertex_id)

    async def get_vertex(self, model_class: type[V], vertex_id: str) -> V | None:
        """Fetch a vertex by id, or None when it does not exist."""
        require_argument(model_class, "model_class")
        require_argument(vertex_id, "vertex_id")

        try:
            script = to_get_command(vertex_id)
            return await submit_with_single_result(
                self._submitter, self._collection, script, model_class, allow_null_result=True
            )
        except Exception as exc:
            raise GraphOperationError("Failed to get a vertex.") from exc

    # === Edge Operations ===

    async def add_edge(self, source: Vertex, edge_label: str, target: Vertex) -> dict[str, Any] | None:
        """Connect two persisted vertices with an edge.

        Returns:
            The raw edge document returned by the store, or None if it
            returned nothing.
        """
        require_argument(source, "source")
        require_argument(edge_label, "edge_label")
        require_argument(target, "target")

        try:
            script = to_add_edge_command(source, edge_label, target)
            edge = await submit_with_single_result(
                self._submitter, self._collection, script, allow_null_result=True
            )
        except Exception as exc:
            raise GraphOperationError("Failed to add an edge to the graph.") from exc

        log.info("Added %s edge: %s -> %s", edge_label, source.id, target.id)
        return edge
