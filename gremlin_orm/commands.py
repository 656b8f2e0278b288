"""Gremlin command builders for vertices and edges.

Builders are pure: they render one command string and never perform I/O.
String literals, ids and labels are escaped with `escape_gremlin_string`.
"""

from __future__ import annotations

from typing import Any

from gremlin_orm.exceptions import CommandBuildError, InvalidArgumentError
from gremlin_orm.models.vertex import ID_FIELD, Vertex, vertex_fields
from gremlin_orm.utils.serialization import format_gremlin_value, quote_gremlin_string


def require_argument(value: Any, name: str) -> Any:
    """Raise `InvalidArgumentError` when `value` is None or a blank string."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidArgumentError(f"{name} is required")
    return value


def build_property_clauses(vertex: Vertex, include_id: bool = False) -> list[str]:
    """Render one ``.property('<name>', <literal>)`` clause per declared field.

    Clauses follow the field declaration order of the vertex type. The
    reserved fields (id, label, type, properties) are skipped; `include_id`
    echoes the id as a settable property ahead of the others.
    """
    values = vertex.model_dump(mode="json", by_alias=True)
    fields = vertex_fields(type(vertex))
    if include_id:
        fields = (ID_FIELD, *fields)

    return [
        f".property({quote_gremlin_string(field.name)}, {format_gremlin_value(values.get(field.name))})"
        for field in fields
    ]


def to_create_command(vertex: Vertex) -> str:
    """Render ``g.addV('<label>')`` followed by the vertex's property clauses.

    The vertex id is never included; the store assigns it.
    """
    require_argument(vertex, "vertex")
    require_argument(vertex.label, "vertex.label")

    try:
        clauses = build_property_clauses(vertex, include_id=False)
        return f"g.addV({quote_gremlin_string(vertex.label)})" + "".join(clauses)
    except Exception as exc:
        raise CommandBuildError(
            f"Failed to convert an instance of {type(vertex).__name__} to a Gremlin add script."
        ) from exc


def to_update_command(vertex: Vertex) -> str:
    """Render ``g.V('<id>')`` followed by the vertex's property clauses.

    Identity comes from the selector, so the id is not repeated as a clause.
    """
    require_argument(vertex, "vertex")
    require_argument(vertex.id, "vertex.id")

    try:
        clauses = build_property_clauses(vertex, include_id=False)
        return to_get_command(vertex.id) + "".join(clauses)
    except Exception as exc:
        raise CommandBuildError(
            f"Failed to convert an instance of {type(vertex).__name__} to a Gremlin update script."
        ) from exc


def to_get_command(vertex_id: str) -> str:
    require_argument(vertex_id, "vertex_id")
    return f"g.V({quote_gremlin_string(vertex_id)})"


def to_drop_command(vertex_id: str) -> str:
    return f"{to_get_command(vertex_id)}.drop()"


def to_add_edge_command(source: Vertex, edge_label: str, target: Vertex) -> str:
    """Render ``g.V('<source>').addE('<label>').to(g.V('<target>'))``.

    Both vertices must already carry ids.
    """
    require_argument(source, "source")
    require_argument(edge_label, "edge_label")
    require_argument(target, "target")
    require_argument(source.id, "source.id")
    require_argument(target.id, "target.id")

    return (
        f"{to_get_command(source.id)}.addE({quote_gremlin_string(edge_label)})"
        f".to({to_get_command(target.id)})"
    )
