"""Gremlin literal rendering and vertex hydration from store documents."""

from __future__ import annotations

import json
import math
from typing import Any, TypeVar, TYPE_CHECKING

from gremlin_orm.converters import get_codec
from gremlin_orm.exceptions import InvalidArgumentError
from gremlin_orm.models.vertex import Vertex, vertex_fields

if TYPE_CHECKING:
    from collections.abc import Mapping

V = TypeVar("V", bound=Vertex)


def escape_gremlin_string(s: str) -> str:
    """Escape a string for use inside a single-quoted Gremlin literal.

    Handles backslashes, single quotes, newlines, tabs, carriage returns,
    and control characters (0x00-0x1F).
    """
    if s is None:
        raise InvalidArgumentError("Cannot render None as a Gremlin string literal")
    s = str(s)
    s = s.replace("\\", "\\\\")
    s = s.replace("'", "\\'")
    s = s.replace("\n", "\\n")
    s = s.replace("\r", "\\r")
    s = s.replace("\t", "\\t")
    result = []
    for c in s:
        code = ord(c)
        if code < 0x20:
            result.append(f"\\u{code:04x}")
        else:
            result.append(c)
    return "".join(result)


def quote_gremlin_string(s: Any) -> str:
    return f"'{escape_gremlin_string(s)}'"


def format_gremlin_value(val: Any) -> str:
    """Format a JSON-compatible value as a Gremlin literal.

    Booleans render as lowercase ``true``/``false``, numbers as bare numerals,
    None as ``null`` and lists as bracketed literals. Everything else is
    rendered as a single-quoted string of its text form.
    """
    if val is None:
        return "null"
    elif isinstance(val, bool):
        return "true" if val else "false"
    elif isinstance(val, int):
        return str(val)
    elif isinstance(val, float):
        if not math.isfinite(val):
            return "null"
        return str(val)
    elif isinstance(val, (list, tuple)):
        items = ", ".join(format_gremlin_value(v) for v in val)
        return f"[{items}]"
    elif isinstance(val, dict):
        return quote_gremlin_string(json.dumps(val))
    else:
        return quote_gremlin_string(val)


# --- Store document hydration ---


def parse_vertex_envelope(document: "Mapping[str, Any] | str | bytes") -> Vertex:
    """First decode pass: read the vertex envelope (id, label, type, properties).

    The raw document is re-encoded as JSON before validation so driver-specific
    mapping types are normalised.
    """
    if isinstance(document, (str, bytes)):
        text = document
    else:
        text = json.dumps(document, default=str)
    return Vertex.model_validate(json.loads(text))


def decode_vertex_properties(properties: "Mapping[str, Any]", model_class: type[Vertex]) -> dict[str, Any]:
    """Second decode pass: unwrap the multi-value properties bag into scalars.

    Only the declared fields of `model_class` are read, keyed by their wire
    names. Tokens that do not have the multi-value shape are skipped.
    """
    values: dict[str, Any] = {}
    for field in vertex_fields(model_class):
        if field.name not in properties:
            continue
        value = get_codec(field.annotation).decode(properties[field.name])
        if value is not None:
            values[field.attr] = value
    return values


def document_to_vertex(document: "Mapping[str, Any] | str | bytes", model_class: type[V]) -> V:
    """Hydrate a typed vertex from a raw store document.

    The returned instance is marked persisted and carries no properties bag.
    """
    envelope = parse_vertex_envelope(document)

    data: dict[str, Any] = {"id": envelope.id, "label": envelope.label}
    if envelope.properties:
        data.update(decode_vertex_properties(envelope.properties, model_class))

    instance = model_class.model_validate(data)
    instance.mark_persisted()
    return instance
