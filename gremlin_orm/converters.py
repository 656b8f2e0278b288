"""Property codecs for the store's multi-value wrapper and the process-wide codec cache.

Every scalar field of a vertex travels on the wire as a one-element array of
``{"id": ..., "value": ...}`` objects. A `PropertyCodec` unwraps that shape into
a scalar of one Python type and wraps a scalar back into it. Codecs are cached
per type in a `ConverterCache`.
"""

from __future__ import annotations

import json
import logging
import threading
import types
from typing import Any, Callable, Generic, TypeVar, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from gremlin_orm.exceptions import PropertyDecodeError

log = logging.getLogger(__name__)

T = TypeVar("T")

ID_KEY = "id"
VALUE_KEY = "value"

# Lax-mode coercion: "185" -> 185.0, "true" -> True, 185 -> "185"
_COERCION_CONFIG = ConfigDict(coerce_numbers_to_str=True)


class VertexProperty(BaseModel, Generic[T]):
    """The wire shape of one scalar field: the property instance id and its value."""

    id: str | None = None
    value: T


def scalar_type(annotation: Any) -> Any:
    """Strip ``Optional[...]`` from a field annotation."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or repr(tp)


class PropertyCodec(Generic[T]):
    """Encodes and decodes one scalar type to and from the multi-value wrapper.

    Stateless apart from the pydantic adapter built for `python_type`, which is
    why each type gets its own instance.
    """

    def __init__(self, python_type: type[T]):
        self.python_type = python_type
        self._adapter: TypeAdapter[T] = TypeAdapter(python_type, config=_COERCION_CONFIG)

    def __repr__(self) -> str:
        return f"PropertyCodec({_type_name(self.python_type)})"

    def coerce(self, raw: Any) -> T:
        """Coerce a raw wire literal into `python_type`.

        Raises:
            PropertyDecodeError: If the value cannot be coerced.
        """
        try:
            return self._adapter.validate_python(raw)
        except ValidationError as exc:
            raise PropertyDecodeError(
                f"Cannot coerce {raw!r} to {_type_name(self.python_type)}"
            ) from exc

    def decode_property(self, token: Any) -> VertexProperty[T] | None:
        """Unwrap ``[{"id": ..., "value": ...}]`` into a `VertexProperty`.

        Returns None when the token does not have the expected shape: not a
        list, first element not an object, or ``id`` and ``value`` are not the
        object's first two keys. A null value decodes to a property whose value
        is None.
        """
        if not isinstance(token, list) or not token:
            return None

        entry = token[0]
        if not isinstance(entry, dict):
            return None

        if list(entry)[:2] != [ID_KEY, VALUE_KEY]:
            return None

        raw_id = entry[ID_KEY]
        raw_value = entry[VALUE_KEY]
        value = None if raw_value is None else self.coerce(raw_value)
        return VertexProperty(id=None if raw_id is None else str(raw_id), value=value)

    def decode(self, token: Any) -> T | None:
        """Unwrap the multi-value token into a scalar, or None when absent."""
        prop = self.decode_property(token)
        return None if prop is None else prop.value

    def decode_json(self, text: str | bytes) -> T | None:
        """Decode the multi-value wrapper from JSON text."""
        try:
            token = json.loads(text)
        except json.JSONDecodeError:
            return None
        return self.decode(token)

    def encode(self, prop: VertexProperty[T]) -> list[dict[str, Any]]:
        """Wrap a property as ``[{"id": ..., "value": ...}]``.

        The value is converted to its JSON-compatible form (bool stays bool,
        numbers stay numbers, dates become ISO strings).
        """
        value = None if prop.value is None else self._adapter.dump_python(prop.value, mode="json")
        return [{ID_KEY: prop.id, VALUE_KEY: value}]

    def encode_json(self, prop: VertexProperty[T]) -> str:
        return json.dumps(self.encode(prop))


class ConverterCache:
    """Maps a scalar type to its `PropertyCodec`, constructing each codec once.

    Hits are served from a plain dict read without locking. A miss takes the
    lock, re-checks, then constructs and inserts while still holding it, so no
    two codecs are ever built for the same type. Entries are never removed.
    """

    def __init__(self, factory: Callable[[Any], PropertyCodec] = PropertyCodec):
        self._factory = factory
        self._codecs: dict[Any, PropertyCodec] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._codecs)

    def __contains__(self, python_type: Any) -> bool:
        return scalar_type(python_type) in self._codecs

    def get_or_create(self, python_type: Any) -> PropertyCodec:
        """Return the codec for `python_type`, building it on first use."""
        key = scalar_type(python_type)

        codec = self._codecs.get(key)
        if codec is not None:
            return codec

        with self._lock:
            codec = self._codecs.get(key)
            if codec is None:
                codec = self._factory(key)
                self._codecs[key] = codec
                log.debug("Created property codec for %s", _type_name(key))
        return codec


converters = ConverterCache()


def get_codec(python_type: Any) -> PropertyCodec:
    """Resolve a codec from the process-wide cache."""
    return converters.get_or_create(python_type)
