"""gremlin-orm: typed vertex models over a Gremlin property-graph store."""

from .models import Vertex, VertexField, vertex_fields
from .converters import ConverterCache, PropertyCodec, VertexProperty, converters, get_codec
from .commands import to_create_command, to_update_command
from .executor import QuerySubmitter, ResultFeed, submit_with_single_result
from .graph import AsyncGraph
from .database import AsyncDatabase, Collection

__version__ = "0.1.0"

__all__ = [
    "Vertex",
    "VertexField",
    "vertex_fields",
    "ConverterCache",
    "PropertyCodec",
    "VertexProperty",
    "converters",
    "get_codec",
    "to_create_command",
    "to_update_command",
    "QuerySubmitter",
    "ResultFeed",
    "submit_with_single_result",
    "AsyncGraph",
    "AsyncDatabase",
    "Collection",
]
