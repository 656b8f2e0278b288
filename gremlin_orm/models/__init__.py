from .vertex import Vertex, VertexField, vertex_fields

__all__ = ["Vertex", "VertexField", "vertex_fields"]
