"""Shared test fixtures."""

import json
import re
import uuid

import pytest

from gremlin_orm.database import Collection
from gremlin_orm.graph import AsyncGraph
from gremlin_orm.models.vertex import Vertex


# --- Test Model Definitions ---


class User(Vertex):
    __label__ = "user"
    balance: float = 0
    last_payment_date: str | None = None
    last_payment_amount: float = 0
    display_name: str | None = None
    salutation: str | None = None
    email: str | None = None
    mobile_phone: str | None = None
    monthly_payment: float = 0


class Bill(Vertex):
    __label__ = "bill"
    amount: float
    due_date: str | None = None
    display_name: str | None = None
    payment_requested: bool = False
    payor_email: str | None = None


def generate_test_user() -> User:
    return User(
        display_name="Test User One",
        salutation="Test User",
        balance=185,
        email="test.user@example.com",
        monthly_payment=100,
        last_payment_amount=70,
        last_payment_date="12/01/2017",
        mobile_phone="+15555550100",
    )


# --- In-memory store ---


_STRING = r"'((?:[^'\\]|\\.)*)'"
_ADD_VERTEX_RE = re.compile(rf"^g\.addV\({_STRING}\)(.*)$", re.DOTALL)
_SELECT_VERTEX_RE = re.compile(rf"^g\.V\({_STRING}\)(.*)$", re.DOTALL)
_ADD_EDGE_RE = re.compile(rf"^\.addE\({_STRING}\)\.to\(g\.V\({_STRING}\)\)$")
_PROPERTY_RE = re.compile(rf"\.property\({_STRING}, ('(?:[^'\\]|\\.)*'|[^)]*)\)")


_ESCAPES = {"n": "\n", "r": "\r", "t": "\t"}


def _unescape_match(m) -> str:
    escaped = m.group(1)
    if escaped.startswith("u") and len(escaped) == 5:
        return chr(int(escaped[1:], 16))
    return _ESCAPES.get(escaped, escaped)


def _unescape(s: str) -> str:
    return re.sub(r"\\(u[0-9a-fA-F]{4}|.)", _unescape_match, s)


def _parse_literal(literal: str):
    if literal.startswith("'"):
        return _unescape(literal[1:-1])
    return json.loads(literal)


class FakeResultFeed:
    """Result feed over a fixed list of batches."""

    def __init__(self, batches):
        self._batches = list(batches)
        self.fetches = 0

    def has_more_results(self) -> bool:
        return bool(self._batches)

    async def fetch_next_batch(self):
        self.fetches += 1
        return self._batches.pop(0)


class FakeGraphStore:
    """In-memory stand-in for a Gremlin endpoint.

    Understands only the command shapes gremlin-orm emits and answers in the
    store's vertex document format.
    """

    def __init__(self):
        self.vertices: dict[str, dict] = {}
        self.edges: list[dict] = []
        self.scripts: list[str] = []

    async def submit(self, collection, script):
        self.scripts.append(script)
        return FakeResultFeed([self._execute(script)])

    def _execute(self, script: str) -> list[dict]:
        m = _ADD_VERTEX_RE.match(script)
        if m:
            vertex = {
                "id": str(uuid.uuid4()),
                "label": _unescape(m.group(1)),
                "type": "vertex",
                "properties": {},
            }
            self._set_properties(vertex, m.group(2))
            self.vertices[vertex["id"]] = vertex
            return [json.loads(json.dumps(vertex))]

        m = _SELECT_VERTEX_RE.match(script)
        if not m:
            raise ValueError(f"Unsupported script: {script}")

        vertex_id, rest = _unescape(m.group(1)), m.group(2)
        vertex = self.vertices.get(vertex_id)

        if rest == ".drop()":
            self.vertices.pop(vertex_id, None)
            return []

        edge_match = _ADD_EDGE_RE.match(rest)
        if edge_match:
            target_id = _unescape(edge_match.group(2))
            if vertex is None or target_id not in self.vertices:
                return []
            edge = {
                "id": str(uuid.uuid4()),
                "label": _unescape(edge_match.group(1)),
                "type": "edge",
                "inV": target_id,
                "outV": vertex_id,
            }
            self.edges.append(edge)
            return [dict(edge)]

        if vertex is None:
            return []
        self._set_properties(vertex, rest)
        return [json.loads(json.dumps(vertex))]

    @staticmethod
    def _set_properties(vertex: dict, clauses: str) -> None:
        for name, literal in _PROPERTY_RE.findall(clauses):
            vertex["properties"][_unescape(name)] = [
                {"id": str(uuid.uuid4()), "value": _parse_literal(literal)}
            ]


# --- Fixtures ---


@pytest.fixture
def collection():
    return Collection(database="graphdb", name="users")


@pytest.fixture
def store():
    return FakeGraphStore()


@pytest.fixture
def graph(collection, store):
    return AsyncGraph(collection=collection, submitter=store)


@pytest.fixture
def user():
    return generate_test_user()
