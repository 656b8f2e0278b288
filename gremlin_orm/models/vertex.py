"""Vertex model for Gremlin graph vertices."""

from __future__ import annotations

from typing import Any, ClassVar, Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator
from pydantic.alias_generators import to_camel

from gremlin_orm.exceptions import ImmutableIdError

ID_PROPERTY_NAME = "id"
LABEL_PROPERTY_NAME = "label"
TYPE_PROPERTY_NAME = "type"
PROPERTIES_PROPERTY_NAME = "properties"
TYPE_PROPERTY_VALUE = "vertex"

RESERVED_FIELDS = frozenset({
    ID_PROPERTY_NAME,
    LABEL_PROPERTY_NAME,
    TYPE_PROPERTY_NAME,
    PROPERTIES_PROPERTY_NAME,
})


class VertexField(NamedTuple):
    """One declared scalar field of a vertex type.

    `name` is the wire name used in commands and in the store's properties
    bag, `attr` is the Python attribute name.
    """

    name: str
    attr: str
    annotation: Any


ID_FIELD = VertexField(ID_PROPERTY_NAME, ID_PROPERTY_NAME, str)


class Vertex(BaseModel):
    """Base class for graph vertex models.

    Define vertex types by subclassing:

        class User(Vertex):
            __label__ = "user"
            balance: float = 0
            last_payment_date: str | None = None

    Attribute names are snake_case in Python and camelCase on the wire
    (`last_payment_date` is stored as `lastPaymentDate`).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        arbitrary_types_allowed=True,
    )

    __label__: ClassVar[str | None] = None
    __vertex_fields__: ClassVar[tuple[VertexField, ...]] = ()
    _label_registry: ClassVar[dict[str, Any]] = {}

    id: str | None = None
    label: str = Field(frozen=True)
    type: Literal["vertex"] = Field(default=TYPE_PROPERTY_VALUE, frozen=True)
    properties: dict[str, Any] | None = None

    _persisted: bool = PrivateAttr(default=False)

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs):
        super().__pydantic_init_subclass__(**kwargs)
        label = cls.__dict__.get("__label__")
        if label is not None:
            Vertex._label_registry[label] = cls

        # Declaration order, base fields first
        cls.__vertex_fields__ = tuple(
            VertexField(finfo.alias or fname, fname, finfo.annotation)
            for fname, finfo in cls.model_fields.items()
            if fname not in RESERVED_FIELDS
        )

    @model_validator(mode="before")
    @classmethod
    def _default_label(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get(LABEL_PROPERTY_NAME):
            data = {**data, LABEL_PROPERTY_NAME: cls.__label__ or cls.__name__}
        return data

    def __setattr__(self, attr: str, value: Any):
        if attr == ID_PROPERTY_NAME and self._persisted and value != self.id:
            raise ImmutableIdError(
                f"Cannot change the id of persisted vertex {self.id!r} to {value!r}"
            )
        super().__setattr__(attr, value)

    @property
    def is_persisted(self) -> bool:
        """True once this instance was hydrated from a store result."""
        return self._persisted

    def mark_persisted(self) -> None:
        self._persisted = True

    @classmethod
    def registry_lookup(cls, label: str) -> type["Vertex"] | None:
        """Return the vertex subclass registered for `label`, if any."""
        return cls._label_registry.get(label)


def vertex_fields(model_class: type[Vertex]) -> tuple[VertexField, ...]:
    """The ordered, non-reserved fields of a vertex type."""
    return model_class.__vertex_fields__
