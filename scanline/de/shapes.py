"""Shape descriptors consumed by the deserializer.

A descriptor states how many tokens a value takes and how they group:
field order for structs, arity for tuples and arrays, the variant table for
enums. Each descriptor walks itself through a Deserializer, calling the
``deserialize_*`` method that matches its kind.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import TYPE_CHECKING, Any

from dataclasses_json import DataClassJsonMixin

if TYPE_CHECKING:
    from .deserializer import Deserializer
    from .visitor import Visitor

__all__ = [
    "PrimitiveKind",
    "Primitive",
    "Array",
    "Tuple",
    "Field",
    "Struct",
    "VariantShape",
    "Enum",
    "Optional",
    "List",
    "Map",
    "Shape",
    "walk",
    "find_unbounded",
    "BOOL",
    "INT8",
    "INT16",
    "INT32",
    "INT64",
    "UINT8",
    "UINT16",
    "UINT32",
    "UINT64",
    "FLOAT32",
    "FLOAT64",
    "CHAR",
    "STRING",
    "ANY",
]


class PrimitiveKind(StrEnum):
    """Primitive kinds, each decoded from exactly one token."""

    BOOL = auto()
    INT8 = auto()
    INT16 = auto()
    INT32 = auto()
    INT64 = auto()
    UINT8 = auto()
    UINT16 = auto()
    UINT32 = auto()
    UINT64 = auto()
    FLOAT32 = auto()
    FLOAT64 = auto()
    CHAR = auto()
    STRING = auto()
    ANY = auto()  # kind picked from the token text


@dataclass(frozen=True)
class Primitive(DataClassJsonMixin):
    """A single-token value."""

    kind: PrimitiveKind

    def children(self) -> tuple[Shape, ...]:
        return ()

    def deserialize(self, de: Deserializer, visitor: Visitor) -> Any:
        return de.deserialize_primitive(self.kind, visitor)

    def __str__(self) -> str:
        return self.kind.value


@dataclass(frozen=True)
class Array(DataClassJsonMixin):
    """A sequence of exactly ``length`` elements of one shape."""

    element: Shape
    length: int

    def children(self) -> tuple[Shape, ...]:
        return (self.element,)

    def deserialize(self, de: Deserializer, visitor: Visitor) -> Any:
        return de.deserialize_array(self, visitor)

    def __str__(self) -> str:
        return f"[{self.element}; {self.length}]"


@dataclass(frozen=True)
class Tuple(DataClassJsonMixin):
    """An ordered group of differently shaped elements. ``()`` is the unit."""

    elements: tuple[Shape, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "elements", tuple(self.elements))

    def children(self) -> tuple[Shape, ...]:
        return self.elements

    def deserialize(self, de: Deserializer, visitor: Visitor) -> Any:
        return de.deserialize_tuple(self, visitor)

    def __str__(self) -> str:
        return "(" + ", ".join(str(e) for e in self.elements) + ")"


@dataclass(frozen=True)
class Field(DataClassJsonMixin):
    """A named struct member."""

    name: str
    shape: Shape


@dataclass(frozen=True)
class Struct(DataClassJsonMixin):
    """Named fields read in declaration order. Field names never appear in the input."""

    name: str
    fields: tuple[Field, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def children(self) -> tuple[Shape, ...]:
        return tuple(f.shape for f in self.fields)

    def deserialize(self, de: Deserializer, visitor: Visitor) -> Any:
        return de.deserialize_struct(self, visitor)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class VariantShape(DataClassJsonMixin):
    """One enum variant: a unit variant when ``elements`` is empty."""

    name: str
    elements: tuple[Shape, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "elements", tuple(self.elements))

    @property
    def is_unit(self) -> bool:
        return not self.elements

    @property
    def arity(self) -> int:
        return len(self.elements)

    def __str__(self) -> str:
        if self.is_unit:
            return self.name
        return self.name + "(" + ", ".join(str(e) for e in self.elements) + ")"


@dataclass(frozen=True)
class Enum(DataClassJsonMixin):
    """A tag token naming one variant, followed by that variant's payload.

    Variant names are expected to be unique; the first match in declaration
    order wins.
    """

    name: str
    variants: tuple[VariantShape, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "variants", tuple(self.variants))

    @property
    def variant_names(self) -> tuple[str, ...]:
        return tuple(v.name for v in self.variants)

    def children(self) -> tuple[Shape, ...]:
        return tuple(e for v in self.variants for e in v.elements)

    def deserialize(self, de: Deserializer, visitor: Visitor) -> Any:
        return de.deserialize_enum(self, visitor)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Optional(DataClassJsonMixin):
    """The inner shape, or nothing when the input is already exhausted."""

    inner: Shape

    def children(self) -> tuple[Shape, ...]:
        return (self.inner,)

    def deserialize(self, de: Deserializer, visitor: Visitor) -> Any:
        return de.deserialize_option(self, visitor)

    def __str__(self) -> str:
        return f"{self.inner}?"


@dataclass(frozen=True)
class List(DataClassJsonMixin):
    """A sequence of unknown length. Never deserializable."""

    element: Shape

    def children(self) -> tuple[Shape, ...]:
        return (self.element,)

    def deserialize(self, de: Deserializer, visitor: Visitor) -> Any:
        return de.deserialize_unbounded(self)

    def __str__(self) -> str:
        return f"[{self.element}]"


@dataclass(frozen=True)
class Map(DataClassJsonMixin):
    """A key/value container of unknown length. Never deserializable."""

    key: Shape
    value: Shape

    def children(self) -> tuple[Shape, ...]:
        return (self.key, self.value)

    def deserialize(self, de: Deserializer, visitor: Visitor) -> Any:
        return de.deserialize_unbounded(self)

    def __str__(self) -> str:
        return f"{{{self.key}: {self.value}}}"


Shape = Primitive | Array | Tuple | Struct | Enum | Optional | List | Map


def walk(shape: Shape) -> Iterator[Shape]:
    """Yield ``shape`` and every shape nested in it, depth first."""
    yield shape
    for child in shape.children():
        yield from walk(child)


def find_unbounded(shape: Shape) -> List | Map | None:
    """Return the first unbounded container inside ``shape``, if any."""
    for sub in walk(shape):
        if isinstance(sub, (List, Map)):
            return sub
    return None


BOOL = Primitive(PrimitiveKind.BOOL)
INT8 = Primitive(PrimitiveKind.INT8)
INT16 = Primitive(PrimitiveKind.INT16)
INT32 = Primitive(PrimitiveKind.INT32)
INT64 = Primitive(PrimitiveKind.INT64)
UINT8 = Primitive(PrimitiveKind.UINT8)
UINT16 = Primitive(PrimitiveKind.UINT16)
UINT32 = Primitive(PrimitiveKind.UINT32)
UINT64 = Primitive(PrimitiveKind.UINT64)
FLOAT32 = Primitive(PrimitiveKind.FLOAT32)
FLOAT64 = Primitive(PrimitiveKind.FLOAT64)
CHAR = Primitive(PrimitiveKind.CHAR)
STRING = Primitive(PrimitiveKind.STRING)
ANY = Primitive(PrimitiveKind.ANY)
