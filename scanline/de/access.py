"""Access objects handing the parts of a fixed-arity composite to a visitor.

Every part is decoded from the same cursor, in declared order, when the
visitor asks for it. Parts a visitor leaves behind are decoded and dropped by
``drain`` so a composite always consumes exactly the tokens of its parts.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .deserializer import Deserializer
    from .shapes import Shape, Struct, VariantShape
    from .visitor import Visitor


class SeqAccess:
    """Elements of an array or tuple."""

    def __init__(self, de: Deserializer, shapes: Sequence[Shape]) -> None:
        self._de = de
        self._shapes = tuple(shapes)
        self._next = 0

    def __len__(self) -> int:
        return len(self._shapes)

    @property
    def remaining(self) -> int:
        return len(self._shapes) - self._next

    def next_element(self, visitor: Visitor) -> Any:
        """Decode the next element.

        Raises:
            IndexError: Every element was already decoded.
            UnexpectedEof: The input ran out first.
        """
        if self._next >= len(self._shapes):
            raise IndexError(f"all {len(self._shapes)} elements already decoded")

        shape = self._shapes[self._next]
        self._next += 1
        return self._de.deserialize(shape, visitor)

    def elements(self, visitor: Visitor) -> Iterator[Any]:
        while self.remaining:
            yield self.next_element(visitor)

    def drain(self, visitor: Visitor) -> None:
        for _ in self.elements(visitor):
            pass


class StructAccess:
    """Fields of a struct, in declaration order."""

    def __init__(self, de: Deserializer, struct: Struct) -> None:
        self._names = struct.field_names
        self._seq = SeqAccess(de, struct.children())

    def __len__(self) -> int:
        return len(self._seq)

    @property
    def remaining(self) -> int:
        return self._seq.remaining

    def next_field(self, visitor: Visitor) -> tuple[str, Any]:
        name = self._names[len(self._seq) - self._seq.remaining]
        return name, self._seq.next_element(visitor)

    def fields(self, visitor: Visitor) -> Iterator[tuple[str, Any]]:
        while self.remaining:
            yield self.next_field(visitor)

    def drain(self, visitor: Visitor) -> None:
        self._seq.drain(visitor)


class VariantAccess:
    """The matched variant of an enum and its payload."""

    def __init__(self, de: Deserializer, variant: VariantShape) -> None:
        self.variant = variant
        self._seq = SeqAccess(de, variant.elements)

    @property
    def name(self) -> str:
        return self.variant.name

    @property
    def is_unit(self) -> bool:
        return self.variant.is_unit

    @property
    def arity(self) -> int:
        return self.variant.arity

    def values(self, visitor: Visitor) -> Iterator[Any]:
        return self._seq.elements(visitor)

    def drain(self, visitor: Visitor) -> None:
        self._seq.drain(visitor)
