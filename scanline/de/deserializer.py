"""Recursive-descent deserializer over whitespace separated tokens."""

import logging
import sys
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Any, TextIO

from .access import SeqAccess, StructAccess, VariantAccess
from .cursor import Cursor
from .errors import TrailingData, UnexpectedEof, UnknownVariant, UnsupportedShape
from .scalars import decode, sniff
from .shapes import (
    Array,
    Enum,
    List,
    Map,
    Optional,
    PrimitiveKind,
    Shape,
    Struct,
    Tuple,
    VariantShape,
    find_unbounded,
)
from .tokenizer import Token, tokenize
from .visitor import ValueVisitor, Visitor

logger = logging.getLogger(__name__)

_VISIT_METHODS: dict[PrimitiveKind, str] = {
    kind: f"visit_{kind.value}" for kind in PrimitiveKind if kind != PrimitiveKind.ANY
}
_VISIT_METHODS[PrimitiveKind.STRING] = "visit_str"


class VariantMatch(StrEnum):
    """How an enum tag token is compared with variant names."""

    EXACT = auto()
    IGNORE_CASE = auto()


@dataclass(frozen=True)
class Options:
    """Per-call deserializer settings."""

    variant_match: VariantMatch = VariantMatch.EXACT


class Deserializer:
    """Answers shape-driven ``deserialize_*`` calls by consuming tokens.

    One instance serves one input string. Shapes call back into it through
    ``Shape.deserialize`` and it calls the visitor once per decoded value.
    """

    def __init__(self, text: str, options: Options | None = None) -> None:
        self.options = options or Options()
        self.cursor = Cursor(tokenize(text), end=len(text))

    def deserialize(self, shape: Shape, visitor: Visitor) -> Any:
        return shape.deserialize(self, visitor)

    def deserialize_primitive(self, kind: PrimitiveKind, visitor: Visitor) -> Any:
        token = self.cursor.advance(kind.value)
        if kind == PrimitiveKind.ANY:
            kind = sniff(token.text)

        value = decode(kind, token)
        logger.debug("%s %r at offset %d", kind.value, value, token.offset)
        return getattr(visitor, _VISIT_METHODS[kind])(value)

    def deserialize_array(self, array: Array, visitor: Visitor) -> Any:
        access = SeqAccess(self, (array.element,) * array.length)
        value = visitor.visit_seq(access)
        access.drain(visitor)
        return value

    def deserialize_tuple(self, tup: Tuple, visitor: Visitor) -> Any:
        access = SeqAccess(self, tup.elements)
        value = visitor.visit_tuple(access)
        access.drain(visitor)
        return value

    def deserialize_struct(self, struct: Struct, visitor: Visitor) -> Any:
        access = StructAccess(self, struct)
        value = visitor.visit_struct(struct.name, access)
        access.drain(visitor)
        return value

    def deserialize_enum(self, enum: Enum, visitor: Visitor) -> Any:
        token = self.cursor.advance(f"{enum.name} variant")
        variant = self._match_variant(enum, token)
        logger.debug("%s variant %s at offset %d", enum.name, variant.name, token.offset)

        access = VariantAccess(self, variant)
        value = visitor.visit_enum(enum.name, access)
        access.drain(visitor)
        return value

    def deserialize_option(self, option: Optional, visitor: Visitor) -> Any:
        if self.cursor.peek() is None:
            return visitor.visit_none()
        return self.deserialize(option.inner, visitor)

    def deserialize_unbounded(self, shape: List | Map) -> Any:
        raise UnsupportedShape(f"unbounded container `{shape}`")

    def end(self) -> None:
        """Fail unless every token was consumed."""
        if not self.cursor.is_exhausted():
            raise TrailingData(self.cursor.remaining, self.cursor.position)

    def _match_variant(self, enum: Enum, token: Token) -> VariantShape:
        if self.options.variant_match == VariantMatch.IGNORE_CASE:
            wanted = token.text.casefold()
            for variant in enum.variants:
                if variant.name.casefold() == wanted:
                    return variant
        else:
            for variant in enum.variants:
                if variant.name == token.text:
                    return variant

        raise UnknownVariant(token.text, enum.variant_names, token.offset)


def _reject_unbounded(shape: Shape) -> None:
    unbounded = find_unbounded(shape)
    if unbounded is not None:
        raise UnsupportedShape(f"unbounded container `{unbounded}`")


def from_str(
    text: str,
    shape: Shape,
    *,
    visitor: Visitor | None = None,
    options: Options | None = None,
) -> Any:
    """Deserialize whitespace separated text into a value of ``shape``.

    Args:
        text: The input; any run of whitespace separates tokens.
        shape: Descriptor of the value to read.
        visitor: Builds the result. Defaults to a plain ``ValueVisitor``.
        options: Deserializer settings.

    Returns:
        Whatever the visitor built for the top-level shape.

    Raises:
        UnsupportedShape: ``shape`` contains a list or map. Checked before
            any input is read.
        ScanError: The input does not fit ``shape``, or has tokens left over.
    """
    _reject_unbounded(shape)

    de = Deserializer(text, options)
    value = de.deserialize(shape, visitor or ValueVisitor())
    de.end()
    return value


def next_line(
    shape: Shape,
    stream: TextIO | None = None,
    *,
    visitor: Visitor | None = None,
    options: Options | None = None,
) -> Any:
    """Read one line from ``stream`` (stdin by default) and deserialize it.

    Raises:
        UnexpectedEof: The stream is at its end.
    """
    _reject_unbounded(shape)

    line = (stream if stream is not None else sys.stdin).readline()
    if not line:
        raise UnexpectedEof("a line of input")
    return from_str(line, shape, visitor=visitor, options=options)
