"""Shape definition parser using Lark."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from lark import Lark
from lark.visitors import Transformer

from scanline.de.shapes import (
    Array,
    Enum,
    Field,
    List,
    Map,
    Optional,
    Primitive,
    PrimitiveKind,
    Shape,
    Struct,
    Tuple,
    VariantShape,
)

__all__ = ["PRIMITIVE_NAMES", "ValidationError", "parse"]

_g_parser: Lark | None = None

PRIMITIVE_NAMES: dict[str, Primitive] = {kind.value: Primitive(kind) for kind in PrimitiveKind}
PRIMITIVE_NAMES["usize"] = Primitive(PrimitiveKind.UINT64)
PRIMITIVE_NAMES["isize"] = Primitive(PrimitiveKind.INT64)


class ValidationError(RuntimeError):
    """Raised when shape definitions are inconsistent."""


@dataclass
class _Ref:
    name: str


@dataclass
class _StructDef:
    name: str
    fields: list[tuple[str, Any]]


@dataclass
class _EnumDef:
    name: str
    variants: list[tuple[str, list[Any]]]


@dataclass
class _AliasDef:
    name: str
    type: Any


_Definition = _StructDef | _EnumDef | _AliasDef


class TreeTransformer(Transformer):
    """Transform the parse tree into definitions with unresolved names."""

    def start(self, args: list[Any]) -> list[_Definition]:
        return list(args)

    def struct(self, args: list[Any]) -> _StructDef:
        return _StructDef(name=str(args[0]), fields=args[1:])

    def field(self, args: list[Any]) -> tuple[str, Any]:
        return (str(args[0]), args[1])

    def enum(self, args: list[Any]) -> _EnumDef:
        return _EnumDef(name=str(args[0]), variants=args[1:])

    def variant(self, args: list[Any]) -> tuple[str, list[Any]]:
        return (str(args[0]), args[1:])

    def alias(self, args: list[Any]) -> _AliasDef:
        return _AliasDef(name=str(args[0]), type=args[1])

    def named(self, args: list[Any]) -> Any:
        name = str(args[0])
        if name in PRIMITIVE_NAMES:
            return PRIMITIVE_NAMES[name]
        return _Ref(name)

    def optional(self, args: list[Any]) -> Optional:
        return Optional(inner=args[0])

    def tuple(self, args: list[Any]) -> Tuple:
        return Tuple(elements=tuple(args))

    def array(self, args: list[Any]) -> Array:
        return Array(element=args[0], length=int(args[1]))

    def list(self, args: list[Any]) -> List:
        return List(element=args[0])

    def map(self, args: list[Any]) -> Map:
        return Map(key=args[0], value=args[1])


class _Resolver:
    """Replace name references with the shapes they name."""

    def __init__(self, definitions: list[_Definition]):
        self.definitions = {d.name: d for d in definitions}
        self._resolved: dict[str, Shape] = {}
        self._pending: set[str] = set()

    def definition(self, name: str) -> Shape:
        if name in self._resolved:
            return self._resolved[name]
        if name in self._pending:
            raise ValidationError(f"{name} is defined in terms of itself")

        self._pending.add(name)
        d = self.definitions[name]
        shape: Shape
        if isinstance(d, _StructDef):
            shape = Struct(
                name=d.name,
                fields=tuple(Field(name=n, shape=self.expr(t, d.name)) for n, t in d.fields),
            )
        elif isinstance(d, _EnumDef):
            shape = Enum(
                name=d.name,
                variants=tuple(
                    VariantShape(name=n, elements=tuple(self.expr(t, d.name) for t in types))
                    for n, types in d.variants
                ),
            )
        else:
            shape = self.expr(d.type, d.name)
        self._pending.discard(name)

        self._resolved[name] = shape
        return shape

    def expr(self, expr: Any, owner: str) -> Shape:
        if isinstance(expr, _Ref):
            if expr.name not in self.definitions:
                raise ValidationError(f"{expr.name} is used in {owner}, but not declared")
            return self.definition(expr.name)
        if isinstance(expr, Primitive):
            return expr
        if isinstance(expr, Array):
            return Array(element=self.expr(expr.element, owner), length=expr.length)
        if isinstance(expr, Tuple):
            return Tuple(elements=tuple(self.expr(e, owner) for e in expr.elements))
        if isinstance(expr, Optional):
            return Optional(inner=self.expr(expr.inner, owner))
        if isinstance(expr, List):
            return List(element=self.expr(expr.element, owner))
        if isinstance(expr, Map):
            return Map(key=self.expr(expr.key, owner), value=self.expr(expr.value, owner))
        raise RuntimeError(f"Unexpected type expression {expr!r}")


def validate(definitions: list[_Definition]) -> None:
    """Validate parsed definitions before name resolution."""
    seen: set[str] = set()
    for d in definitions:
        if d.name in PRIMITIVE_NAMES:
            raise ValidationError(f"{d.name} shadows a primitive type")
        if d.name in seen:
            raise ValidationError(f"{d.name} is defined more than once")
        seen.add(d.name)

        if isinstance(d, _StructDef):
            names = [n for n, _ in d.fields]
            kind = "field"
        elif isinstance(d, _EnumDef):
            names = [n for n, _ in d.variants]
            kind = "variant"
        else:
            continue

        for name in names:
            if names.count(name) > 1:
                raise ValidationError(f"{d.name} declares {kind} {name} more than once")


def parse(text: str) -> dict[str, Shape]:
    """Parse shape definitions.

    Returns:
        Resolved shapes keyed by definition name, in declaration order.

    Raises:
        ValidationError: The definitions are inconsistent.
        lark.exceptions.LarkError: The text is not valid syntax.
    """
    global _g_parser

    if not _g_parser:
        with open(f"{os.path.dirname(__file__)}/shapes.lark", encoding="utf-8") as f:
            grammar = f.read()
        _g_parser = Lark(grammar)

    tree = _g_parser.parse(text)
    definitions: list[_Definition] = TreeTransformer().transform(tree)

    validate(definitions)

    resolver = _Resolver(definitions)
    return {d.name: resolver.definition(d.name) for d in definitions}
