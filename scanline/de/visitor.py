"""Visitor protocol answered by the deserializer, and the default value builder."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .access import SeqAccess, StructAccess, VariantAccess


@dataclass(frozen=True)
class Variant:
    """A decoded enum value: the variant name and its payload."""

    name: str
    values: tuple[Any, ...] = ()

    @property
    def is_unit(self) -> bool:
        return not self.values


class Visitor:
    """Builds values from the callbacks the deserializer makes.

    There is one callback per primitive width and per composite kind. The
    width-specific integer and float callbacks forward to ``visit_int`` and
    ``visit_float``, so a subclass may handle them all at once. Composite
    callbacks receive an access object that decodes the parts on demand.
    """

    def _unsupported(self, what: str) -> Any:
        raise NotImplementedError(f"{type(self).__name__} does not accept {what}")

    def visit_bool(self, value: bool) -> Any:
        return self._unsupported("bool")

    def visit_int(self, value: int) -> Any:
        return self._unsupported("integers")

    def visit_int8(self, value: int) -> Any:
        return self.visit_int(value)

    def visit_int16(self, value: int) -> Any:
        return self.visit_int(value)

    def visit_int32(self, value: int) -> Any:
        return self.visit_int(value)

    def visit_int64(self, value: int) -> Any:
        return self.visit_int(value)

    def visit_uint8(self, value: int) -> Any:
        return self.visit_int(value)

    def visit_uint16(self, value: int) -> Any:
        return self.visit_int(value)

    def visit_uint32(self, value: int) -> Any:
        return self.visit_int(value)

    def visit_uint64(self, value: int) -> Any:
        return self.visit_int(value)

    def visit_float(self, value: float) -> Any:
        return self._unsupported("floats")

    def visit_float32(self, value: float) -> Any:
        return self.visit_float(value)

    def visit_float64(self, value: float) -> Any:
        return self.visit_float(value)

    def visit_char(self, value: str) -> Any:
        return self._unsupported("char")

    def visit_str(self, value: str) -> Any:
        return self._unsupported("strings")

    def visit_none(self) -> Any:
        return self._unsupported("absent optionals")

    def visit_seq(self, access: SeqAccess) -> Any:
        return self._unsupported("arrays")

    def visit_tuple(self, access: SeqAccess) -> Any:
        return self._unsupported("tuples")

    def visit_struct(self, name: str, access: StructAccess) -> Any:
        return self._unsupported("structs")

    def visit_enum(self, name: str, access: VariantAccess) -> Any:
        return self._unsupported("enums")


class ValueVisitor(Visitor):
    """Build plain Python values.

    Arrays become lists, tuples stay tuples, structs become dicts and enums
    become ``Variant`` instances, unless ``factories`` maps the struct or enum
    name to a callable. Struct factories are called with the fields as keyword
    arguments; enum factories with ``(variant_name, values)``.
    """

    def __init__(self, factories: Mapping[str, Callable[..., Any]] | None = None) -> None:
        self.factories = dict(factories or {})

    def visit_bool(self, value: bool) -> Any:
        return value

    def visit_int(self, value: int) -> Any:
        return value

    def visit_float(self, value: float) -> Any:
        return value

    def visit_char(self, value: str) -> Any:
        return value

    def visit_str(self, value: str) -> Any:
        return value

    def visit_none(self) -> Any:
        return None

    def visit_seq(self, access: SeqAccess) -> Any:
        return list(access.elements(self))

    def visit_tuple(self, access: SeqAccess) -> Any:
        return tuple(access.elements(self))

    def visit_struct(self, name: str, access: StructAccess) -> Any:
        fields = dict(access.fields(self))
        factory = self.factories.get(name)
        if factory is None:
            return fields
        return factory(**fields)

    def visit_enum(self, name: str, access: VariantAccess) -> Any:
        values = tuple(access.values(self))
        factory = self.factories.get(name)
        if factory is None:
            return Variant(access.name, values)
        return factory(access.name, values)
