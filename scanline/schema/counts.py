"""Static token counts for shapes."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum, auto

from scanline.de.shapes import Array, Enum, List, Map, Optional, Primitive, Shape, Struct, Tuple


class CountKind(StrEnum):
    """Classification of how many tokens a shape consumes."""

    FIXED = auto()  # Min == Max
    BOUNDED = auto()  # Depends on the input but has a maximum (enums, optionals)
    UNBOUNDED = auto()  # Contains a list or map, never deserializable


@dataclass(frozen=True)
class TokenCount:
    """Number of tokens a shape consumes."""

    min_tokens: int
    max_tokens: int | None  # None means unbounded
    kind: CountKind

    @property
    def is_fixed(self) -> bool:
        return self.kind == CountKind.FIXED

    @property
    def is_bounded(self) -> bool:
        return self.kind in (CountKind.FIXED, CountKind.BOUNDED)


_ZERO = TokenCount(0, 0, CountKind.FIXED)
_UNBOUNDED = TokenCount(0, None, CountKind.UNBOUNDED)


def _widest(kinds: Iterable[CountKind]) -> CountKind:
    found = set(kinds)
    if CountKind.UNBOUNDED in found:
        return CountKind.UNBOUNDED
    if CountKind.BOUNDED in found:
        return CountKind.BOUNDED
    return CountKind.FIXED


def _total(counts: list[TokenCount]) -> TokenCount:
    """Count for shapes read one after another."""
    if not counts:
        return _ZERO

    total_min = sum(c.min_tokens for c in counts)
    total_max: int | None = 0
    for c in counts:
        if total_max is None or c.max_tokens is None:
            total_max = None
        else:
            total_max += c.max_tokens
    return TokenCount(total_min, total_max, _widest(c.kind for c in counts))


def count_tokens(shape: Shape) -> TokenCount:
    """Calculate how many tokens a value of ``shape`` consumes."""
    if isinstance(shape, Primitive):
        return TokenCount(1, 1, CountKind.FIXED)

    if isinstance(shape, Array):
        elem = count_tokens(shape.element)
        if shape.length == 0:
            return _ZERO if elem.is_bounded else _UNBOUNDED
        max_tokens = elem.max_tokens * shape.length if elem.max_tokens is not None else None
        return TokenCount(elem.min_tokens * shape.length, max_tokens, elem.kind)

    if isinstance(shape, (Tuple, Struct)):
        return _total([count_tokens(child) for child in shape.children()])

    if isinstance(shape, Enum):
        # Tag token plus the payload of whichever variant is named
        payloads = [_total([count_tokens(e) for e in v.elements]) for v in shape.variants]
        if not payloads:
            return TokenCount(1, 1, CountKind.FIXED)

        kind = _widest(p.kind for p in payloads)
        min_tokens = 1 + min(p.min_tokens for p in payloads)
        max_sizes = [p.max_tokens for p in payloads]
        max_tokens: int | None = None
        if all(m is not None for m in max_sizes):
            max_tokens = 1 + max(m for m in max_sizes if m is not None)
        if kind == CountKind.FIXED and min_tokens != max_tokens:
            kind = CountKind.BOUNDED
        return TokenCount(min_tokens, max_tokens, kind)

    if isinstance(shape, Optional):
        inner = count_tokens(shape.inner)
        if not inner.is_bounded:
            return _UNBOUNDED
        return TokenCount(0, inner.max_tokens, CountKind.BOUNDED)

    if isinstance(shape, (List, Map)):
        return _UNBOUNDED

    raise ValueError(f"Unknown shape: {shape!r}")


def count_definitions(definitions: Mapping[str, Shape]) -> dict[str, TokenCount]:
    """Calculate token counts for every named definition."""
    return {name: count_tokens(shape) for name, shape in definitions.items()}
