"""Decoders turning a single token into a primitive value."""

import math
import re
import struct
from typing import Any

from .errors import ParseFailure
from .shapes import PrimitiveKind
from .tokenizer import Token

_SIGNED_RE = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_RE = re.compile(r"\+?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?)",
    re.IGNORECASE,
)

# Inclusive (min, max) per integer kind
INTEGER_RANGES: dict[PrimitiveKind, tuple[int, int]] = {
    PrimitiveKind.INT8: (-(2**7), 2**7 - 1),
    PrimitiveKind.INT16: (-(2**15), 2**15 - 1),
    PrimitiveKind.INT32: (-(2**31), 2**31 - 1),
    PrimitiveKind.INT64: (-(2**63), 2**63 - 1),
    PrimitiveKind.UINT8: (0, 2**8 - 1),
    PrimitiveKind.UINT16: (0, 2**16 - 1),
    PrimitiveKind.UINT32: (0, 2**32 - 1),
    PrimitiveKind.UINT64: (0, 2**64 - 1),
}

FLOAT_KINDS = frozenset([PrimitiveKind.FLOAT32, PrimitiveKind.FLOAT64])


def decode_bool(text: str) -> bool:
    if text == "true":
        return True
    if text == "false":
        return False
    raise ValueError(f"not a bool: {text}")


def decode_int(kind: PrimitiveKind, text: str) -> int:
    low, high = INTEGER_RANGES[kind]
    pattern = _SIGNED_RE if low < 0 else _UNSIGNED_RE
    if not pattern.fullmatch(text):
        raise ValueError(f"not an integer: {text}")

    value = int(text)
    if not low <= value <= high:
        raise ValueError(f"{value} out of range for {kind}")
    return value


def decode_float(kind: PrimitiveKind, text: str) -> float:
    if not _FLOAT_RE.fullmatch(text):
        raise ValueError(f"not a float: {text}")

    value = float(text)
    if kind == PrimitiveKind.FLOAT32:
        try:
            value = struct.unpack("=f", struct.pack("=f", value))[0]
        except OverflowError:
            value = math.copysign(math.inf, value)
    return value


def decode_char(text: str) -> str:
    if len(text) != 1:
        raise ValueError(f"not a single character: {text}")
    return text


def sniff(text: str) -> PrimitiveKind:
    """Pick the narrowest kind that accepts ``text``.

    Unsigned integers win over signed ones, then floats, single characters
    and finally strings.
    """
    for kind in (PrimitiveKind.UINT64, PrimitiveKind.INT64):
        try:
            decode_int(kind, text)
        except ValueError:
            continue
        return kind
    if _FLOAT_RE.fullmatch(text):
        return PrimitiveKind.FLOAT64
    if len(text) == 1:
        return PrimitiveKind.CHAR
    return PrimitiveKind.STRING


def decode(kind: PrimitiveKind, token: Token) -> Any:
    """Decode one token as ``kind``.

    Raises:
        ParseFailure: The token text does not match the kind's grammar or range.
    """
    text = token.text
    try:
        if kind == PrimitiveKind.BOOL:
            return decode_bool(text)
        if kind in INTEGER_RANGES:
            return decode_int(kind, text)
        if kind in FLOAT_KINDS:
            return decode_float(kind, text)
        if kind == PrimitiveKind.CHAR:
            return decode_char(text)
        if kind == PrimitiveKind.STRING:
            return text
        if kind == PrimitiveKind.ANY:
            return decode(sniff(text), token)
    except ValueError as e:
        raise ParseFailure(kind.value, text, token.offset) from e

    raise ValueError(f"Unknown primitive kind: {kind}")
