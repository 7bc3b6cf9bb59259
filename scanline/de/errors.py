"""Errors raised while scanning whitespace separated input."""

from collections.abc import Sequence

__all__ = [
    "ScanError",
    "UnexpectedEof",
    "ParseFailure",
    "UnknownVariant",
    "UnsupportedShape",
    "TrailingData",
]


class ScanError(RuntimeError):
    """Raised when input cannot be deserialized into the requested shape."""


class UnexpectedEof(ScanError):
    """Raised when the input runs out of tokens mid-value."""

    def __init__(self, expected: str | None = None, position: int | None = None) -> None:
        self.expected = expected
        self.position = position

        msg = "unexpected end of input"
        if expected:
            msg += f", expected {expected}"
        if position is not None:
            msg += f" at offset {position}"
        super().__init__(msg)


class ParseFailure(ScanError):
    """Raised when a token does not match the grammar of its primitive kind."""

    def __init__(self, kind: str, token_text: str, position: int) -> None:
        self.kind = kind
        self.token_text = token_text
        self.position = position
        super().__init__(f"invalid {kind} {token_text!r} at offset {position}")


class UnknownVariant(ScanError):
    """Raised when an enum tag matches none of the known variants."""

    def __init__(self, token_text: str, known_variants: Sequence[str], position: int) -> None:
        self.token_text = token_text
        self.known_variants = tuple(known_variants)
        self.position = position

        known = ", ".join(self.known_variants)
        super().__init__(
            f"unknown variant {token_text!r} at offset {position}, expected one of: {known}"
        )


class UnsupportedShape(ScanError):
    """Raised for shapes the format cannot express, such as unbounded containers."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"deserializing {reason} is not supported")


class TrailingData(ScanError):
    """Raised when tokens remain after the top-level value was read."""

    def __init__(self, remaining: int, position: int) -> None:
        self.remaining = remaining
        self.position = position
        super().__init__(
            f"{remaining} trailing token{'s' if remaining != 1 else ''} at offset {position}"
        )
