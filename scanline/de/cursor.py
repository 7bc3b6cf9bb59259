"""Forward-only view over a token sequence."""

from .errors import UnexpectedEof
from .tokenizer import Token


class Cursor:
    """Single-owner position in a token sequence with one token of lookahead."""

    def __init__(self, tokens: tuple[Token, ...], end: int = 0) -> None:
        self._tokens = tokens
        self._index = 0
        # Offset reported once every token is consumed.
        self._end = end

    @property
    def remaining(self) -> int:
        return len(self._tokens) - self._index

    @property
    def position(self) -> int:
        """Offset of the next token, or the end of the source when exhausted."""
        if self._index < len(self._tokens):
            return self._tokens[self._index].offset
        return self._end

    def peek(self) -> Token | None:
        if self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    def advance(self, expected: str | None = None) -> Token:
        """Consume and return the current token.

        Args:
            expected: What the caller is about to decode, used in the error.

        Raises:
            UnexpectedEof: No tokens are left.
        """
        if self._index >= len(self._tokens):
            raise UnexpectedEof(expected, self._end)

        token = self._tokens[self._index]
        self._index += 1
        return token

    def is_exhausted(self) -> bool:
        return self._index >= len(self._tokens)
