"""Split raw text into whitespace separated tokens."""

import re
from dataclasses import dataclass

_TOKEN_RE = re.compile(r"\S+")


@dataclass(frozen=True, slots=True)
class Token:
    """A maximal run of non-whitespace characters and where it starts."""

    text: str
    offset: int
    index: int


def tokenize(text: str) -> tuple[Token, ...]:
    """Split text on runs of whitespace.

    Leading and trailing whitespace is dropped, so empty or all-whitespace
    text yields no tokens. Newlines are plain whitespace.
    """
    return tuple(
        Token(text=match.group(), offset=match.start(), index=index)
        for index, match in enumerate(_TOKEN_RE.finditer(text))
    )
