"""Scanline shape definition language and code generator."""

from .counts import CountKind as CountKind
from .counts import TokenCount as TokenCount
from .counts import count_definitions as count_definitions
from .counts import count_tokens as count_tokens
from .parser import *
from .python import render as render
