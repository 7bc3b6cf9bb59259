"""Scanline - deserialize whitespace separated text into typed values."""

from importlib.metadata import PackageNotFoundError, version

from .de import *

try:
    __version__ = version("scanline")
except PackageNotFoundError:
    __version__ = "(local)"
