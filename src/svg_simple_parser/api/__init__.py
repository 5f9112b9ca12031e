"""High-level API: never-fail parsing entry points and library adapters."""

from .parser import SVGParser, parse_file, parse_string
from .result import ParseResult

__all__ = [
    "ParseResult",
    "SVGParser",
    "parse_file",
    "parse_string",
]
