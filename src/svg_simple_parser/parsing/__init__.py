"""Text to tree: cursor, combinators and the grammar built from them.

Key Components:
    parse: Parse one top-level element, returning the remainder and the tree
    parse_all: Parse consecutive top-level elements
    ParseError: Raised with rule context and position when parsing fails
    Cursor, Success, Failure: Building blocks for composing further rules
"""

from .combinators import Failure, Outcome, Parser, Success
from .cursor import Cursor
from .errors import GrammarRule, ParseError
from .grammar import (
    attribute,
    attribute_hash,
    attribute_value,
    double_element,
    element,
    element_list,
    element_start,
    parse,
    parse_all,
    run,
    single_element,
    whitespace,
)

__all__ = [
    "Cursor",
    "Failure",
    "Outcome",
    "Parser",
    "Success",
    "GrammarRule",
    "ParseError",
    "attribute",
    "attribute_hash",
    "attribute_value",
    "double_element",
    "element",
    "element_list",
    "element_start",
    "parse",
    "parse_all",
    "run",
    "single_element",
    "whitespace",
]
