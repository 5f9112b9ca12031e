"""SVG Simple Parser.

Parses a well-formed subset of XML/SVG markup into an element tree and
serializes trees back to compact or indented markup.

Progressive API Disclosure:
- Level 1: Core functions - parse(), parse_all(), stringify(), stringify_pretty()
- Level 2: Never-fail functions - parse_string(), parse_file()
- Level 3: Configured parser - SVGParser with ParserConfig
"""

__version__ = "0.1.0"
__author__ = "SVG Simple Parser Team"

# Level 1: core parse / stringify
from .parsing import ParseError, parse, parse_all
from .serialize import stringify, stringify_pretty
from .tree import Element

# Level 2 and 3: result-returning API
from .api import ParseResult, SVGParser, parse_file, parse_string
from .shared.config import ParserConfig, ParsingConfig, SerializerConfig

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: core functions and types
    "Element",
    "ParseError",
    "parse",
    "parse_all",
    "stringify",
    "stringify_pretty",

    # Level 2: never-fail functions
    "parse_string",
    "parse_file",
    "ParseResult",

    # Level 3: configured parser
    "SVGParser",
    "ParserConfig",
    "ParsingConfig",
    "SerializerConfig",
]
