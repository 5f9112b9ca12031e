"""Parse failure reporting."""

from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .combinators import Failure


class GrammarRule(Enum):
    """Named grammar rules that appear in failure contexts."""

    ATTRIBUTE_VALUE = "attribute_value"
    ATTRIBUTE = "attribute"
    ATTRIBUTE_HASH = "attribute_hash"
    ELEMENT_START = "element_start"
    SINGLE_ELEMENT = "single_element"
    DOUBLE_ELEMENT = "double_element"
    ELEMENT = "element"
    ELEMENT_LIST = "element_list"


class ParseError(Exception):
    """Raised when the input does not match the grammar.

    Attributes:
        failure: The underlying :class:`Failure` value
        expected: Description of what the failing rule wanted to see
        offset: Character offset of the failure
        line: 1-based line of the failure
        column: 1-based column of the failure
        contexts: Names of the enclosing grammar rules, innermost first
        context: Innermost rule name, or None when no named rule was active
        fatal: Whether the failure happened after a commitment point
    """

    def __init__(self, failure: Failure) -> None:
        self.failure = failure
        self.expected = failure.expected
        self.offset = failure.cursor.offset
        self.line, self.column = failure.cursor.line_column()
        self.contexts: Tuple[str, ...] = tuple(label for label, _ in failure.contexts)
        self.context: Optional[str] = self.contexts[0] if self.contexts else None
        self.fatal = failure.fatal
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        where = f" in {self.context}" if self.context else ""
        return (
            f"expected {self.expected}{where} at offset {self.offset} "
            f"(line {self.line}, column {self.column})"
        )

    @property
    def remaining(self) -> str:
        """Input left unconsumed at the point of failure."""
        return self.failure.cursor.remaining

    def has_context(self, rule: GrammarRule) -> bool:
        return rule.value in self.contexts

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to a JSON-friendly dictionary."""
        return {
            "message": str(self),
            "expected": self.expected,
            "context": self.context,
            "contexts": list(self.contexts),
            "position": {"offset": self.offset, "line": self.line, "column": self.column},
            "fatal": self.fatal,
        }
