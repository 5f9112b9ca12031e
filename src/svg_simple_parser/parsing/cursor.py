"""Immutable position in the input text."""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Cursor:
    """An offset into ``text``.

    Every advance returns a new cursor, so a rule that fails can hand the
    caller's cursor back unchanged and alternatives restart from the same
    place.
    """

    text: str
    offset: int = 0

    def __post_init__(self) -> None:
        """Validate the offset."""
        if not (0 <= self.offset <= len(self.text)):
            raise ValueError("Cursor offset out of range")

    def __repr__(self) -> str:
        preview = self.text[self.offset:self.offset + 20]
        return f"Cursor(offset={self.offset}, next={preview!r})"

    @property
    def remaining(self) -> str:
        """Unconsumed input from this position on."""
        return self.text[self.offset:]

    def at_end(self) -> bool:
        return self.offset >= len(self.text)

    def peek(self) -> Optional[str]:
        """Character at the current position, or None at the end."""
        if self.at_end():
            return None
        return self.text[self.offset]

    def startswith(self, prefix: str) -> bool:
        return self.text.startswith(prefix, self.offset)

    def advance(self, count: int) -> "Cursor":
        """Cursor moved ``count`` characters forward."""
        return Cursor(self.text, self.offset + count)

    def find(self, needle: str) -> int:
        """Absolute index of the next ``needle`` at or after the cursor, or -1."""
        return self.text.find(needle, self.offset)

    def line_column(self) -> Tuple[int, int]:
        """1-based line and column of the current position."""
        line = self.text.count("\n", 0, self.offset) + 1
        line_start = self.text.rfind("\n", 0, self.offset) + 1
        return line, self.offset - line_start + 1
