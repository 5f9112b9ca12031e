"""Small parser-combinator toolkit.

A parser is any callable taking a :class:`Cursor` and returning either a
:class:`Success` (new cursor and value) or a :class:`Failure`. Failures are
values, not exceptions: alternatives inspect them to decide whether to try
the next branch.

A failure marked ``fatal`` has passed a commitment point (see :func:`cut`).
Alternation and repetition never swallow fatal failures, they pass them
straight up to the caller.
"""

from dataclasses import dataclass, replace
from typing import Any, Callable, List, NamedTuple, Optional, Tuple, Union

from .cursor import Cursor


class Success(NamedTuple):
    """A parser matched; ``cursor`` points just past the consumed text."""

    cursor: Cursor
    value: Any


@dataclass(frozen=True)
class Failure:
    """A parser did not match at ``cursor``.

    ``contexts`` lists ``(rule_name, start_offset)`` pairs, innermost first,
    added by :func:`context` as the failure travels up through named rules.
    """

    cursor: Cursor
    expected: str
    contexts: Tuple[Tuple[str, int], ...] = ()
    fatal: bool = False

    def in_context(self, label: str, start: Cursor) -> "Failure":
        return replace(self, contexts=self.contexts + ((label, start.offset),))

    def committed(self) -> "Failure":
        return self if self.fatal else replace(self, fatal=True)


Outcome = Union[Success, Failure]
Parser = Callable[[Cursor], Outcome]


def literal(text: str, expected: Optional[str] = None) -> Parser:
    """Match ``text`` exactly."""
    description = expected or repr(text)

    def parse(cursor: Cursor) -> Outcome:
        if cursor.startswith(text):
            return Success(cursor.advance(len(text)), text)
        return Failure(cursor, description)

    return parse


def take_while(predicate: Callable[[str], bool]) -> Parser:
    """Consume characters while ``predicate`` holds; may match nothing."""
    def parse(cursor: Cursor) -> Outcome:
        text = cursor.text
        end = cursor.offset
        while end < len(text) and predicate(text[end]):
            end += 1
        return Success(Cursor(text, end), text[cursor.offset:end])

    return parse


def take_while1(predicate: Callable[[str], bool], expected: str) -> Parser:
    """Like :func:`take_while` but at least one character must match."""
    scan = take_while(predicate)

    def parse(cursor: Cursor) -> Outcome:
        outcome = scan(cursor)
        if not outcome.value:
            return Failure(cursor, expected)
        return outcome

    return parse


def take_until(needle: str, expected: Optional[str] = None) -> Parser:
    """Consume everything before the next ``needle`` (not the needle itself)."""
    description = expected or repr(needle)

    def parse(cursor: Cursor) -> Outcome:
        index = cursor.find(needle)
        if index < 0:
            return Failure(cursor.advance(len(cursor.text) - cursor.offset), description)
        return Success(Cursor(cursor.text, index), cursor.text[cursor.offset:index])

    return parse


def char_in(chars: str, expected: Optional[str] = None) -> Parser:
    """Match a single character from ``chars``."""
    description = expected or f"one of {chars!r}"

    def parse(cursor: Cursor) -> Outcome:
        char = cursor.peek()
        if char is not None and char in chars:
            return Success(cursor.advance(1), char)
        return Failure(cursor, description)

    return parse


def map_result(parser: Parser, transform: Callable[[Any], Any]) -> Parser:
    """Apply ``transform`` to the value of a successful match."""
    def parse(cursor: Cursor) -> Outcome:
        outcome = parser(cursor)
        if isinstance(outcome, Failure):
            return outcome
        return Success(outcome.cursor, transform(outcome.value))

    return parse


def sequence(*parsers: Parser) -> Parser:
    """Run parsers one after another; the value is a tuple of their values."""
    def parse(cursor: Cursor) -> Outcome:
        values = []
        current = cursor
        for parser in parsers:
            outcome = parser(current)
            if isinstance(outcome, Failure):
                return outcome
            current = outcome.cursor
            values.append(outcome.value)
        return Success(current, tuple(values))

    return parse


def preceded(first: Parser, second: Parser) -> Parser:
    """Match both, keep the value of ``second``."""
    return map_result(sequence(first, second), lambda values: values[1])


def terminated(first: Parser, second: Parser) -> Parser:
    """Match both, keep the value of ``first``."""
    return map_result(sequence(first, second), lambda values: values[0])


def delimited(opening: Parser, body: Parser, closing: Parser) -> Parser:
    """Match all three, keep the value of ``body``."""
    return map_result(sequence(opening, body, closing), lambda values: values[1])


def alternative(*parsers: Parser) -> Parser:
    """Return the first successful branch.

    If every branch fails, the failure that got furthest into the input is
    reported (the later branch on a tie). A fatal failure ends the search
    immediately.
    """
    def parse(cursor: Cursor) -> Outcome:
        best: Optional[Failure] = None
        for parser in parsers:
            outcome = parser(cursor)
            if isinstance(outcome, Success) or outcome.fatal:
                return outcome
            if best is None or outcome.cursor.offset >= best.cursor.offset:
                best = outcome
        if best is None:
            return Failure(cursor, "an alternative")
        return best

    return parse


def optional(parser: Parser) -> Parser:
    """Match ``parser`` or nothing; the value is None when nothing matched."""
    def parse(cursor: Cursor) -> Outcome:
        outcome = parser(cursor)
        if isinstance(outcome, Failure) and not outcome.fatal:
            return Success(cursor, None)
        return outcome

    return parse


def many0(parser: Parser) -> Parser:
    """Match ``parser`` zero or more times and collect the values in a list."""
    def parse(cursor: Cursor) -> Outcome:
        values: List[Any] = []
        current = cursor
        while True:
            outcome = parser(current)
            if isinstance(outcome, Failure):
                if outcome.fatal:
                    return outcome
                return Success(current, values)
            if outcome.cursor.offset == current.offset:
                return Failure(current, "input to be consumed by repetition", fatal=True)
            values.append(outcome.value)
            current = outcome.cursor

    return parse


def separated_list0(separator: Parser, parser: Parser) -> Parser:
    """Match zero or more ``parser`` items separated by ``separator``.

    A separator that is not followed by an item is left unconsumed.
    """
    def parse(cursor: Cursor) -> Outcome:
        first = parser(cursor)
        if isinstance(first, Failure):
            return first if first.fatal else Success(cursor, [])

        values = [first.value]
        current = first.cursor
        while True:
            separated = separator(current)
            if isinstance(separated, Failure):
                if separated.fatal:
                    return separated
                break
            item = parser(separated.cursor)
            if isinstance(item, Failure):
                if item.fatal:
                    return item
                break
            values.append(item.value)
            current = item.cursor
        return Success(current, values)

    return parse


def cut(parser: Parser) -> Parser:
    """Commit: any failure of ``parser`` becomes fatal."""
    def parse(cursor: Cursor) -> Outcome:
        outcome = parser(cursor)
        if isinstance(outcome, Failure):
            return outcome.committed()
        return outcome

    return parse


def context(label: str, parser: Parser) -> Parser:
    """Name a rule so failures inside it report where they happened."""
    def parse(cursor: Cursor) -> Outcome:
        outcome = parser(cursor)
        if isinstance(outcome, Failure):
            return outcome.in_context(label, cursor)
        return outcome

    parse.__name__ = label
    return parse
