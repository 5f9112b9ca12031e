"""Grammar rules for the supported SVG subset.

Informal grammar::

    whitespace   := (' ' | '\\t' | '\\r' | '\\n')*
    attr_value   := '"' char-not-quote* '"' | "'" char-not-squote* "'"
    attribute    := name '=' attr_value
    attr_list    := whitespace (attribute (whitespace attribute)*)? whitespace
    element_head := '<' whitespace tag_name
    single_elem  := element_head attr_list '/>'
    double_elem  := element_head attr_list '>' element* closing_scan '>'
    element      := whitespace (double_elem | single_elem) whitespace
    document     := element*

The closing scan skips everything up to the next ``>`` and does not compare
the closing tag name with the opening one, so ``<a></b>`` is accepted. Text
between child elements is skipped by the same scan.

Commitment points: the attribute list once entered, an attribute once its
name is read, and the body of a double element once its ``>`` matched.
Failures past those points are fatal and are not retried as another
alternative.

``element`` walks nested elements with an explicit stack and reports the
same rule contexts as ``double_element`` and ``single_element``, so deeply
nested documents parse without reaching the interpreter recursion limit.
"""

from typing import Any, Dict, List, NamedTuple, Tuple

from svg_simple_parser.tree import Element

from .combinators import (
    Failure,
    Outcome,
    Parser,
    Success,
    alternative,
    context,
    cut,
    delimited,
    literal,
    many0,
    map_result,
    preceded,
    separated_list0,
    sequence,
    take_until,
    take_while,
    take_while1,
    terminated,
)
from .cursor import Cursor
from .errors import GrammarRule, ParseError

WHITESPACE = " \t\r\n"
QUOTES = "\"'"
_ATTRIBUTE_NAME_STOP = WHITESPACE + QUOTES + "=/<>"


def _is_whitespace(char: str) -> bool:
    return char in WHITESPACE


def _is_tag_char(char: str) -> bool:
    return char.isascii() and char.isalnum()


def _is_attribute_name_char(char: str) -> bool:
    return char not in _ATTRIBUTE_NAME_STOP


def _quoted(quote: str) -> Parser:
    return delimited(
        literal(quote, "opening quote"),
        take_while(lambda char: char != quote),
        literal(quote, "closing quote"),
    )


whitespace = take_while(_is_whitespace)
_space1 = take_while1(_is_whitespace, "whitespace")

attribute_value = context(
    GrammarRule.ATTRIBUTE_VALUE.value,
    alternative(_quoted('"'), _quoted("'")),
)

attribute = context(
    GrammarRule.ATTRIBUTE.value,
    sequence(
        take_while1(_is_attribute_name_char, "attribute name"),
        cut(preceded(literal("=", "'=' after attribute name"), attribute_value)),
    ),
)

attribute_hash = context(
    GrammarRule.ATTRIBUTE_HASH.value,
    preceded(
        whitespace,
        cut(terminated(map_result(separated_list0(_space1, attribute), dict), whitespace)),
    ),
)

element_start = context(
    GrammarRule.ELEMENT_START.value,
    preceded(literal("<"), preceded(whitespace, take_while1(_is_tag_char, "tag name"))),
)


def _build_leaf(parts: Tuple[str, dict]) -> Element:
    tag, attributes = parts
    return Element.new(tag, attributes)


def _build_parent(parts: Tuple[str, dict, List[Element]]) -> Element:
    tag, attributes, children = parts
    return Element.new_with_children(tag, attributes, children)


single_element = context(
    GrammarRule.SINGLE_ELEMENT.value,
    map_result(
        sequence(element_start, terminated(attribute_hash, literal("/>"))),
        _build_leaf,
    ),
)

_closing_scan = terminated(take_until(">", "'>' closing the element"), literal(">"))
_element_head = sequence(element_start, attribute_hash)
_self_closing = literal("/>")
_body_open = literal(">")


class _OpenElement(NamedTuple):
    """A double element whose children are still being parsed."""

    start: Cursor  # before leading whitespace
    head: Cursor   # at '<'
    body: Cursor   # just past '>'
    tag: str
    attributes: Dict[str, str]
    children: List[Element]


def _open_element(cursor: Cursor) -> Outcome:
    """Parse a start tag ending in ``/>`` or ``>``.

    The value is ``(tag, attributes, has_body)``. Failures carry the contexts
    the double / single alternative reports: a committed failure inside the
    attribute list belongs to ``double_element``, which is tried first, and
    any other failure to ``single_element``, which is tried last.
    """
    head = _element_head(cursor)
    if isinstance(head, Failure):
        rule = GrammarRule.DOUBLE_ELEMENT if head.fatal else GrammarRule.SINGLE_ELEMENT
        return head.in_context(rule.value, cursor)

    tag, attributes = head.value
    opened = _body_open(head.cursor)
    if isinstance(opened, Success):
        return Success(opened.cursor, (tag, attributes, True))
    closed = _self_closing(head.cursor)
    if isinstance(closed, Failure):
        return closed.in_context(GrammarRule.SINGLE_ELEMENT.value, cursor)
    return Success(closed.cursor, (tag, attributes, False))


def _unwind(failure: Failure, open_elements: List[_OpenElement]) -> Failure:
    """Add the contexts of every enclosing element, innermost first."""
    for parent in reversed(open_elements):
        failure = (
            failure.in_context(GrammarRule.ELEMENT_LIST.value, parent.body)
            .in_context(GrammarRule.DOUBLE_ELEMENT.value, parent.head)
            .in_context(GrammarRule.ELEMENT.value, parent.start)
        )
    return failure


def element(cursor: Cursor) -> Outcome:
    """Parse one element with its whole subtree.

    Open double elements are kept on an explicit stack instead of the call
    stack, so nesting depth is limited by the input only.
    """
    open_elements: List[_OpenElement] = []
    while True:
        start = cursor
        head_cursor = whitespace(start).cursor
        opened = _open_element(head_cursor)

        if isinstance(opened, Failure):
            if opened.fatal or not open_elements:
                failure = opened.in_context(GrammarRule.ELEMENT.value, start)
                return _unwind(failure, open_elements)
            # No further child: the innermost open element ends here.
            current = open_elements.pop()
            closing = _closing_scan(start)
            if isinstance(closing, Failure):
                failure = (
                    closing.committed()
                    .in_context(GrammarRule.DOUBLE_ELEMENT.value, current.head)
                    .in_context(GrammarRule.ELEMENT.value, current.start)
                )
                return _unwind(failure, open_elements)
            node = Element.new_with_children(current.tag, current.attributes, current.children)
            cursor = closing.cursor
        else:
            tag, attributes, has_body = opened.value
            if has_body:
                open_elements.append(
                    _OpenElement(start, head_cursor, opened.cursor, tag, attributes, [])
                )
                cursor = opened.cursor
                continue
            node = Element.new(tag, attributes)
            cursor = opened.cursor

        cursor = whitespace(cursor).cursor
        if not open_elements:
            return Success(cursor, node)
        open_elements[-1].children.append(node)


element_list = context(GrammarRule.ELEMENT_LIST.value, many0(element))

double_element = context(
    GrammarRule.DOUBLE_ELEMENT.value,
    map_result(
        sequence(
            element_start,
            terminated(attribute_hash, literal(">")),
            cut(terminated(element_list, _closing_scan)),
        ),
        _build_parent,
    ),
)


def run(parser: Parser, text: str) -> Tuple[str, Any]:
    """Apply ``parser`` to the start of ``text``.

    Returns:
        The unconsumed remainder and the parser's value

    Raises:
        ParseError: The parser failed
    """
    outcome: Outcome = parser(Cursor(text))
    if isinstance(outcome, Failure):
        raise ParseError(outcome)
    return outcome.cursor.remaining, outcome.value


def parse(text: str) -> Tuple[str, Element]:
    """Parse one top-level element.

    Leading whitespace is skipped and trailing whitespace consumed; anything
    after that is returned untouched so callers can decide whether leftover
    input is acceptable.

    Examples:
        >>> remaining, root = parse('<svg version="1.1"><rect width="1"/></svg> tail')
        >>> root.tag, root.children[0].attributes
        ('svg', {'width': '1'})
        >>> remaining
        'tail'

    Raises:
        ParseError: The input does not start with a well-formed element
    """
    return run(element, text)


def parse_all(text: str) -> Tuple[str, List[Element]]:
    """Parse consecutive top-level elements in source order.

    Matches nothing (an empty list) when the input does not start with an
    element; only failures past a commitment point raise.
    """
    return run(element_list, text)
