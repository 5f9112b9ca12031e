"""Tree to text.

Attributes are always written in ascending key order so the same tree
produces the same text regardless of how its attribute mapping was built.
Values are written verbatim; nothing is escaped, mirroring the parser which
does not unescape.
"""

from typing import Dict, List, Optional, Tuple

from svg_simple_parser.shared import SerializerConfig, get_logger
from svg_simple_parser.tree import Element

INDENT = "  "
LINE = "\r\n"

logger = get_logger(__name__, component="serializer")


def stringify_attributes(attributes: Dict[str, str]) -> str:
    """Render attributes as `` key="value"`` pairs sorted by key."""
    return "".join(f' {key}="{attributes[key]}"' for key in sorted(attributes))


def _traverse(root: Element, indent: str, line: str) -> List[str]:
    parts: List[str] = []
    # (element, depth, closing): closing entries write the end tag
    stack: List[Tuple[Element, int, bool]] = [(root, 0, False)]
    while stack:
        element, depth, closing = stack.pop()
        prefix = indent * depth
        if closing:
            parts.append(f"{prefix}</{element.tag}>{line}")
            continue

        attributes = stringify_attributes(element.attributes)
        if not element.children:
            parts.append(f"{prefix}<{element.tag}{attributes}/>{line}")
            continue

        parts.append(f"{prefix}<{element.tag}{attributes}>{line}")
        stack.append((element, depth, True))
        stack.extend((child, depth + 1, False) for child in reversed(element.children))
    return parts


def serialize(root: Element, config: Optional[SerializerConfig] = None) -> str:
    """Serialize ``root`` according to ``config`` (compact by default)."""
    config = config or SerializerConfig.compact()
    if config.pretty:
        indent, line = config.indent, config.line_terminator
    else:
        indent, line = "", ""

    output = "".join(_traverse(root, indent, line))

    logger.debug(
        "Serialized element tree",
        extra={"root_tag": root.tag, "pretty": config.pretty, "output_length": len(output)},
    )
    return output


def stringify(root: Element) -> str:
    """Compact markup: no whitespace between tags.

    Examples:
        >>> svg = Element.new_with_children(
        ...     "svg", {"version": "1.1"}, [Element.new("rect", {"y": "2", "x": "1"})]
        ... )
        >>> stringify(svg)
        '<svg version="1.1"><rect x="1" y="2"/></svg>'
    """
    return serialize(root, SerializerConfig(pretty=False))


def stringify_pretty(root: Element) -> str:
    """Indented markup: two spaces per level, CRLF after every tag."""
    return serialize(root, SerializerConfig(pretty=True, indent=INDENT, line_terminator=LINE))
