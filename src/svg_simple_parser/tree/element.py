"""Element tree for parsed SVG documents.

An :class:`Element` owns its ``children`` list. The way back up is a weak
reference, so a child never keeps its container alive and a detached
subtree simply reports no parent.
"""

import weakref
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional


@dataclass
class Element:
    """A single markup tag with attributes and ordered child elements.

    Equality is structural: tag, attributes and children are compared, the
    parent reference is not. Trees only grow; there is no API to remove
    children or change attributes. An element belongs to at most one
    parent, so attaching an already attached element raises ValueError.

    Examples:
        >>> circle = Element.new("circle", {"r": "40"})
        >>> svg = Element.new_with_children("svg", {"version": "1.1"}, [circle])
        >>> circle.parent is svg
        True
    """

    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["Element"] = field(default_factory=list)
    _parent_ref: Optional["weakref.ReferenceType[Element]"] = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        """Validate the tag and adopt any children passed at construction."""
        if not isinstance(self.tag, str):
            raise TypeError("Element tag must be a string")
        if not self.tag:
            raise ValueError("Element tag cannot be empty")

        children = list(self.children)
        self._check_can_adopt_all(children)
        object.__setattr__(self, "children", children)
        for child in children:
            child._parent_ref = weakref.ref(self)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "tag" and "tag" in self.__dict__:
            raise AttributeError("Element tag is immutable")
        if name == "children" and "children" in self.__dict__:
            raise AttributeError("Element children cannot be reassigned, use add_child")
        super().__setattr__(name, value)

    @classmethod
    def new(cls, tag: str, attributes: Optional[Dict[str, str]] = None) -> "Element":
        """Create a leaf element."""
        return cls(tag, dict(attributes or {}))

    @classmethod
    def new_with_children(
        cls,
        tag: str,
        attributes: Optional[Dict[str, str]],
        children: Iterable["Element"],
    ) -> "Element":
        """Create an element whose children are exactly ``children``, in order."""
        return cls(tag, dict(attributes or {}), list(children))

    @property
    def parent(self) -> Optional["Element"]:
        """Containing element, or None for roots and collected parents."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def root(self) -> "Element":
        """Topmost reachable ancestor (self when there is none)."""
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def ancestors(self) -> Iterator["Element"]:
        """Yield the parent, grandparent and so on up to the root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def _check_can_adopt(self, child: "Element") -> None:
        if not isinstance(child, Element):
            raise TypeError("Child must be an Element instance")
        if child.parent is not None:
            raise ValueError("Element already has a parent")
        # An unattached child is the root of its own tree, so it can only
        # close a cycle by being self or one of self's ancestors.
        if child is self or any(node is child for node in self.ancestors()):
            raise ValueError("Adding this child would create a cycle")

    def _check_can_adopt_all(self, children: List["Element"]) -> None:
        seen = set()
        for child in children:
            self._check_can_adopt(child)
            if id(child) in seen:
                raise ValueError("Element appears more than once in children")
            seen.add(id(child))

    def add_child(self, child: "Element") -> None:
        """Append a child element and point its parent reference here."""
        self._check_can_adopt(child)
        child._parent_ref = weakref.ref(self)
        self.children.append(child)

    def add_children(self, children: Iterable["Element"]) -> None:
        """Append several child elements, preserving their relative order.

        All items are checked before any is appended.
        """
        new_children = list(children)
        self._check_can_adopt_all(new_children)
        for child in new_children:
            child._parent_ref = weakref.ref(self)
        self.children.extend(new_children)

    def iter(self) -> Iterator["Element"]:
        """Iterate over this element and all descendants in document order."""
        stack = [self]
        while stack:
            element = stack.pop()
            yield element
            stack.extend(reversed(element.children))

    def find(self, tag: str) -> Optional["Element"]:
        """Find the first descendant with a matching tag name."""
        return next(
            (element for element in self.iter() if element is not self and element.tag == tag),
            None,
        )

    def find_all(self, tag: str) -> List["Element"]:
        """Find all descendants with a matching tag name."""
        return [
            element for element in self.iter()
            if element is not self and element.tag == tag
        ]

    def find_by_attribute(
        self, name: str, value: Optional[str] = None
    ) -> List["Element"]:
        """Find elements in this subtree (self included) carrying an attribute."""
        return [
            element for element in self.iter()
            if name in element.attributes
            and (value is None or element.attributes[name] == value)
        ]

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value with optional default."""
        return self.attributes.get(name, default)

    def has_attribute(self, name: str) -> bool:
        """Check if element has specific attribute."""
        return name in self.attributes

    def get_depth(self) -> int:
        """Get depth of this element in the tree (root = 0)."""
        return sum(1 for _ in self.ancestors())

    def get_path(self) -> str:
        """Get XPath-like path to this element, e.g. ``/svg/g[2]/circle``."""
        segments = []
        node = self
        parent = node.parent
        while parent is not None:
            siblings = [child for child in parent.children if child.tag == node.tag]
            if len(siblings) > 1:
                position = next(
                    (i for i, sibling in enumerate(siblings) if sibling is node), 0
                ) + 1
                segments.append(f"{node.tag}[{position}]")
            else:
                segments.append(node.tag)
            node, parent = parent, parent.parent
        segments.append(node.tag)
        return "/" + "/".join(reversed(segments))

    def count(self) -> int:
        """Number of elements in this subtree, self included."""
        return sum(1 for _ in self.iter())

    def to_dict(self) -> Dict[str, Any]:
        """Convert element to dictionary representation."""
        result: Dict[str, Any] = {
            "tag": self.tag,
            "attributes": dict(self.attributes),
        }
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result
