"""Tests for the Element tree: construction, parent links and navigation."""

import gc

import pytest

from svg_simple_parser.tree import Element


@pytest.fixture
def document() -> Element:
    """svg > (g > circle, g > (rect, circle))."""
    return Element.new_with_children("svg", {"version": "1.1"}, [
        Element.new_with_children("g", {"id": "first"}, [
            Element.new("circle", {"r": "4", "fill": "red"}),
        ]),
        Element.new_with_children("g", {"id": "second"}, [
            Element.new("rect", {"width": "10"}),
            Element.new("circle", {"r": "8"}),
        ]),
    ])


class TestElementCreation:
    """Test Element construction and validation."""

    def test_new_creates_leaf(self) -> None:
        """new() builds an element without children."""
        element = Element.new("rect", {"width": "100"})

        assert element.tag == "rect"
        assert element.attributes == {"width": "100"}
        assert element.children == []
        assert element.parent is None

    def test_new_copies_attributes(self) -> None:
        """The caller's attribute mapping is not shared with the element."""
        attributes = {"x": "1"}
        element = Element.new("rect", attributes)
        attributes["y"] = "2"

        assert element.attributes == {"x": "1"}

    def test_new_with_children_preserves_order(self) -> None:
        """Children keep the order they were given in."""
        children = [Element.new("a"), Element.new("b"), Element.new("c")]

        parent = Element.new_with_children("g", None, children)

        assert [child.tag for child in parent.children] == ["a", "b", "c"]
        assert all(child.parent is parent for child in parent.children)

    def test_empty_tag_raises_error(self) -> None:
        """Test that empty tag raises ValueError."""
        with pytest.raises(ValueError, match="Element tag cannot be empty"):
            Element.new("")

    def test_non_string_tag_raises_error(self) -> None:
        """Tags must be strings."""
        with pytest.raises(TypeError):
            Element(42)

    def test_non_element_child_raises_error(self) -> None:
        """Children must be Element instances."""
        with pytest.raises(TypeError, match="Child must be an Element instance"):
            Element.new_with_children("g", None, ["rect"])

    def test_tag_is_immutable(self) -> None:
        """The tag cannot be reassigned after construction."""
        element = Element.new("rect")

        with pytest.raises(AttributeError, match="immutable"):
            element.tag = "circle"
        assert element.tag == "rect"


class TestElementEquality:
    """Structural equality ignores parent links."""

    def test_equal_trees(self) -> None:
        """Trees with the same tags, attributes and children are equal."""
        first = Element.new_with_children("svg", {"a": "1"}, [Element.new("g")])
        second = Element.new_with_children("svg", {"a": "1"}, [Element.new("g")])

        assert first == second

    def test_attribute_insertion_order_irrelevant(self) -> None:
        """Attribute mappings compare as mappings."""
        assert Element.new("r", {"a": "1", "b": "2"}) == Element.new("r", {"b": "2", "a": "1"})

    def test_child_order_matters(self) -> None:
        """Children compare as ordered sequences."""
        first = Element.new_with_children("g", None, [Element.new("a"), Element.new("b")])
        second = Element.new_with_children("g", None, [Element.new("b"), Element.new("a")])

        assert first != second

    def test_parent_not_compared(self, document: Element) -> None:
        """An attached child equals a detached copy of itself."""
        attached = document.children[1].children[0]

        assert attached == Element.new("rect", {"width": "10"})


class TestElementParentLinks:
    """Test parent back-references and cycle protection."""

    def test_add_child_sets_parent(self) -> None:
        """Test adding child element establishes parent-child relationship."""
        parent = Element.new("g")
        child = Element.new("circle")

        parent.add_child(child)

        assert parent.children == [child]
        assert child.parent is parent

    def test_add_children_appends_in_order(self) -> None:
        """add_children extends after existing children."""
        parent = Element.new_with_children("g", None, [Element.new("a")])

        parent.add_children([Element.new("b"), Element.new("c")])

        assert [child.tag for child in parent.children] == ["a", "b", "c"]
        assert parent.children[2].parent is parent

    def test_add_children_is_all_or_nothing(self) -> None:
        """An invalid item leaves the children untouched."""
        parent = Element.new("g")

        with pytest.raises(TypeError):
            parent.add_children([Element.new("a"), "b"])
        assert parent.children == []

    def test_adding_self_is_rejected(self) -> None:
        """An element cannot be its own child."""
        element = Element.new("g")

        with pytest.raises(ValueError, match="cycle"):
            element.add_child(element)

    def test_adding_ancestor_is_rejected(self, document: Element) -> None:
        """An ancestor cannot be appended below its descendant."""
        circle = document.children[0].children[0]

        with pytest.raises(ValueError, match="cycle"):
            circle.add_child(document)

    def test_parent_reference_is_weak(self) -> None:
        """A child does not keep its parent alive."""
        child = Element.new("circle")
        parent = Element.new_with_children("g", None, [child])
        assert child.parent is parent

        del parent
        gc.collect()

        assert child.parent is None

    def test_root_and_ancestors(self, document: Element) -> None:
        """root walks to the top; ancestors yields nearest first."""
        rect = document.children[1].children[0]

        assert rect.root is document
        assert document.root is document
        assert [node.tag for node in rect.ancestors()] == ["g", "svg"]
        assert rect.get_depth() == 2


class TestElementNavigation:
    """Test search and traversal helpers."""

    def test_iter_is_document_order(self, document: Element) -> None:
        """iter() yields self first, then descendants depth-first."""
        assert [node.tag for node in document.iter()] == [
            "svg", "g", "circle", "g", "rect", "circle",
        ]

    def test_find_and_find_all(self, document: Element) -> None:
        """find returns the first descendant, find_all every descendant."""
        assert document.find("circle").attributes["r"] == "4"
        assert [c.attributes["r"] for c in document.find_all("circle")] == ["4", "8"]
        assert document.find("path") is None
        assert document.find("svg") is None

    def test_find_by_attribute(self, document: Element) -> None:
        """Attribute search includes self and can filter on value."""
        assert [node.tag for node in document.find_by_attribute("version")] == ["svg"]
        assert len(document.find_by_attribute("r")) == 2
        assert [n.attributes["r"] for n in document.find_by_attribute("r", "8")] == ["8"]

    def test_attribute_accessors(self, document: Element) -> None:
        """get_attribute and has_attribute read the attribute mapping."""
        assert document.get_attribute("version") == "1.1"
        assert document.get_attribute("width") is None
        assert document.get_attribute("width", "0") == "0"
        assert document.has_attribute("version")
        assert not document.has_attribute("width")

    def test_get_path(self, document: Element) -> None:
        """Paths index repeated sibling tags from 1."""
        second_circle = document.children[1].children[1]

        assert document.get_path() == "/svg"
        assert second_circle.get_path() == "/svg/g[2]/circle"
        assert document.children[0].children[0].get_path() == "/svg/g[1]/circle"

    def test_count(self, document: Element) -> None:
        """count includes the element itself."""
        assert document.count() == 6
        assert Element.new("rect").count() == 1

    def test_to_dict(self) -> None:
        """to_dict only includes children when there are some."""
        tree = Element.new_with_children("svg", {"a": "1"}, [Element.new("g")])

        assert tree.to_dict() == {
            "tag": "svg",
            "attributes": {"a": "1"},
            "children": [{"tag": "g", "attributes": {}}],
        }


class TestElementOwnership:
    """An element has exactly one container and trees stay acyclic."""

    def test_attached_child_cannot_be_reparented(self) -> None:
        """Adding a child that already has a parent raises."""
        first = Element.new("g")
        second = Element.new("g")
        child = Element.new("circle")
        first.add_child(child)

        with pytest.raises(ValueError, match="already has a parent"):
            second.add_child(child)
        assert child.parent is first
        assert second.children == []

    def test_cycle_through_reparenting_is_rejected(self) -> None:
        """Moving a shared node under its own descendant cannot form a cycle."""
        a = Element.new("a")
        b = Element.new("b")
        c = Element.new("c")
        a.add_child(b)

        with pytest.raises(ValueError):
            c.add_child(b)
        with pytest.raises(ValueError, match="cycle"):
            b.add_child(a)
        assert a.children == [b]
        assert b.children == []

    def test_constructor_rejects_attached_children(self) -> None:
        """new_with_children applies the same ownership rule."""
        child = Element.new("rect")
        owner = Element.new_with_children("g", None, [child])

        with pytest.raises(ValueError, match="already has a parent"):
            Element.new_with_children("g", None, [child])
        assert child.parent is owner

    def test_duplicate_child_in_batch_rejected(self) -> None:
        """The same element cannot be listed twice."""
        child = Element.new("rect")
        parent = Element.new("g")

        with pytest.raises(ValueError, match="more than once"):
            parent.add_children([child, child])
        with pytest.raises(ValueError, match="more than once"):
            Element.new_with_children("g", None, [child, child])
        assert parent.children == []
        assert child.parent is None

    def test_children_cannot_be_reassigned(self) -> None:
        """Replacing the children list would bypass parent adoption."""
        element = Element.new_with_children("g", None, [Element.new("a")])

        with pytest.raises(AttributeError, match="cannot be reassigned"):
            element.children = [Element.new("b")]
        assert [child.tag for child in element.children] == ["a"]

    def test_child_of_collected_parent_can_be_adopted(self) -> None:
        """Once the old parent is gone the child is free again."""
        child = Element.new("circle")
        old_parent = Element.new_with_children("g", None, [child])
        del old_parent
        gc.collect()

        new_parent = Element.new("g")
        new_parent.add_child(child)

        assert child.parent is new_parent

    def test_deep_tree_path(self) -> None:
        """Paths of deeply nested elements are built without recursion."""
        leaf = Element.new("circle")
        node = leaf
        keep = []
        for _ in range(3000):
            node = Element.new_with_children("g", None, [node])
            keep.append(node)

        assert leaf.get_path() == "/" + "g/" * 3000 + "circle"
        assert leaf.get_depth() == 3000
