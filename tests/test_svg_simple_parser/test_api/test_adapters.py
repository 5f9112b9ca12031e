"""Tests for the integration adapters."""

import xml.etree.ElementTree as ET
from typing import Any

import pytest

from svg_simple_parser.api.adapters import (
    AdapterMetadata,
    AdapterRegistry,
    AdapterType,
    BeautifulSoupAdapter,
    ElementTreeAdapter,
    IntegrationAdapter,
    LxmlAdapter,
    PandasAdapter,
    get_adapter,
    list_available_adapters,
)
from svg_simple_parser.parsing import parse
from svg_simple_parser.shared import DiagnosticSeverity
from svg_simple_parser.tree import Element

SVG_NS = "http://www.w3.org/2000/svg"


def _sample() -> Element:
    return Element.new_with_children("svg", {"version": "1.1"}, [
        Element.new_with_children("g", {"id": "layer"}, [
            Element.new("circle", {"r": "4"}),
            Element.new("rect", {"width": "10", "height": "5"}),
        ]),
        Element.new("circle", {"r": "8"}),
    ])


class UnavailableAdapter(IntegrationAdapter):
    """Adapter whose target library is never installed."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="unavailable",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="missing-lib",
            description="Never available",
        )

    def is_available(self) -> bool:
        return False

    def _to_target(self, element: Element) -> Any:
        return None

    def _from_target(self, target_data: Any) -> Element:
        return Element.new("unused")


class TestElementTreeAdapter:
    """Test conversion to and from xml.etree.ElementTree."""

    def test_metadata(self):
        """The standard library adapter is always available."""
        adapter = ElementTreeAdapter()

        assert adapter.is_available() is True
        assert adapter.metadata.name == "elementtree"
        assert adapter.metadata.adapter_type == AdapterType.XML_LIBRARY

    def test_to_target(self):
        """Elements become ElementTree elements with the same structure."""
        result = ElementTreeAdapter().to_target(_sample())

        assert result.success is True
        node = result.converted_data
        assert node.tag == "svg"
        assert node.attrib == {"version": "1.1"}
        assert [child.tag for child in node] == ["g", "circle"]
        assert node.find("g/rect").get("width") == "10"
        assert result.metadata["direction"] == "to"

    def test_round_trip(self):
        """Converting there and back gives an equal tree."""
        adapter = ElementTreeAdapter()
        original = _sample()

        back = adapter.from_target(adapter.to_target(original).converted_data)

        assert back.success is True
        assert back.converted_data == original
        assert back.metadata["element_count"] == 5

    def test_from_namespaced_document(self):
        """Namespaces become xmlns attributes where they change."""
        tree = ET.ElementTree(ET.fromstring(
            f'<svg xmlns="{SVG_NS}" xmlns:xlink="http://www.w3.org/1999/xlink">'
            '<circle r="1"/><use xlink:href="#c"/></svg>'
        ))

        result = ElementTreeAdapter().from_target(tree)

        assert result.converted_data == Element.new_with_children("svg", {"xmlns": SVG_NS}, [
            Element.new("circle", {"r": "1"}),
            Element.new("use", {"xlink:href": "#c"}),
        ])

    def test_comments_are_skipped(self):
        """Non-element nodes do not become children."""
        parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
        node = ET.fromstring("<g><!-- note --><rect/></g>", parser=parser)

        result = ElementTreeAdapter().from_target(node)

        assert result.converted_data == Element.new_with_children("g", None, [Element.new("rect")])

    def test_invalid_input_reports_error(self):
        """Unsupported input gives an unsuccessful result instead of raising."""
        result = ElementTreeAdapter(correlation_id="conv-1").from_target("<svg/>")

        assert result.success is False
        assert result.converted_data is None
        assert len(result.errors) == 1
        assert result.diagnostics[0].severity == DiagnosticSeverity.ERROR
        assert result.diagnostics[0].correlation_id == "conv-1"


class TestLxmlAdapter:
    """Test conversion to and from lxml."""

    def test_round_trip_keeps_namespace(self):
        """xmlns attributes become real namespaces and come back."""
        pytest.importorskip("lxml.etree")
        adapter = LxmlAdapter()
        _, original = parse(
            f'<svg version="1.1" xmlns="{SVG_NS}"><circle r="40" fill="red"/></svg>'
        )

        converted = adapter.to_target(original)
        back = adapter.from_target(converted.converted_data)

        assert converted.success is True
        assert converted.converted_data.tag == f"{{{SVG_NS}}}svg"
        assert back.converted_data == original

    def test_from_tree(self):
        """lxml element trees are accepted through getroot."""
        etree = pytest.importorskip("lxml.etree")
        tree = etree.ElementTree(etree.fromstring("<svg><rect x='1'/></svg>"))

        result = LxmlAdapter().from_target(tree)

        assert result.converted_data == Element.new_with_children(
            "svg", None, [Element.new("rect", {"x": "1"})]
        )


class TestBeautifulSoupAdapter:
    """Test conversion to and from BeautifulSoup."""

    def test_to_target(self):
        """Elements become a parsed soup."""
        pytest.importorskip("bs4")

        result = BeautifulSoupAdapter().to_target(_sample())

        assert result.success is True
        assert result.converted_data.find("rect")["width"] == "10"
        assert len(result.converted_data.find_all("circle")) == 2

    def test_round_trip(self):
        """A document converts back to an equal tree."""
        pytest.importorskip("bs4")
        adapter = BeautifulSoupAdapter()
        original = Element.new_with_children("svg", None, [
            Element.new("rect", {"class": "a b", "width": "100"}),
        ])

        back = adapter.from_target(adapter.to_target(original).converted_data)

        assert back.success is True
        assert back.converted_data == original

    def test_document_without_tags(self):
        """A soup with only text cannot become an Element."""
        bs4 = pytest.importorskip("bs4")

        result = BeautifulSoupAdapter().from_target(bs4.BeautifulSoup("text", "html.parser"))

        assert result.success is False
        assert "no elements" in result.errors[0]


class TestPandasAdapter:
    """Test flattening into DataFrames."""

    def test_to_target(self):
        """One row per element in document order."""
        pytest.importorskip("pandas")

        frame = PandasAdapter().to_target(_sample()).converted_data

        assert list(frame["tag"]) == ["svg", "g", "circle", "rect", "circle"]
        assert list(frame["depth"]) == [0, 1, 2, 2, 1]
        assert list(frame["path"])[2] == "/svg/g/circle"
        assert "attr_width" in frame.columns

    def test_round_trip(self):
        """The depth column is enough to rebuild the tree."""
        pytest.importorskip("pandas")
        adapter = PandasAdapter()
        original = _sample()

        back = adapter.from_target(adapter.to_target(original).converted_data)

        assert back.success is True
        assert back.converted_data == original

    def test_subtree_depth_is_relative(self):
        """Depths start at zero for the converted element."""
        pytest.importorskip("pandas")
        subtree = _sample().children[0]

        frame = PandasAdapter().to_target(subtree).converted_data

        assert list(frame["depth"]) == [0, 1, 1]

    def test_multiple_roots_rejected(self):
        """Frames describing a forest cannot be converted."""
        pd = pytest.importorskip("pandas")
        frame = pd.DataFrame([{"tag": "a", "depth": 0}, {"tag": "b", "depth": 0}])

        result = PandasAdapter().from_target(frame)

        assert result.success is False
        assert "more than one root" in result.errors[0]

    def test_empty_frame_rejected(self):
        """An empty frame has nothing to convert."""
        pd = pytest.importorskip("pandas")

        assert PandasAdapter().from_target(pd.DataFrame()).success is False


class TestAdapterRegistry:
    """Test adapter registration and lookup."""

    def test_builtin_adapters_registered(self):
        """The standard library adapter is always listed."""
        names = [metadata.name for metadata in list_available_adapters()]

        assert "elementtree" in names
        assert isinstance(get_adapter("elementtree"), ElementTreeAdapter)

    def test_unknown_adapter(self):
        """Unknown names return None."""
        assert get_adapter("no-such-adapter") is None

    def test_unavailable_adapter_hidden(self):
        """Adapters whose library is missing are neither returned nor listed."""
        registry = AdapterRegistry()
        registry.register(UnavailableAdapter)
        registry.register(ElementTreeAdapter)

        assert registry.get_adapter("unavailable") is None
        assert [m.name for m in registry.list_available_adapters()] == ["elementtree"]

    def test_correlation_id_passed_through(self):
        """get_adapter hands the correlation ID to the instance."""
        adapter = get_adapter("elementtree", correlation_id="req-9")

        assert adapter.correlation_id == "req-9"
