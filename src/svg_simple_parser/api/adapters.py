"""Conversion between :class:`Element` trees and other XML libraries.

Each adapter converts in both directions and reports the outcome as a
:class:`ConversionResult` instead of raising. Third-party libraries are
imported when an adapter is used, so the core package works without them;
``is_available`` tells whether an adapter can run in this environment.
"""

import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from svg_simple_parser.serialize import stringify
from svg_simple_parser.shared import DiagnosticEntry, DiagnosticSeverity, get_logger
from svg_simple_parser.tree import Element

# Attribute namespaces written back with their conventional prefix
_KNOWN_ATTRIBUTE_NAMESPACES = {
    "http://www.w3.org/1999/xlink": "xlink",
    "http://www.w3.org/XML/1998/namespace": "xml",
}


class AdapterType(Enum):
    """Types of integration adapters."""

    XML_LIBRARY = auto()
    DATA_FRAME = auto()


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    adapter_type: AdapterType
    target_library: str
    description: str
    version: str = "1.0.0"


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    conversion_time_ms: float
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)


def _split_namespace(name: str) -> Tuple[Optional[str], str]:
    """Split ElementTree's ``{uri}local`` notation into ``(uri, local)``."""
    if name.startswith("{") and "}" in name:
        uri, local = name[1:].split("}", 1)
        return uri, local
    return None, name


def _element_from_etree(node: Any, parent_namespace: Optional[str] = None) -> Element:
    """Build an Element from an ElementTree-compatible node.

    Works for both ``xml.etree`` and ``lxml.etree`` nodes. Comments and
    processing instructions (whose ``tag`` is not a string) are skipped.
    Namespaced tags become local names with an ``xmlns`` attribute wherever
    the namespace changes.
    """
    namespace, tag = _split_namespace(node.tag)
    attributes: Dict[str, str] = {}
    if namespace is not None and namespace != parent_namespace:
        attributes["xmlns"] = namespace
    for key, value in node.attrib.items():
        attr_namespace, local = _split_namespace(key)
        prefix = _KNOWN_ATTRIBUTE_NAMESPACES.get(attr_namespace)
        attributes[f"{prefix}:{local}" if prefix else local] = value

    children = [
        _element_from_etree(child, namespace)
        for child in node
        if isinstance(child.tag, str)
    ]
    return Element.new_with_children(tag, attributes, children)


class IntegrationAdapter(ABC):
    """Abstract base class for all integration adapters."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library can be imported."""

    @abstractmethod
    def _to_target(self, element: Element) -> Any:
        """Library-specific conversion from an Element tree."""

    @abstractmethod
    def _from_target(self, target_data: Any) -> Element:
        """Library-specific conversion to an Element tree."""

    def to_target(self, element: Element) -> ConversionResult:
        """Convert an Element tree to the target library's representation."""
        return self._convert(self._to_target, element, "to")

    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert the target library's representation to an Element tree."""
        return self._convert(self._from_target, target_data, "from")

    def _convert(
        self, conversion: Callable[[Any], Any], data: Any, direction: str
    ) -> ConversionResult:
        start_time = time.time()
        try:
            converted = conversion(data)
        except Exception as e:
            processing_time = (time.time() - start_time) * 1000
            self._logger.warning(
                f"Conversion {direction} {self.metadata.target_library} failed: {e}",
                extra={"direction": direction}
            )
            return self._create_error_result(
                f"Failed to convert {direction} {self.metadata.target_library}: {e}",
                data,
                processing_time,
            )

        processing_time = (time.time() - start_time) * 1000
        self._logger.debug(
            f"Converted {direction} {self.metadata.target_library}",
            extra={"direction": direction, "conversion_time_ms": processing_time}
        )
        metadata: Dict[str, Any] = {"direction": direction}
        if isinstance(converted, Element):
            metadata["element_count"] = converted.count()
        return ConversionResult(
            success=True,
            converted_data=converted,
            original_data=data,
            conversion_time_ms=processing_time,
            metadata=metadata,
        )

    def _create_error_result(
        self,
        error_message: str,
        original_data: Any,
        conversion_time_ms: float = 0.0
    ) -> ConversionResult:
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            conversion_time_ms=conversion_time_ms,
            errors=[error_message],
            diagnostics=[
                DiagnosticEntry(
                    severity=DiagnosticSeverity.ERROR,
                    message=error_message,
                    component=self.__class__.__name__,
                    correlation_id=self.correlation_id,
                )
            ],
        )


class ElementTreeAdapter(IntegrationAdapter):
    """Adapter for ``xml.etree.ElementTree`` from the standard library."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="elementtree",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="xml.etree.ElementTree",
            description="Bidirectional conversion between Element and ElementTree",
        )

    def is_available(self) -> bool:
        return True

    def _to_target(self, element: Element) -> Any:
        import xml.etree.ElementTree as ET

        def build(node: Element, parent: Any = None) -> Any:
            if parent is None:
                target = ET.Element(node.tag, dict(node.attributes))
            else:
                target = ET.SubElement(parent, node.tag, dict(node.attributes))
            for child in node.children:
                build(child, target)
            return target

        return build(element)

    def _from_target(self, target_data: Any) -> Element:
        if hasattr(target_data, "getroot"):
            target_data = target_data.getroot()
        if not hasattr(target_data, "attrib"):
            raise TypeError("Target data is not an ElementTree element")
        return _element_from_etree(target_data)


class LxmlAdapter(IntegrationAdapter):
    """Adapter for ``lxml.etree``.

    Elements are handed to lxml as serialized markup so that ``xmlns``
    attributes become real namespace declarations.
    """

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="lxml",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="lxml",
            description="Bidirectional conversion between Element and lxml.etree",
        )

    def is_available(self) -> bool:
        try:
            import lxml.etree  # noqa: F401
            return True
        except ImportError:
            return False

    def _to_target(self, element: Element) -> Any:
        import lxml.etree

        parser = lxml.etree.XMLParser(recover=True)
        return lxml.etree.fromstring(stringify(element).encode("utf-8"), parser)

    def _from_target(self, target_data: Any) -> Element:
        if hasattr(target_data, "getroot"):
            target_data = target_data.getroot()
        if not hasattr(target_data, "attrib"):
            raise TypeError("Target data is not an lxml element")
        return _element_from_etree(target_data)


class BeautifulSoupAdapter(IntegrationAdapter):
    """Adapter for BeautifulSoup documents.

    The default ``html.parser`` builder lowercases tag names; pass
    ``features="xml"`` (requires lxml) to keep mixed-case SVG tags.
    """

    def __init__(
        self, correlation_id: Optional[str] = None, features: str = "html.parser"
    ) -> None:
        super().__init__(correlation_id)
        self.features = features

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="beautifulsoup",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="beautifulsoup4",
            description="Bidirectional conversion between Element and BeautifulSoup",
        )

    def is_available(self) -> bool:
        try:
            import bs4  # noqa: F401
            return True
        except ImportError:
            return False

    def _to_target(self, element: Element) -> Any:
        from bs4 import BeautifulSoup

        return BeautifulSoup(stringify(element), self.features)

    def _from_target(self, target_data: Any) -> Element:
        from bs4 import Tag

        if not isinstance(target_data, Tag):
            raise TypeError("Target data is not a BeautifulSoup tag or document")
        if target_data.name == "[document]":
            target_data = target_data.find(True)
            if target_data is None:
                raise ValueError("BeautifulSoup document contains no elements")

        def build(tag: Any) -> Element:
            attributes = {
                key: " ".join(value) if isinstance(value, list) else value
                for key, value in tag.attrs.items()
            }
            children = [build(child) for child in tag.children if isinstance(child, Tag)]
            return Element.new_with_children(tag.name, attributes, children)

        return build(target_data)


class PandasAdapter(IntegrationAdapter):
    """Adapter flattening a tree into a pandas DataFrame.

    One row per element in document order with ``tag``, ``path`` and
    ``depth`` columns plus an ``attr_<name>`` column per attribute name.
    Converting back rebuilds the tree from the ``depth`` column.
    """

    ATTRIBUTE_PREFIX = "attr_"

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="pandas",
            adapter_type=AdapterType.DATA_FRAME,
            target_library="pandas",
            description="Flatten Element trees into DataFrames and back",
        )

    def is_available(self) -> bool:
        try:
            import pandas  # noqa: F401
            return True
        except ImportError:
            return False

    def _to_target(self, element: Element) -> Any:
        import pandas as pd

        rows = []
        for node in element.iter():
            row: Dict[str, Any] = {
                "tag": node.tag,
                "path": node.get_path(),
                "depth": node.get_depth() - element.get_depth(),
            }
            for name, value in node.attributes.items():
                row[f"{self.ATTRIBUTE_PREFIX}{name}"] = value
            rows.append(row)
        return pd.DataFrame(rows)

    def _from_target(self, target_data: Any) -> Element:
        import pandas as pd

        if not isinstance(target_data, pd.DataFrame):
            raise TypeError("Target data is not a pandas DataFrame")
        if target_data.empty:
            raise ValueError("DataFrame contains no rows")

        attribute_columns = [
            column for column in target_data.columns
            if str(column).startswith(self.ATTRIBUTE_PREFIX)
        ]
        stack: List[Element] = []
        root: Optional[Element] = None
        for _, row in target_data.iterrows():
            attributes = {
                column[len(self.ATTRIBUTE_PREFIX):]: str(row[column])
                for column in attribute_columns
                if pd.notna(row[column])
            }
            node = Element.new(str(row["tag"]), attributes)
            depth = int(row["depth"])
            del stack[depth:]
            if stack:
                stack[-1].add_child(node)
            elif root is None:
                root = node
            else:
                raise ValueError("DataFrame describes more than one root element")
            stack.append(node)
        return root


class AdapterRegistry:
    """Registry for managing integration adapters."""

    def __init__(self) -> None:
        self._adapters: Dict[str, Type[IntegrationAdapter]] = {}
        self._lock = threading.RLock()

    def register(self, adapter_class: Type[IntegrationAdapter]) -> None:
        """Register an adapter class under its metadata name."""
        with self._lock:
            self._adapters[adapter_class().metadata.name] = adapter_class

    def get_adapter(
        self,
        adapter_name: str,
        correlation_id: Optional[str] = None
    ) -> Optional[IntegrationAdapter]:
        """Get an adapter instance by name, or None if unknown or unavailable."""
        with self._lock:
            adapter_class = self._adapters.get(adapter_name)
        if adapter_class is None:
            return None
        instance = adapter_class(correlation_id)
        return instance if instance.is_available() else None

    def list_available_adapters(self) -> List[AdapterMetadata]:
        """Metadata of every registered adapter whose library is importable."""
        with self._lock:
            adapter_classes = list(self._adapters.values())
        available = []
        for adapter_class in adapter_classes:
            instance = adapter_class()
            if instance.is_available():
                available.append(instance.metadata)
        return available


_adapter_registry = AdapterRegistry()


def register_adapter(adapter_class: Type[IntegrationAdapter]) -> None:
    """Register an integration adapter globally."""
    _adapter_registry.register(adapter_class)


def get_adapter(
    adapter_name: str,
    correlation_id: Optional[str] = None
) -> Optional[IntegrationAdapter]:
    """Get a registered adapter instance."""
    return _adapter_registry.get_adapter(adapter_name, correlation_id)


def list_available_adapters() -> List[AdapterMetadata]:
    """List all available integration adapters."""
    return _adapter_registry.list_available_adapters()


register_adapter(ElementTreeAdapter)
register_adapter(LxmlAdapter)
register_adapter(BeautifulSoupAdapter)
register_adapter(PandasAdapter)
