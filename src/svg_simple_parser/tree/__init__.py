"""Element tree produced by the parser and consumed by the serializer."""

from .element import Element

__all__ = ["Element"]
