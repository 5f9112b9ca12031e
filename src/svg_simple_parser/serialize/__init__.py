"""Tree to text serialization."""

from .stringify import serialize, stringify, stringify_attributes, stringify_pretty

__all__ = [
    "serialize",
    "stringify",
    "stringify_attributes",
    "stringify_pretty",
]
