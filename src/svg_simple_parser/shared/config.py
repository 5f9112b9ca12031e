"""Configuration classes for parsing and serialization.

Component configurations validate themselves in ``__post_init__`` and raise
``ValueError``; :class:`ParserConfig` bundles them into one immutable object
and reports problems as :class:`ConfigValidationError`.
"""

import json
from dataclasses import dataclass, field, fields, is_dataclass, replace
from typing import Any, Dict, List, Optional

_COMPONENTS = ("parsing", "serializer", "global_")
_VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
_VALID_LINE_TERMINATORS = ["", "\n", "\r\n", "\r"]


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass
class ParsingConfig:
    """Configuration for the text to tree direction."""

    require_complete_input: bool = False
    allow_multiple_roots: bool = False
    max_input_size_bytes: Optional[int] = None
    file_encoding: str = "utf-8"

    def __post_init__(self) -> None:
        """Validate parsing configuration."""
        if self.max_input_size_bytes is not None and self.max_input_size_bytes <= 0:
            raise ValueError("max_input_size_bytes must be > 0 or None")
        if not self.file_encoding:
            raise ValueError("file_encoding cannot be empty")


@dataclass
class SerializerConfig:
    """Configuration for the tree to text direction."""

    pretty: bool = False
    indent: str = "  "
    line_terminator: str = "\r\n"

    def __post_init__(self) -> None:
        """Validate serializer configuration."""
        if self.indent.strip(" \t"):
            raise ValueError("indent may only contain spaces and tabs")
        if self.line_terminator not in _VALID_LINE_TERMINATORS:
            raise ValueError(
                f"line_terminator must be one of {_VALID_LINE_TERMINATORS!r}"
            )

    @classmethod
    def compact(cls) -> "SerializerConfig":
        """Single-line output without indentation."""
        return cls(pretty=False)

    @classmethod
    def pretty_printed(cls) -> "SerializerConfig":
        """Two-space indentation with CRLF line endings."""
        return cls(pretty=True)


@dataclass
class GlobalConfig:
    """Settings that apply across all components.

    ``logging_level`` is applied to the package logger by :class:`SVGParser`;
    None leaves logger levels to the application.
    """

    logging_level: Optional[str] = None
    enable_correlation_tracking: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level is not None and self.logging_level not in _VALID_LOG_LEVELS:
            raise ValueError(f"logging_level must be one of {_VALID_LOG_LEVELS}")


@dataclass(frozen=True)
class ParserConfig:
    """Complete configuration for parser and serializer.

    Frozen so a single instance can be shared between :class:`SVGParser`
    objects; use :meth:`override` to derive variants.
    """

    parsing: ParsingConfig = field(default_factory=ParsingConfig)
    serializer: SerializerConfig = field(default_factory=SerializerConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    version: str = "1.0.0"
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        try:
            self.parsing.__post_init__()
            self.serializer.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Nested fields use ``component__field`` notation.

        Example:
            >>> config = ParserConfig().override(
            ...     serializer__pretty=True,
            ...     parsing__require_complete_input=True,
            ... )
        """
        nested_overrides: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.rsplit("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=[f"{name}__{field_name}" for name in _COMPONENTS],
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                top_level[key] = value

        new_fields: Dict[str, Any] = {}
        try:
            for component, overrides in nested_overrides.items():
                new_fields[component] = replace(getattr(self, component), **overrides)
            new_fields.update(top_level)
            return replace(self, **new_fields)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if is_dataclass(obj):
                return {f.name: _dataclass_to_dict(getattr(obj, f.name)) for f in fields(obj)}
            return obj

        result = _dataclass_to_dict(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos do not silently fall back to
        defaults.
        """
        component_types = {
            "parsing": ParsingConfig,
            "serializer": SerializerConfig,
            "global_": GlobalConfig,
        }
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration keys: {sorted(unknown)}",
                suggestions=sorted(known),
            )

        values: Dict[str, Any] = {}
        try:
            for key, value in data.items():
                if key in component_types and isinstance(value, dict):
                    values[key] = component_types[key](**value)
                else:
                    values[key] = value
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e
        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    # Preset factory methods
    @classmethod
    def strict(cls) -> "ParserConfig":
        """Reject any input the grammar does not consume completely."""
        return cls(
            parsing=ParsingConfig(require_complete_input=True),
            name="strict",
            description="Single root element, no trailing content",
        )

    @classmethod
    def lenient(cls) -> "ParserConfig":
        """Accept several sibling roots and ignore what follows them."""
        return cls(
            parsing=ParsingConfig(allow_multiple_roots=True),
            name="lenient",
            description="Any number of root elements, trailing text reported only",
        )

    @classmethod
    def pretty_output(cls) -> "ParserConfig":
        """Default parsing with indented, CRLF-terminated output."""
        return cls(
            serializer=SerializerConfig.pretty_printed(),
            name="pretty_output",
            description="Indented serializer output",
        )
