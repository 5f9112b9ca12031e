"""High-level parsing API.

Progressive disclosure:
- ``parse_string`` / ``parse_file``: one call, default configuration
- ``SVGParser``: configured, reusable parser that also serializes

Unlike :func:`svg_simple_parser.parsing.parse`, these functions never raise
on malformed input. They return a :class:`ParseResult` carrying the trees,
the unconsumed remainder and diagnostics.
"""

import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from svg_simple_parser.parsing import ParseError, parse, parse_all
from svg_simple_parser.serialize import serialize
from svg_simple_parser.shared import (
    DiagnosticSeverity,
    ParserConfig,
    configure_logging,
    get_logger,
)
from svg_simple_parser.shared.logging import CorrelationLogger
from svg_simple_parser.tree import Element

from .result import ParseResult

PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000


def _elapsed_ms(start_time: float) -> float:
    return (time.time() - start_time) * MS_PER_SECOND


def _preview(text: str) -> str:
    if len(text) > PREVIEW_LENGTH:
        return text[:PREVIEW_LENGTH] + "..."
    return text


def _create_error_result(
    error_message: str,
    correlation_id: Optional[str],
    processing_time: float,
    source: Optional[str] = None
) -> ParseResult:
    """Create a result for input that could not be handed to the grammar."""
    result = ParseResult(success=False, correlation_id=correlation_id, source=source)
    result.performance.processing_time_ms = processing_time
    result.add_diagnostic(DiagnosticSeverity.CRITICAL, error_message, "api_parser")
    return result


def _parse_text(
    text: str,
    config: ParserConfig,
    correlation_id: Optional[str],
    logger: CorrelationLogger,
    source: Optional[str] = None
) -> ParseResult:
    """Run the grammar over ``text`` and translate the outcome into a result."""
    start_time = time.time()
    parsing = config.parsing

    if parsing.max_input_size_bytes is not None:
        size = len(text.encode("utf-8"))
        if size > parsing.max_input_size_bytes:
            logger.warning(
                "Input rejected by size limit",
                extra={"size_bytes": size, "limit_bytes": parsing.max_input_size_bytes}
            )
            return _create_error_result(
                f"Input size {size} bytes exceeds limit of "
                f"{parsing.max_input_size_bytes} bytes",
                correlation_id,
                _elapsed_ms(start_time),
                source,
            )

    result = ParseResult(correlation_id=correlation_id, source=source)
    result.performance.characters_processed = len(text)

    try:
        if parsing.allow_multiple_roots:
            remaining, roots = parse_all(text)
        else:
            remaining, root = parse(text)
            roots = [root]
    except ParseError as e:
        result.success = False
        result.error = e
        result.remaining = e.remaining
        result.add_diagnostic(
            DiagnosticSeverity.ERROR,
            str(e),
            e.context or "grammar",
            position={"offset": e.offset, "line": e.line, "column": e.column},
            details={"contexts": list(e.contexts), "expected": e.expected},
        )
        logger.warning(
            "Input rejected by grammar",
            extra={"context": e.context, "offset": e.offset, "preview": _preview(text)}
        )
    else:
        result.roots = roots
        result.remaining = remaining
        _check_remaining(result, text, config)

    result.performance.characters_consumed = len(text) - len(result.remaining)
    result.performance.elements_parsed = result.element_count
    result.performance.processing_time_ms = _elapsed_ms(start_time)

    logger.info(
        "Parse completed",
        extra={
            "success": result.success,
            "root_count": len(result.roots),
            "element_count": result.element_count,
            "remaining_length": len(result.remaining),
            "processing_time_ms": result.performance.processing_time_ms,
        }
    )
    return result


def _check_remaining(result: ParseResult, text: str, config: ParserConfig) -> None:
    if not result.roots:
        result.success = False
        result.add_diagnostic(
            DiagnosticSeverity.ERROR,
            "No element found at start of input",
            "api_parser",
            position={"offset": 0, "line": 1, "column": 1},
        )
        return

    if not result.remaining:
        return

    offset = len(text) - len(result.remaining)
    position = {"offset": offset}
    details = {"preview": _preview(result.remaining)}
    if config.parsing.require_complete_input:
        result.success = False
        result.add_diagnostic(
            DiagnosticSeverity.ERROR,
            f"Unconsumed input after element at offset {offset}",
            "api_parser",
            position=position,
            details=details,
        )
    else:
        result.add_diagnostic(
            DiagnosticSeverity.WARNING,
            f"Trailing input left unparsed at offset {offset}",
            "api_parser",
            position=position,
            details=details,
        )


def parse_string(
    text: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse SVG markup from a string.

    Args:
        text: Markup to parse
        config: Parser configuration (defaults to ``ParserConfig()``)
        correlation_id: Optional correlation ID for request tracking

    Returns:
        ParseResult with the parsed roots and diagnostics

    Examples:
        >>> result = parse_string('<svg><circle r="4"/></svg>')
        >>> result.success, result.root.children[0].tag
        (True, 'circle')

        >>> result = parse_string('<rect width=100/>')
        >>> result.success, result.error.context
        (False, 'attribute_value')
    """
    config = config or ParserConfig()
    logger = get_logger(__name__, correlation_id, "parse_string")
    logger.info(
        "Starting string parse operation",
        extra={"content_length": len(text), "preview": _preview(text)}
    )
    return _parse_text(text, config, correlation_id, logger)


def parse_file(
    file_path: Union[str, Path],
    encoding: Optional[str] = None,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse SVG markup from a file.

    Args:
        file_path: Path to the file
        encoding: Text encoding, defaults to ``config.parsing.file_encoding``
        config: Parser configuration (defaults to ``ParserConfig()``)
        correlation_id: Optional correlation ID for request tracking

    Returns:
        ParseResult; missing or unreadable files give ``success`` False with
        a CRITICAL diagnostic
    """
    start_time = time.time()
    config = config or ParserConfig()
    encoding = encoding or config.parsing.file_encoding
    path_obj = Path(file_path)
    logger = get_logger(__name__, correlation_id, "parse_file")

    logger.info(
        "Starting file parse operation",
        extra={"file_path": str(path_obj), "encoding": encoding}
    )

    if not path_obj.exists():
        return _create_error_result(
            f"File not found: {path_obj}", correlation_id, _elapsed_ms(start_time), str(path_obj)
        )
    if not path_obj.is_file():
        return _create_error_result(
            f"Path is not a file: {path_obj}",
            correlation_id,
            _elapsed_ms(start_time),
            str(path_obj),
        )

    try:
        # No newline translation: attribute values keep CR LF
        text = path_obj.read_bytes().decode(encoding)
    except UnicodeDecodeError as e:
        logger.warning(
            "File could not be decoded",
            extra={"file_path": str(path_obj), "encoding": encoding, "error": str(e)}
        )
        return _create_error_result(
            f"Could not decode {path_obj} as {encoding}: {e}",
            correlation_id,
            _elapsed_ms(start_time),
            str(path_obj),
        )
    except (LookupError, OSError) as e:
        logger.error(
            "File could not be read",
            extra={"file_path": str(path_obj), "error": str(e)}
        )
        return _create_error_result(
            f"Could not read {path_obj}: {e}",
            correlation_id,
            _elapsed_ms(start_time),
            str(path_obj),
        )

    result = _parse_text(text, config, correlation_id, logger, source=str(path_obj))
    result.add_diagnostic(
        DiagnosticSeverity.INFO,
        f"File read with encoding: {encoding}",
        "file_parser",
        details={"file_path": str(path_obj), "encoding": encoding},
    )
    return result


class SVGParser:
    """Configured parser with reuse statistics.

    Attributes:
        config: Current parser configuration
        correlation_id: Correlation ID attached to logs and diagnostics

    Examples:
        >>> parser = SVGParser(ParserConfig.pretty_output())
        >>> result = parser.parse('<svg><g/></svg>')
        >>> parser.stringify(result.root)
        '<svg>\\r\\n  <g/>\\r\\n</svg>\\r\\n'
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = (
            correlation_id if self.config.global_.enable_correlation_tracking else None
        )
        if self.config.global_.logging_level is not None:
            configure_logging(self.config.global_.logging_level)
        self.logger = get_logger(__name__, self.correlation_id, "svg_parser")

        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0

        self.logger.info(
            "SVGParser initialized",
            extra={"config_name": self.config.name}
        )

    def _record(self, result: ParseResult) -> ParseResult:
        self._parse_count += 1
        self._total_processing_time += result.performance.processing_time_ms
        if result.success:
            self._successful_parses += 1
        return result

    def parse(self, text: str) -> ParseResult:
        """Parse markup from a string using this parser's configuration."""
        return self._record(_parse_text(text, self.config, self.correlation_id, self.logger))

    def parse_file(
        self, file_path: Union[str, Path], encoding: Optional[str] = None
    ) -> ParseResult:
        """Parse markup from a file using this parser's configuration."""
        return self._record(
            parse_file(file_path, encoding, self.config, self.correlation_id)
        )

    def stringify(self, element: Element) -> str:
        """Serialize ``element`` with the configured serializer settings."""
        return serialize(element, self.config.serializer)

    def stringify_all(self, elements: List[Element]) -> str:
        """Serialize several roots one after another."""
        return "".join(self.stringify(element) for element in elements)

    def reconfigure(self, config: ParserConfig) -> None:
        """Replace the configuration; statistics are kept."""
        self.config = config
        if config.global_.logging_level is not None:
            configure_logging(config.global_.logging_level)
        self.logger.info("Parser reconfigured", extra={"config_name": config.name})

    @property
    def statistics(self) -> Dict[str, Any]:
        """Usage statistics since creation or the last reset."""
        return {
            "total_parses": self._parse_count,
            "successful_parses": self._successful_parses,
            "success_rate": (
                self._successful_parses / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0
        self.logger.info("Parser statistics reset")
