"""Result object returned by the high-level parsing API."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from svg_simple_parser.parsing import ParseError
from svg_simple_parser.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
)
from svg_simple_parser.tree import Element


@dataclass
class ParseResult:
    """Outcome of a high-level parse call.

    The API functions never raise on bad input; a rejected document comes
    back with ``success`` False, the :class:`ParseError` in ``error`` and an
    ERROR diagnostic describing it.
    """

    roots: List[Element] = field(default_factory=list)
    remaining: str = ""
    success: bool = True
    error: Optional[ParseError] = None

    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)

    correlation_id: Optional[str] = None
    source: Optional[str] = None

    @property
    def root(self) -> Optional[Element]:
        """First parsed root element, if any."""
        return self.roots[0] if self.roots else None

    @property
    def element_count(self) -> int:
        """Total number of elements across all roots."""
        return sum(root.count() for root in self.roots)

    @property
    def consumed_all(self) -> bool:
        """Whether the grammar consumed the whole input."""
        return self.remaining == ""

    @property
    def processing_time_ms(self) -> float:
        return self.performance.processing_time_ms

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                position=position,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(diag.is_error for diag in self.diagnostics)

    def summary(self) -> Dict[str, Any]:
        """Compact overview suitable for logging or reporting."""
        summary: Dict[str, Any] = {
            "success": self.success,
            "root_count": len(self.roots),
            "element_count": self.element_count,
            "consumed_all": self.consumed_all,
            "remaining_length": len(self.remaining),
            "processing_time_ms": self.performance.processing_time_ms,
            "diagnostic_count": len(self.diagnostics),
            "has_errors": self.has_errors(),
        }
        if self.source is not None:
            summary["source"] = self.source
        if self.error is not None:
            summary["error"] = self.error.to_dict()
        return summary

    def to_dict(self) -> Dict[str, Any]:
        """Summary plus the parsed trees and diagnostics."""
        result = self.summary()
        result["roots"] = [root.to_dict() for root in self.roots]
        result["diagnostics"] = [diag.to_dict() for diag in self.diagnostics]
        return result
