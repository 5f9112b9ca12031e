"""Diagnostic and metrics types shared by the parsing and API layers.

Diagnostics describe what happened during a parse (failures, trailing input,
file handling) and metrics capture how much work a call did.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()    # Input accepted, but something looks off
    ERROR = auto()      # Input rejected by the grammar
    CRITICAL = auto()   # Input could not be read at all


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with optional position information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[Dict[str, int]] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    @property
    def is_error(self) -> bool:
        """Check whether this entry reports a rejected input."""
        return self.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)

    def to_dict(self) -> Dict[str, Any]:
        """Convert entry to a JSON-friendly dictionary."""
        result: Dict[str, Any] = {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
        }
        if self.position is not None:
            result["position"] = dict(self.position)
        if self.details:
            result["details"] = dict(self.details)
        return result


@dataclass
class PerformanceMetrics:
    """Performance metrics for a parse call."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    characters_consumed: int = 0
    elements_parsed: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    @property
    def consumption_ratio(self) -> float:
        """Fraction of the input the grammar consumed."""
        if self.characters_processed == 0:
            return 0.0
        return self.characters_consumed / self.characters_processed
