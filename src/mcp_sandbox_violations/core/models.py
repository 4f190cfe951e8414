"""Core data models for sandbox violation collection."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .errors import ScanFaultError


@dataclass(frozen=True, slots=True)
class Violation:
    """One parsed sandbox denial event."""

    timestamp: datetime  # falls back to collection time when the log text has none
    process_name: str
    process_id: str  # kept as text, backends format it inconsistently
    operation: str
    target_path: str
    deny_code: str
    raw_line: str  # exact source line, terminator removed


@dataclass(frozen=True, slots=True)
class CollectionResult:
    """Violations from one collection call plus an optional scan fault.

    A scan fault does not discard what was gathered before it happened.
    """

    violations: list[Violation] = field(default_factory=list)
    error: ScanFaultError | None = None
    source: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None
