"""
Base Contracts and Shared Types

Error taxonomy and load reporting used across all layers.
All types here are IMMUTABLE and represent pure data.

BOUNDARY ENFORCEMENT:
=====================
- Errors are data, not exceptions; a batch scan records them and moves on
- Layers may import these types but never extend them with behavior
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Optional, Tuple


# =============================================================================
# ERROR STATES (Explicit, never silent)
# =============================================================================

class ErrorCode(Enum):
    """
    Explicit error codes for the ingestion pipeline.

    Dangling outcome references and unparseable numbers are NOT errors:
    they yield no edge or the field default, by contract.
    """
    # Resource errors
    MISSING_RESOURCE = auto()
    UNREADABLE_FILE = auto()

    # Record errors
    MALFORMED_RECORD = auto()
    MISSING_REQUIRED_FIELD = auto()


@dataclass(frozen=True)
class Error:
    """
    Immutable error representation with full context.
    Errors are data, not exceptions - they can be stored and queried.
    """
    code: ErrorCode
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def with_context(self, key: str, value: str) -> Error:
        """Return new Error with additional context (immutable)."""
        return Error(
            code=self.code,
            message=self.message,
            timestamp=self.timestamp,
            context=self.context + ((key, value),)
        )


@dataclass(frozen=True)
class Result:
    """
    Generic result type for operations that can fail.
    Either contains a value OR an error, never both.
    """
    value: Optional[object] = None
    error: Optional[Error] = None

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    @staticmethod
    def success(value: object) -> Result:
        return Result(value=value, error=None)

    @staticmethod
    def failure(error: Error) -> Result:
        return Result(value=None, error=error)


# =============================================================================
# LOAD REPORTING
# =============================================================================

@dataclass(frozen=True)
class LoadIssue:
    """A single file (or directory) that did not yield a record."""
    path: str
    error: Error

    @property
    def code(self) -> ErrorCode:
        return self.error.code


@dataclass(frozen=True)
class LoadReport:
    """
    Outcome of one recursive scan.

    ``loaded`` counts records returned; ``issues`` lists every file that
    was skipped, in scan order. Zero loaded records is itself the
    diagnostic when the content root is missing.
    """
    root: str
    scanned: int = 0
    loaded: int = 0
    issues: Tuple[LoadIssue, ...] = field(default_factory=tuple)

    @property
    def skipped(self) -> int:
        return len(self.issues)

    def merge(self, other: LoadReport) -> LoadReport:
        """Combine two reports (e.g. events and outcomes) into one."""
        return LoadReport(
            root=self.root,
            scanned=self.scanned + other.scanned,
            loaded=self.loaded + other.loaded,
            issues=self.issues + other.issues
        )

    def issues_with(self, code: ErrorCode) -> Tuple[LoadIssue, ...]:
        return tuple(issue for issue in self.issues if issue.code == code)
