"""
Record Loaders

Recursive discovery and parsing of record files under the content root.

PRINCIPLES:
===========
1. One record per file; the file extension is the discovery filter
2. A malformed file is logged, reported and skipped - never fatal
3. A missing directory means zero records, not an error
4. Scan order is sorted by path so reloads are deterministic
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Generic, List, Optional, Tuple, TypeVar
import logging

from ..contracts.base import Error, ErrorCode, LoadIssue, LoadReport, Result
from ..contracts.records import EventRecord, OutcomeRecord
from .config import StorageConfig
from .parser import infer_category, parse_event, parse_outcome

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")


@dataclass(frozen=True)
class LoadResult(Generic[RecordT]):
    """Records found by one scan plus the report of what was skipped."""
    records: Tuple[RecordT, ...]
    report: LoadReport


def discover_files(root: Path, extension: str) -> List[Path]:
    """Every file under ``root`` (recursively) with the given extension."""
    return sorted(
        path for path in root.rglob(f"*{extension}")
        if path.is_file() and path.suffix == extension
    )


class _RecordLoader(Generic[RecordT]):
    """Shared scan loop; subclasses supply the directory and the parse step."""

    kind = "record"

    def __init__(self, config: StorageConfig):
        self._config = config

    @property
    def root(self) -> Path:
        raise NotImplementedError

    def _parse_file(self, path: Path, content: str) -> Optional[RecordT]:
        raise NotImplementedError

    def load_all(self) -> LoadResult[RecordT]:
        root = self.root
        if not root.is_dir():
            logger.warning("%s directory not found: %s", self.kind.capitalize(), root.resolve())
            issue = LoadIssue(
                path=str(root),
                error=Error(
                    code=ErrorCode.MISSING_RESOURCE,
                    message=f"{self.kind} directory not found"
                )
            )
            return LoadResult(records=(), report=LoadReport(root=str(root), issues=(issue,)))

        records: List[RecordT] = []
        issues: List[LoadIssue] = []
        files = discover_files(root, self._config.extension)

        for path in files:
            result = self._load_file(path)
            if result.is_success:
                records.append(result.value)
            else:
                issues.append(LoadIssue(path=str(path), error=result.error))

        logger.info("Loaded %d %ss from %s (%d skipped)", len(records), self.kind, root, len(issues))
        report = LoadReport(
            root=str(root),
            scanned=len(files),
            loaded=len(records),
            issues=tuple(issues)
        )
        return LoadResult(records=tuple(records), report=report)

    def _load_file(self, path: Path) -> Result:
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Error reading %s: %s", path.name, e)
            return Result.failure(Error(code=ErrorCode.UNREADABLE_FILE, message=str(e)))

        try:
            record = self._parse_file(path, content)
        except Exception as e:
            logger.warning("Error parsing %s: %s", path.name, e)
            error = Error(code=ErrorCode.MALFORMED_RECORD, message=str(e))
            return Result.failure(error.with_context("exception", type(e).__name__))

        if record is None:
            logger.debug("Dropped %s: missing required field", path.name)
            return Result.failure(Error(
                code=ErrorCode.MISSING_REQUIRED_FIELD,
                message=f"{self.kind} is missing a required field"
            ))
        return Result.success(record)


class EventLoader(_RecordLoader[EventRecord]):
    """Loads events; the category comes from the path below ``events/``."""

    kind = "event"

    @property
    def root(self) -> Path:
        return self._config.events_path

    def _parse_file(self, path: Path, content: str) -> Optional[EventRecord]:
        category = infer_category(path.relative_to(self.root))
        return parse_event(content, category, source_path=str(path))

    def load_all_events(self) -> LoadResult[EventRecord]:
        return self.load_all()


class OutcomeLoader(_RecordLoader[OutcomeRecord]):
    """Loads outcomes; the category is the name of the parent directory."""

    kind = "outcome"

    @property
    def root(self) -> Path:
        return self._config.outcomes_path

    def _parse_file(self, path: Path, content: str) -> Optional[OutcomeRecord]:
        category = path.parent.name or "unknown"
        return parse_outcome(content, category, source_path=str(path))

    def load_all_outcomes(self) -> LoadResult[OutcomeRecord]:
        return self.load_all()


def load_content(
    config: StorageConfig
) -> Tuple[LoadResult[EventRecord], LoadResult[OutcomeRecord]]:
    """Load both record kinds from one content root."""
    events = EventLoader(config).load_all_events()
    outcomes = OutcomeLoader(config).load_all_outcomes()
    return events, outcomes
