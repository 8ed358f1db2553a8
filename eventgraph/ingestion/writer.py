"""
Event Writer

In-place year rewrite for a single event file.

Works on raw lines, not a re-serialization: only ``min_year`` /
``max_year`` inside ``[event.conditions]`` and ``year`` inside ``[event]``
are touched. Every other line, including its line ending, is written
back unchanged.
"""

from __future__ import annotations
from pathlib import Path
from typing import List, Optional, Union
import logging

from .scanner import is_header

logger = logging.getLogger(__name__)


def _line_ending(line: str) -> str:
    if line.endswith("\r\n"):
        return "\r\n"
    if line.endswith("\n"):
        return "\n"
    return ""


def _entry_key(trimmed: str) -> Optional[str]:
    if "=" not in trimmed:
        return None
    return trimmed.partition("=")[0].strip()


def _rewrite(line: str, key: str, value: int) -> str:
    indent = line[:len(line) - len(line.lstrip())]
    return f"{indent}{key} = {value}{_line_ending(line)}"


class EventWriter:
    """Rewrites the year fields of one event file."""

    def update_event_years(
        self,
        file_path: Union[str, Path],
        min_year: Optional[int],
        max_year: Optional[int]
    ) -> bool:
        """
        Apply new year bounds to the file at ``file_path``.

        Missing ``min_year`` / ``max_year`` lines are inserted right after
        the ``[event.conditions]`` header (``min_year`` first). A single
        ``year`` field in ``[event]`` follows ``min_year``.

        Returns True when the file was rewritten, False when it does not
        exist or nothing changed.
        """
        path = Path(file_path)
        if not path.is_file():
            logger.warning("Event file not found: %s", path)
            return False

        with open(path, "r", encoding="utf-8", newline="") as f:
            lines = f.read().splitlines(keepends=True)

        updated = self.apply(lines, min_year, max_year)
        if updated == lines:
            return False

        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write("".join(updated))

        logger.info("Updated years in %s (min=%s, max=%s)", path.name, min_year, max_year)
        return True

    def apply(
        self,
        lines: List[str],
        min_year: Optional[int],
        max_year: Optional[int]
    ) -> List[str]:
        """Pure line transform behind ``update_event_years``."""
        result = list(lines)
        newline = next((_line_ending(line) for line in lines if _line_ending(line)), "\n")

        in_event = False
        in_conditions = False
        found_min = False
        found_max = False
        conditions_index = -1

        for index, line in enumerate(result):
            trimmed = line.strip()

            if is_header(trimmed):
                in_event = trimmed.startswith("[event]")
                in_conditions = trimmed.startswith("[event.conditions]")
                if in_conditions:
                    conditions_index = index
                continue

            key = _entry_key(trimmed)
            if in_conditions and key == "min_year":
                found_min = True
                if min_year is not None:
                    result[index] = _rewrite(line, "min_year", min_year)
            elif in_conditions and key == "max_year":
                found_max = True
                if max_year is not None:
                    result[index] = _rewrite(line, "max_year", max_year)
            elif in_event and key == "year" and min_year is not None:
                result[index] = _rewrite(line, "year", min_year)

        inserts = []
        if not found_min and min_year is not None:
            inserts.append(f"min_year = {min_year}{newline}")
        if not found_max and max_year is not None:
            inserts.append(f"max_year = {max_year}{newline}")

        if conditions_index >= 0 and inserts:
            header = result[conditions_index]
            if not _line_ending(header):
                result[conditions_index] = header + newline
            result[conditions_index + 1:conditions_index + 1] = inserts

        return result
