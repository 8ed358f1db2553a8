"""
Record Scanner
==============

Line scanner and value codecs for the section-based record format.

GRAMMAR (permissive):
- ``[name]`` / ``[[name]]`` section headers (a line of that exact shape;
  array continuation lines such as ``["b"]]`` are not headers)
- ``key = value`` entries, split on the first ``=``
- quoted strings, bare integers, triple-quoted strings
- inline arrays ``["a", "b"]`` and arrays of arrays ``[["a"], ["b", "c"]]``
- an array value left unbalanced at the end of its line continues on the
  following lines, gathered until its outer bracket closes

The scanner does not know which keys matter; parsers decide that.
Constraint: NO INFERENCE. Values are returned as raw text.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple
import re

TRIPLE_QUOTE = '"""'

_WHITESPACE = re.compile(r"\s+")
_SET_MEMBER = re.compile(r"set\s*=\s*\[(.*?)\]")
_HEADER = re.compile(r"^\[\[?[A-Za-z0-9_.\-]+\]\]?\s*(#.*)?$")


class LineKind(Enum):
    HEADER = "header"
    ENTRY = "entry"


@dataclass(frozen=True)
class ScannedLine:
    """
    One meaningful line (or gathered block) of a record file.

    For headers ``key`` holds the bracketed header text and ``value`` is
    empty. ``multiline`` marks entries gathered from several lines.
    """
    kind: LineKind
    line_no: int
    key: str
    value: str = ""
    multiline: bool = False


# =============================================================================
# LINE SCANNER
# =============================================================================

def is_header(trimmed: str) -> bool:
    """True for a stripped line shaped like ``[name]`` or ``[[name]]``."""
    return _HEADER.match(trimmed) is not None


def scan_lines(content: str) -> Iterator[ScannedLine]:
    """Yield headers and ``key = value`` entries in file order."""
    lines = content.splitlines()
    index = 0

    while index < len(lines):
        trimmed = lines[index].strip()
        line_no = index + 1

        if is_header(trimmed):
            yield ScannedLine(LineKind.HEADER, line_no, trimmed)
            index += 1
            continue

        if "=" not in trimmed:
            index += 1
            continue

        key, _, value = trimmed.partition("=")
        key = key.strip()
        value = value.strip()

        if value.startswith("[") and _bracket_depth(value) > 0:
            gathered = _gather_array(lines, index + 1, value)
            if gathered is not None:
                block, next_index = gathered
                yield ScannedLine(LineKind.ENTRY, line_no, key, block, multiline=True)
                index = next_index
                continue

        if value.startswith(TRIPLE_QUOTE) and value.count(TRIPLE_QUOTE) == 1:
            gathered = _gather_triple_quoted(lines, index + 1, value)
            if gathered is not None:
                block, next_index = gathered
                yield ScannedLine(LineKind.ENTRY, line_no, key, block, multiline=True)
                index = next_index
                continue

        yield ScannedLine(LineKind.ENTRY, line_no, key, value)
        index += 1


def _bracket_depth(text: str) -> int:
    """Open ``[`` minus closed ``]``."""
    return text.count("[") - text.count("]")


def _gather_array(
    lines: List[str],
    start: int,
    first_value: str
) -> Optional[Tuple[str, int]]:
    """
    Collect the rest of an array left open on its entry line.

    Returns the array text with all whitespace removed and the index of
    the first line after it, or None when the outer bracket never closes.
    """
    buffer = [first_value]
    depth = _bracket_depth(first_value)

    for index in range(start, len(lines)):
        for char in lines[index]:
            buffer.append(char)
            if char == "[":
                depth += 1
            elif char == "]":
                depth -= 1
                if depth == 0:
                    return _WHITESPACE.sub("", "".join(buffer)), index + 1
        buffer.append("\n")

    return None


def _gather_triple_quoted(
    lines: List[str],
    start: int,
    first_value: str
) -> Optional[Tuple[str, int]]:
    buffer = [first_value]
    for index in range(start, len(lines)):
        line = lines[index]
        end = line.find(TRIPLE_QUOTE)
        if end >= 0:
            buffer.append(line[:end + len(TRIPLE_QUOTE)])
            return "\n".join(buffer), index + 1
        buffer.append(line)
    return None


# =============================================================================
# VALUE CODECS
# =============================================================================

def parse_string(value: str) -> str:
    """Strip surrounding quotes; keep only the content of triple-quoted text."""
    if value.startswith(TRIPLE_QUOTE):
        inner = value[len(TRIPLE_QUOTE):]
        end = inner.find(TRIPLE_QUOTE)
        if end >= 0:
            inner = inner[:end]
        return inner.strip()
    return value.strip('"')


def parse_int(value: str, default: Optional[int]) -> Optional[int]:
    """Integer value, or ``default`` when the text is not an integer."""
    try:
        return int(value.strip())
    except ValueError:
        return default


def parse_string_array(value: str) -> List[str]:
    """``["a", "b"]`` -> ``["a", "b"]``; empty entries are dropped."""
    content = value.strip()
    if len(content) >= 2 and content.startswith("[") and content.endswith("]"):
        content = content[1:-1]
    if not content.strip():
        return []

    items = (item.strip().strip('"') for item in content.split(","))
    return [item for item in items if item]


def parse_nested_array(value: str) -> List[List[str]]:
    """
    ``[["a"], ["b", "c"]]`` -> ``[["a"], ["b", "c"]]``.

    Depth 1 is the outer array and its commas separate groups; the
    content of each depth-2 array is accumulated and parsed as a string
    array when its closing bracket is seen. Blank groups are skipped.
    """
    groups: List[List[str]] = []
    depth = 0
    current: List[str] = []

    for char in value:
        if char == "[":
            depth += 1
        elif char == "]":
            if depth == 2 and "".join(current).strip():
                groups.append(parse_string_array("".join(current)))
            if depth == 2:
                current = []
            depth -= 1
        elif char == ",":
            if depth >= 2:
                current.append(char)
        elif depth >= 2:
            current.append(char)

    return groups


def parse_set_member(value: str) -> List[str]:
    """Outcomes listed under ``set`` in ``{ set = [...], clear = [...] }``."""
    match = _SET_MEMBER.search(value)
    if match is None:
        return []
    return parse_string_array(f"[{match.group(1)}]")
