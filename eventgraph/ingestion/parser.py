"""
Record Parser
=============

Converts the text of one record file into an EventRecord or OutcomeRecord.

CONTRACT:
- Returns a fully populated record, or None when a required field
  (``id`` plus ``title``/``name``) is missing. Never a partial record.
- Numeric fields fall back to their documented default when unparseable.
- Exceptions are left to the caller (the loader), which logs and skips.

EVENT SCOPES:
=============
    [event]                     -> EVENT
    [event.conditions]          -> CONDITIONS
    [[event.options]]           -> OPTION          (label = "option_effect")
    [[event.options.results]]   -> RESULT          (label reset)
    [event.options.effects]     -> OPTION_EFFECTS
    anything else               -> NONE            (entries ignored)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePath
from typing import Dict, List, Optional, Tuple

from ..contracts.records import (
    EventCategory, EventRecord, EventTier, OutcomeRecord
)
from .scanner import (
    LineKind, ScannedLine, scan_lines,
    parse_int, parse_nested_array, parse_set_member, parse_string,
    parse_string_array,
)

# Label under which direct option effects are recorded.
OPTION_EFFECT_LABEL = "option_effect"

DEFAULT_EVENT_HISTORICITY = 100
DEFAULT_OUTCOME_SCORE = 50

OUTCOME_HEADER = "[outcome]"


class Scope(Enum):
    """Section of an event file the scanner is currently inside."""
    NONE = "none"
    EVENT = "event"
    CONDITIONS = "conditions"
    RESULT = "result"
    OPTION = "option"
    OPTION_EFFECTS = "option_effects"


def scope_for_header(header: str) -> Scope:
    """Transition taken when a section header is read."""
    if header.startswith("[event]") and not header.startswith("[event."):
        return Scope.EVENT
    if header.startswith("[event.conditions]"):
        return Scope.CONDITIONS
    if header.startswith("[[event.options.results]]"):
        return Scope.RESULT
    if header.startswith("[[event.options]]"):
        return Scope.OPTION
    if header.startswith("[event.options.effects]"):
        return Scope.OPTION_EFFECTS
    return Scope.NONE


def infer_category(path: PurePath) -> EventCategory:
    """
    Category from the storage grouping.

    A directory segment named after the category wins; otherwise the
    upper-case category name inside the file name. SITUATION otherwise.
    """
    folded = "/" + path.as_posix().lower() + "/"
    for category in EventCategory:
        if f"/{category.value}/" in folded or category.name in path.name:
            return category
    return EventCategory.SITUATION


# =============================================================================
# EVENT PARSER
# =============================================================================

@dataclass
class _EventDraft:
    """Mutable accumulator; frozen into an EventRecord once the file is read."""
    category: EventCategory
    id: Optional[str] = None
    title: Optional[str] = None
    tier: EventTier = EventTier.MINOR
    min_year: Optional[int] = None
    max_year: Optional[int] = None
    historicity_score: int = DEFAULT_EVENT_HISTORICITY
    location: Optional[str] = None
    required_outcomes: List[str] = field(default_factory=list)
    required_outcomes_any: List[Tuple[str, ...]] = field(default_factory=list)
    forbidden_outcomes: List[str] = field(default_factory=list)
    produced: Dict[str, List[str]] = field(default_factory=dict)

    def produce(self, label: str, outcome_ids: List[str]):
        self.produced.setdefault(label, []).extend(outcome_ids)

    def freeze(self, source_path: Optional[str]) -> Optional[EventRecord]:
        if not self.id or self.title is None:
            return None
        return EventRecord(
            id=self.id,
            title=self.title,
            category=self.category,
            tier=self.tier,
            min_year=self.min_year,
            max_year=self.max_year,
            historicity_score=self.historicity_score,
            location=self.location,
            required_outcomes=tuple(self.required_outcomes),
            required_outcomes_any=tuple(self.required_outcomes_any),
            forbidden_outcomes=tuple(self.forbidden_outcomes),
            produced_outcomes=tuple(
                (label, tuple(outcome_ids))
                for label, outcome_ids in self.produced.items()
            ),
            source_path=source_path
        )


class EventParser:
    """
    State machine over scanned lines of an event file.

    The multi-line form of ``required_outcomes_any`` takes precedence:
    when the file contains one, every single-line occurrence of the key
    is ignored so the groups are never parsed twice.
    """

    def parse(
        self,
        content: str,
        category: EventCategory,
        source_path: Optional[str] = None
    ) -> Optional[EventRecord]:
        lines = list(scan_lines(content))
        draft = _EventDraft(category=category)

        multiline_any = self._first_multiline(lines, "required_outcomes_any")
        if multiline_any is not None:
            draft.required_outcomes_any.extend(
                tuple(group) for group in parse_nested_array(multiline_any.value)
            )

        scope = Scope.NONE
        label = ""

        for line in lines:
            if line.kind is LineKind.HEADER:
                scope = scope_for_header(line.key)
                if scope is Scope.RESULT:
                    label = ""
                elif scope is Scope.OPTION:
                    label = OPTION_EFFECT_LABEL
                continue

            if scope is Scope.EVENT:
                self._read_event_entry(draft, line.key, line.value)
            elif scope is Scope.CONDITIONS:
                self._read_condition_entry(
                    draft, line, skip_any=multiline_any is not None
                )
            elif scope is Scope.RESULT:
                if line.key == "label":
                    label = parse_string(line.value)
                elif line.key == "outcomes":
                    outcome_ids = parse_set_member(line.value)
                    if label and outcome_ids:
                        draft.produce(label, outcome_ids)
            elif scope is Scope.OPTION_EFFECTS:
                if line.key == "outcomes":
                    outcome_ids = parse_set_member(line.value)
                    if outcome_ids:
                        draft.produce(OPTION_EFFECT_LABEL, outcome_ids)

        return draft.freeze(source_path)

    @staticmethod
    def _first_multiline(lines: List[ScannedLine], key: str) -> Optional[ScannedLine]:
        for line in lines:
            if line.kind is LineKind.ENTRY and line.multiline and line.key == key:
                return line
        return None

    @staticmethod
    def _read_event_entry(draft: _EventDraft, key: str, value: str):
        if key == "id":
            draft.id = parse_string(value)
        elif key == "title":
            draft.title = parse_string(value)
        elif key == "tier":
            draft.tier = EventTier.from_string(parse_string(value)) or EventTier.MINOR
        elif key == "historicity_score":
            draft.historicity_score = parse_int(value, DEFAULT_EVENT_HISTORICITY)
        elif key == "location":
            draft.location = parse_string(value)
        elif key == "year":
            year = parse_int(value, None)
            if year is not None:
                draft.min_year = year
                draft.max_year = year

    @staticmethod
    def _read_condition_entry(draft: _EventDraft, line: ScannedLine, skip_any: bool):
        key, value = line.key, line.value
        if key == "min_year":
            draft.min_year = parse_int(value, None)
        elif key == "max_year":
            draft.max_year = parse_int(value, None)
        elif key == "required_outcomes":
            draft.required_outcomes.extend(parse_string_array(value))
        elif key == "forbidden_outcomes":
            draft.forbidden_outcomes.extend(parse_string_array(value))
        elif key == "required_outcomes_any":
            if not skip_any and "]]" in value:
                draft.required_outcomes_any.extend(
                    tuple(group) for group in parse_nested_array(value)
                )


# =============================================================================
# OUTCOME PARSER
# =============================================================================

class OutcomeParser:
    """Reads keys inside ``[outcome]``; any other header closes the section."""

    def parse(
        self,
        content: str,
        category: str,
        source_path: Optional[str] = None
    ) -> Optional[OutcomeRecord]:
        outcome_id: Optional[str] = None
        name: Optional[str] = None
        historicity_score = DEFAULT_OUTCOME_SCORE
        impact_score = DEFAULT_OUTCOME_SCORE
        description: Optional[str] = None

        in_outcome = False
        for line in scan_lines(content):
            if line.kind is LineKind.HEADER:
                in_outcome = line.key == OUTCOME_HEADER
                continue
            if not in_outcome:
                continue

            if line.key == "id":
                outcome_id = parse_string(line.value)
            elif line.key == "name":
                name = parse_string(line.value)
            elif line.key == "historicity_score":
                historicity_score = parse_int(line.value, DEFAULT_OUTCOME_SCORE)
            elif line.key == "historical_impact_score":
                impact_score = parse_int(line.value, DEFAULT_OUTCOME_SCORE)
            elif line.key == "player_description":
                description = parse_string(line.value)

        if not outcome_id or name is None:
            return None

        return OutcomeRecord(
            id=outcome_id,
            name=name,
            historicity_score=historicity_score,
            historical_impact_score=impact_score,
            category=category,
            description=description,
            source_path=source_path
        )


_EVENT_PARSER = EventParser()
_OUTCOME_PARSER = OutcomeParser()


def parse_event(
    content: str,
    category: EventCategory = EventCategory.SITUATION,
    source_path: Optional[str] = None
) -> Optional[EventRecord]:
    """Parse one event file's text."""
    return _EVENT_PARSER.parse(content, category, source_path)


def parse_outcome(
    content: str,
    category: str = "unknown",
    source_path: Optional[str] = None
) -> Optional[OutcomeRecord]:
    """Parse one outcome file's text."""
    return _OUTCOME_PARSER.parse(content, category, source_path)
