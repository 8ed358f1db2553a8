"""
Contracts Module

Immutable types shared by every layer. No layer may import implementation
details from another layer; they exchange these values instead.

DESIGN PRINCIPLES:
==================
1. All contract types are frozen dataclasses
2. Collections inside records are tuples, never lists
3. Errors are data (ErrorCode, Error, LoadIssue), not control flow
"""

from .base import Error, ErrorCode, LoadIssue, LoadReport, Result
from .records import (
    DEFAULT_DISPLAY_YEAR,
    DependencyEdge,
    EdgeKind,
    EventCategory,
    EventRecord,
    EventTier,
    OutcomeRecord,
)

__all__ = [
    "DEFAULT_DISPLAY_YEAR",
    "DependencyEdge",
    "EdgeKind",
    "Error",
    "ErrorCode",
    "EventCategory",
    "EventRecord",
    "EventTier",
    "LoadIssue",
    "LoadReport",
    "OutcomeRecord",
    "Result",
]
