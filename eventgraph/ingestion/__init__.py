"""
Ingestion Layer

RESPONSIBILITY: Discover record files, parse them, write years back
ALLOWED INPUTS: Files under the configured content root
OUTPUTS: EventRecord, OutcomeRecord, LoadReport

WHAT THIS LAYER MUST NOT DO:
============================
- Derive dependency edges or layouts
- Abort a batch because one file is malformed
"""

from .config import StorageConfig, discover_content_root
from .loader import EventLoader, LoadResult, OutcomeLoader, load_content
from .parser import EventParser, OutcomeParser, Scope, parse_event, parse_outcome
from .writer import EventWriter

__all__ = [
    "EventLoader",
    "EventParser",
    "EventWriter",
    "LoadResult",
    "OutcomeLoader",
    "OutcomeParser",
    "Scope",
    "StorageConfig",
    "discover_content_root",
    "load_content",
    "parse_event",
    "parse_outcome",
]
