"""
State Layer

RESPONSIBILITY: Reload pipeline and snapshot publication
ALLOWED INPUTS: Loader results and derived edges
OUTPUTS: GraphSnapshot (immutable)

WHAT THIS LAYER MUST NOT DO:
============================
- Mutate a published snapshot (it is replaced, never edited)
- Publish a snapshot older than the one readers already see
"""

from .pipeline import ReloadPipeline
from .snapshot import GraphSnapshot, compute_fingerprint
from .store import SnapshotStore

__all__ = [
    "GraphSnapshot",
    "ReloadPipeline",
    "SnapshotStore",
    "compute_fingerprint",
]
