"""
Storage Configuration

Locates the content root that holds ``events/`` and ``outcomes/``.

RESOLUTION ORDER:
1. Explicit ``content_root`` argument
2. ``EVENTGRAPH_CONTENT_ROOT`` environment variable
3. ``content_root`` key of a JSON config file
4. A ``content`` directory in the working directory or its two parents
5. ``~/.eventgraph/content``
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple
import json
import logging
import os

logger = logging.getLogger(__name__)

CONTENT_ROOT_ENV = "EVENTGRAPH_CONTENT_ROOT"
CONTENT_DIR_NAME = "content"
RECORD_EXTENSION = ".toml"


@dataclass(frozen=True)
class StorageConfig:
    """Where record files live and which of them are records."""
    base_path: Path
    events_dir: str = "events"
    outcomes_dir: str = "outcomes"
    extension: str = RECORD_EXTENSION

    @property
    def events_path(self) -> Path:
        return self.base_path / self.events_dir

    @property
    def outcomes_path(self) -> Path:
        return self.base_path / self.outcomes_dir

    @classmethod
    def load(
        cls,
        config_path: Optional[Path] = None,
        content_root: Optional[Path] = None
    ) -> StorageConfig:
        """Resolve the content root and build a config."""
        if content_root is not None:
            return cls(base_path=Path(content_root))

        env_root = os.environ.get(CONTENT_ROOT_ENV)
        if env_root:
            return cls(base_path=Path(env_root))

        if config_path is not None:
            return cls.from_file(Path(config_path))

        return cls(base_path=discover_content_root())

    @classmethod
    def from_file(cls, config_path: Path) -> StorageConfig:
        """
        Load from a JSON file.

        Relative ``content_root`` values resolve against the file's directory.
        """
        with open(config_path, 'r', encoding='utf-8') as f:
            config = json.load(f)

        root = Path(config.get('content_root', CONTENT_DIR_NAME))
        if not root.is_absolute():
            root = config_path.parent / root

        return cls(
            base_path=root,
            events_dir=config.get('events_dir', 'events'),
            outcomes_dir=config.get('outcomes_dir', 'outcomes'),
            extension=config.get('extension', RECORD_EXTENSION)
        )


def _candidate_roots(start: Path) -> Tuple[Path, ...]:
    parents = (start, start.parent, start.parent.parent)
    return tuple(p / CONTENT_DIR_NAME for p in parents)


def discover_content_root(start: Optional[Path] = None) -> Path:
    """First existing candidate, else the per-user fallback (may not exist)."""
    start = Path(start) if start is not None else Path.cwd()
    for candidate in _candidate_roots(start):
        if candidate.exists():
            return candidate

    fallback = Path.home() / ".eventgraph" / CONTENT_DIR_NAME
    logger.info("No content directory near %s, falling back to %s", start, fallback)
    return fallback
