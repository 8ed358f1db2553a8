"""
Loader Tests
============

Batch scans over a temporary content root.

INVARIANTS TESTED:
1. Directory scans are recursive and filtered by extension
2. A malformed or unreadable file is reported and skipped, never fatal
3. A missing directory yields zero records
"""

import json
import logging

import pytest

from eventgraph.contracts.base import ErrorCode
from eventgraph.contracts.records import EventCategory
from eventgraph.ingestion import loader as loader_module
from eventgraph.ingestion.config import CONTENT_ROOT_ENV, StorageConfig, discover_content_root
from eventgraph.ingestion.loader import EventLoader, OutcomeLoader, load_content

from tests.fixtures import CRISIS_EVENT, sample_content, write_content


@pytest.fixture
def content_root(tmp_path):
    return sample_content(tmp_path / "content")


class TestEventLoader:

    def test_loads_recursively_with_categories(self, content_root):
        result = EventLoader(StorageConfig(base_path=content_root)).load_all_events()

        categories = {event.id: event.category for event in result.records}
        assert categories == {
            "revolt_of_maniakes": EventCategory.CRISIS,
            "schism_council": EventCategory.SITUATION,
            "coronation_1042": EventCategory.NARRATIVE,
        }
        assert result.report.loaded == 3
        assert result.report.issues == ()

    def test_scan_order_is_sorted(self, content_root):
        result = EventLoader(StorageConfig(base_path=content_root)).load_all_events()
        paths = [event.source_path for event in result.records]
        assert paths == sorted(paths)

    def test_other_extensions_ignored(self, content_root):
        write_content(content_root, {
            "events/crisis/notes.txt": CRISIS_EVENT,
            "events/crisis/backup.toml.bak": CRISIS_EVENT,
        })
        result = EventLoader(StorageConfig(base_path=content_root)).load_all_events()

        assert result.report.scanned == 3
        assert len(result.records) == 3

    def test_missing_required_field_reported(self, content_root):
        write_content(content_root, {"events/crisis/broken.toml": '[event]\nid = "x"\n'})
        result = EventLoader(StorageConfig(base_path=content_root)).load_all_events()

        assert len(result.records) == 3
        (issue,) = result.report.issues
        assert issue.code == ErrorCode.MISSING_REQUIRED_FIELD
        assert issue.path.endswith("broken.toml")

    def test_undecodable_file_skipped(self, content_root):
        bad = content_root / "events" / "crisis" / "binary.toml"
        bad.write_bytes(b"\xff\xfe\x00[event]")

        result = EventLoader(StorageConfig(base_path=content_root)).load_all_events()

        assert len(result.records) == 3
        assert result.report.issues_with(ErrorCode.UNREADABLE_FILE)[0].path == str(bad)

    def test_parser_crash_does_not_abort_batch(self, content_root, monkeypatch, caplog):
        original = loader_module.parse_event

        def flaky(content, category, source_path=None):
            if source_path.endswith("schism_council.toml"):
                raise RuntimeError("boom")
            return original(content, category, source_path=source_path)

        monkeypatch.setattr(loader_module, "parse_event", flaky)
        with caplog.at_level(logging.WARNING, logger="eventgraph"):
            result = EventLoader(StorageConfig(base_path=content_root)).load_all_events()

        assert {e.id for e in result.records} == {"revolt_of_maniakes", "coronation_1042"}
        assert result.report.issues[0].code == ErrorCode.MALFORMED_RECORD
        assert result.report.issues[0].error.context == (("exception", "RuntimeError"),)
        assert "boom" in caplog.text

    def test_missing_directory_yields_nothing(self, tmp_path):
        result = EventLoader(StorageConfig(base_path=tmp_path / "nowhere")).load_all_events()

        assert result.records == ()
        assert result.report.issues[0].code == ErrorCode.MISSING_RESOURCE


class TestOutcomeLoader:

    def test_category_is_parent_directory(self, content_root):
        result = OutcomeLoader(StorageConfig(base_path=content_root)).load_all_outcomes()

        (outcome,) = result.records
        assert outcome.category == "military"

    def test_load_content_returns_both(self, content_root):
        events, outcomes = load_content(StorageConfig(base_path=content_root))

        assert len(events.records) == 3
        assert len(outcomes.records) == 1
        assert events.report.merge(outcomes.report).loaded == 4


class TestStorageConfig:

    def test_explicit_root_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv(CONTENT_ROOT_ENV, str(tmp_path / "env"))
        config = StorageConfig.load(content_root=tmp_path / "explicit")

        assert config.base_path == tmp_path / "explicit"
        assert config.events_path == tmp_path / "explicit" / "events"

    def test_env_var(self, tmp_path, monkeypatch):
        monkeypatch.setenv(CONTENT_ROOT_ENV, str(tmp_path / "env"))
        assert StorageConfig.load().base_path == tmp_path / "env"

    def test_json_file_relative_root(self, tmp_path, monkeypatch):
        monkeypatch.delenv(CONTENT_ROOT_ENV, raising=False)
        config_path = tmp_path / "eventgraph.json"
        config_path.write_text(json.dumps({"content_root": "pack", "extension": ".rec"}))

        config = StorageConfig.load(config_path=config_path)

        assert config.base_path == tmp_path / "pack"
        assert config.extension == ".rec"

    def test_discovery_walks_up(self, tmp_path):
        (tmp_path / "content").mkdir()
        nested = tmp_path / "tools" / "viewer"
        nested.mkdir(parents=True)

        assert discover_content_root(nested) == tmp_path / "content"
