"""
Event Writer Tests
==================

The year rewrite touches only year lines; every other byte survives.
"""

from eventgraph.ingestion.parser import parse_event
from eventgraph.ingestion.writer import EventWriter

EVENT_WITH_YEARS = (
    '[event]\n'
    'id = "e"\n'
    'title = "Year = test"\n'
    '\n'
    '[event.conditions]\n'
    '  min_year = 1040\n'
    'max_year = 1045   \n'
    'required_outcomes = ["a"]\n'
    '\n'
    '[[event.options]]\n'
    'min_year = 1\n'
)

EVENT_WITHOUT_YEARS = (
    '[event]\r\n'
    'id = "e"\r\n'
    'title = "E"\r\n'
    '[event.conditions]\r\n'
    'required_outcomes = ["a"]\r\n'
)


class TestEventWriter:

    def test_rewrites_in_place(self, tmp_path):
        path = tmp_path / "e.toml"
        path.write_text(EVENT_WITH_YEARS, encoding="utf-8")

        assert EventWriter().update_event_years(path, 1050, 1060) is True

        lines = path.read_text(encoding="utf-8").splitlines(keepends=True)
        original = EVENT_WITH_YEARS.splitlines(keepends=True)
        assert lines[5] == "  min_year = 1050\n"
        assert lines[6] == "max_year = 1060\n"
        # Everything else untouched, including the year-like line in options
        for index in (0, 1, 2, 3, 4, 7, 8, 9, 10):
            assert lines[index] == original[index]

    def test_only_min_year(self, tmp_path):
        path = tmp_path / "e.toml"
        path.write_text(EVENT_WITH_YEARS, encoding="utf-8")

        EventWriter().update_event_years(path, 1041, None)

        event = parse_event(path.read_text(encoding="utf-8"))
        assert (event.min_year, event.max_year) == (1041, 1045)

    def test_inserts_after_conditions_header(self, tmp_path):
        path = tmp_path / "e.toml"
        path.write_bytes(EVENT_WITHOUT_YEARS.encode("utf-8"))

        EventWriter().update_event_years(path, 1050, 1055)

        data = path.read_bytes().decode("utf-8")
        assert data == (
            '[event]\r\n'
            'id = "e"\r\n'
            'title = "E"\r\n'
            '[event.conditions]\r\n'
            'min_year = 1050\r\n'
            'max_year = 1055\r\n'
            'required_outcomes = ["a"]\r\n'
        )

    def test_array_continuation_keeps_conditions_scope(self, tmp_path):
        path = tmp_path / "e.toml"
        path.write_text(
            '[event]\nid = "e"\ntitle = "E"\n'
            '[event.conditions]\n'
            'required_outcomes_any = [["a"],\n'
            '    ["b"]]\n'
            'max_year = 1045\n',
            encoding="utf-8"
        )

        EventWriter().update_event_years(path, None, 1050)

        text = path.read_text(encoding="utf-8")
        assert text.count("max_year") == 1
        assert text.endswith("max_year = 1050\n")

    def test_single_year_field(self, tmp_path):
        path = tmp_path / "n.toml"
        path.write_text('[event]\nid = "n"\ntitle = "N"\nyear = 1042\n', encoding="utf-8")

        EventWriter().update_event_years(path, 1044, None)

        assert path.read_text(encoding="utf-8") == '[event]\nid = "n"\ntitle = "N"\nyear = 1044\n'
        assert parse_event(path.read_text(encoding="utf-8")).year_range == (1044, 1044)

    def test_no_conditions_and_no_year_is_unchanged(self, tmp_path):
        path = tmp_path / "n.toml"
        text = '[event]\nid = "n"\ntitle = "N"'
        path.write_text(text, encoding="utf-8")

        assert EventWriter().update_event_years(path, 1044, 1050) is False
        assert path.read_text(encoding="utf-8") == text

    def test_missing_file(self, tmp_path):
        assert EventWriter().update_event_years(tmp_path / "missing.toml", 1, 2) is False

    def test_apply_is_pure(self):
        lines = EVENT_WITH_YEARS.splitlines(keepends=True)
        snapshot = list(lines)

        EventWriter().apply(lines, 1, 2)

        assert lines == snapshot
