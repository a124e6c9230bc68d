"""Unit tests for the journal scanner."""

from datetime import date, time
from textwrap import dedent

import pytest

from timetracker.journal.scanner import (
    JournalFile,
    date_from_filename,
    scan_journal,
    scan_sources,
)
from timetracker.models.entry import SourceLocation, WarningKind


class TestScanJournal:
    """Tests for scanning a single file."""

    def test_empty_text(self):
        """Test that empty input is a valid, empty result."""
        result = scan_journal("", "empty.md")

        assert result.source == "empty.md"
        assert result.records == ()
        assert result.warnings == ()

    def test_prose_only(self):
        """Test a journal without any time entries."""
        text = dedent(
            """\
            # Thoughts
            Nothing tracked today.
            - Buy milk
            """
        )
        result = scan_journal(text, "prose.md")

        assert result.records == ()
        assert result.warnings == ()

    def test_entries_take_nearest_heading_date(self):
        """Test that each heading switches the active date."""
        text = dedent(
            """\
            # 2024-01-15
            - 09:00-10:00 Monday work
            # 2024-01-16
            - 09:00-10:00 Tuesday work
            - 11:00 More Tuesday work
            """
        )
        result = scan_journal(text, "week.md")

        assert [r.date for r in result.records] == [
            date(2024, 1, 15),
            date(2024, 1, 16),
            date(2024, 1, 16),
        ]
        assert [r.description for r in result.records] == [
            "Monday work",
            "Tuesday work",
            "More Tuesday work",
        ]

    def test_unrelated_heading_keeps_date(self):
        """Test that non-date headings don't reset the active date."""
        text = dedent(
            """\
            # 2024-01-15
            ## Meetings
            - 10:00-11:00 Planning
            """
        )
        result = scan_journal(text, "day.md")

        assert len(result.records) == 1
        assert result.records[0].date == date(2024, 1, 15)

    def test_invalid_date_heading_keeps_previous_date(self):
        """Test that an impossible date heading is ignored."""
        text = dedent(
            """\
            # 2024-01-15
            # 2024-02-30
            - 10:00-11:00 Planning
            """
        )
        result = scan_journal(text, "day.md")

        assert result.records[0].date == date(2024, 1, 15)
        assert result.warnings == ()

    def test_line_numbers_are_one_based(self):
        """Test source locations for records and warnings."""
        text = dedent(
            """\
            # 2024-01-15

            - 09:00-10:00 Work
            - 25:00 Broken
            """
        )
        result = scan_journal(text, "day.md")

        assert result.records[0].location == SourceLocation("day.md", 3)
        assert result.warnings[0].location == SourceLocation("day.md", 4)

    def test_orphan_entry_does_not_skip_others(self):
        """Test entry before the first heading."""
        text = dedent(
            """\
            - 08:00-08:30 Too early
            # 2024-01-15
            - 09:00-10:00 Work
            """
        )
        result = scan_journal(text, "day.md")

        assert len(result.records) == 1
        assert result.records[0].description == "Work"
        assert len(result.warnings) == 1
        assert result.warnings[0].kind is WarningKind.ORPHAN_ENTRY
        assert result.warnings[0].text == "- 08:00-08:30 Too early"

    def test_malformed_lines_interleaved(self):
        """Test N good entries and M bad lines give N records and M warnings."""
        text = dedent(
            """\
            # 2024-01-15
            - 09:00-10:00 One
            - 25:99 Bad start
            - 10:00-11:00 Two
            - 11:00-61:00 Bad end
            - 12:00 Three
            - 99:99-00:00 Bad again
            - 13:00-14:00 Four
            """
        )
        result = scan_journal(text, "day.md")

        assert [r.description for r in result.records] == ["One", "Two", "Three", "Four"]
        assert len(result.warnings) == 3
        assert all(w.kind is WarningKind.MALFORMED_LINE for w in result.warnings)

    def test_default_date_before_first_heading(self):
        """Test that a default date makes early entries valid."""
        text = dedent(
            """\
            - 08:00-08:30 Early
            # 2024-01-16
            - 09:00-10:00 Later
            """
        )
        result = scan_journal(text, "2024-01-15.md", default_date=date(2024, 1, 15))

        assert [r.date for r in result.records] == [date(2024, 1, 15), date(2024, 1, 16)]
        assert result.warnings == ()

    def test_windows_line_endings(self):
        """Test CRLF input."""
        result = scan_journal("# 2024-01-15\r\n- 09:00-10:00 Work\r\n", "crlf.md")

        assert len(result.records) == 1
        assert result.records[0].end == time(10, 0)
        assert result.records[0].description == "Work"


class TestJournalFile:
    """Tests for the per-file scanner state."""

    def test_heading_overrides_state(self):
        """Test state transitions on headings."""
        journal = JournalFile(source="x.md")
        assert journal.active_date is None

        journal.feed("# 2024-01-15", 1)
        assert journal.active_date == date(2024, 1, 15)

        journal.feed("# 2024-03-01", 2)
        assert journal.active_date == date(2024, 3, 1)

    def test_ignorable_line_changes_nothing(self):
        """Test that prose leaves state and output untouched."""
        journal = JournalFile(source="x.md", active_date=date(2024, 1, 15))
        journal.feed("Some prose", 1)

        assert journal.active_date == date(2024, 1, 15)
        assert journal.records == []
        assert journal.warnings == []


class TestDateFromFilename:
    """Tests for file name dates."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("2025-01-15.md", date(2025, 1, 15)),
            ("2025_01_15.md", date(2025, 1, 15)),
            ("journals/2023/2023-12-31-notes.md", date(2023, 12, 31)),
        ],
    )
    def test_dated_names(self, name, expected):
        """Test ISO and Logseq file names."""
        assert date_from_filename(name) == expected

    @pytest.mark.parametrize("name", ["notes.md", "2025-13-01.md", "v2025-01-15.md"])
    def test_undated_names(self, name):
        """Test names without a valid leading date."""
        assert date_from_filename(name) is None


class TestScanSources:
    """Tests for scanning several files."""

    SOURCES = [
        ("b.md", "# 2024-01-02\n- 09:00-10:00 From b"),
        ("a.md", "# 2024-01-01\n- 09:00-10:00 From a"),
        ("c.md", "- 09:00 Orphan in c"),
    ]

    def test_results_in_input_order(self):
        """Test that results follow input order, not name order."""
        results = scan_sources(self.SOURCES)

        assert [r.source for r in results] == ["b.md", "a.md", "c.md"]
        assert len(results[2].warnings) == 1

    @pytest.mark.parametrize("workers", [2, 4, 8])
    def test_parallel_matches_sequential(self, workers):
        """Test that concurrent scanning gives identical results."""
        sources = [(f"{i:03d}.md", f"# 2024-01-01\n- {i % 24:02d}:00 Entry {i}") for i in range(50)]

        assert scan_sources(sources, workers=workers) == scan_sources(sources, workers=1)

    def test_date_from_name(self):
        """Test file name dates for files without headings."""
        results = scan_sources([("2024-05-06.md", "- 09:00-10:00 Work")], date_from_name=True)

        assert results[0].records[0].date == date(2024, 5, 6)
        assert results[0].warnings == ()
