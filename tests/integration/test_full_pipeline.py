"""End-to-end tests: journal directories in, aggregated entries out."""

import io
from datetime import date, time, timedelta

from timetracker.cli import collect_entries
from timetracker.models.entry import WarningKind
from timetracker.services.csv_writer import write_entries


def render(result):
    stream = io.StringIO()
    write_entries(result.entries, stream, include_source=True, basename=True)
    return stream.getvalue()


class TestPipeline:
    """Tests for discovery, scanning and aggregation together."""

    def test_basic_journal(self, journal_dir, write_journal):
        """Test the two-entry journal."""
        write_journal(
            "2024-01-15.md",
            """\
            # 2024-01-15
            - 09:00-10:30 Write report #work
            - 14:00 Call client #work
            """,
        )

        result = collect_entries([journal_dir])

        assert result.warnings == ()
        first, second = result.entries
        assert (first.date, first.start, first.end) == (date(2024, 1, 15), time(9, 0), time(10, 30))
        assert first.duration == timedelta(minutes=90)
        assert first.tags == frozenset({"work"})
        assert second.end is None
        assert second.duration == timedelta(0)

    def test_runs_are_identical(self, journal_dir, write_journal):
        """Test that repeated runs over the same files give the same output."""
        for day in range(1, 8):
            write_journal(
                f"2024-02-{day:02d}.md",
                f"# 2024-02-{day:02d}\n- 09:00-10:00 Work #a\n- 23:00-01:00 Late #b\n- 12:00 Lunch\n",
            )

        first = render(collect_entries([journal_dir]))
        second = render(collect_entries([journal_dir], workers=4))

        assert first == second

    def test_file_order_kept_with_workers(self, journal_dir, write_journal):
        """Test that all entries of one file come before the next file's."""
        for name in ("a.md", "b.md", "c.md"):
            write_journal(
                name,
                "# 2024-03-01\n" + "".join(f"- {h:02d}:00 {name} {h}\n" for h in range(8, 18)),
            )

        result = collect_entries([journal_dir], workers=3)

        files = [entry.location.path.rsplit("/", 1)[-1] for entry in result.entries]
        assert files == ["a.md"] * 10 + ["b.md"] * 10 + ["c.md"] * 10
        lines = [entry.location.line for entry in result.entries[:10]]
        assert lines == sorted(lines)

    def test_malformed_lines_do_not_cost_entries(self, journal_dir, write_journal):
        """Test N good lines and M bad lines give N entries and M warnings."""
        write_journal(
            "mixed.md",
            """\
            # 2024-04-01
            - 09:00-10:00 Good one
            - 25:00 Bad hour
            - 10:00-11:00 Good two
            - 11:00-11:75 Bad minute
            - 12:00 Good three
            """,
        )

        result = collect_entries([journal_dir])

        assert [e.description for e in result.entries] == ["Good one", "Good two", "Good three"]
        assert len(result.warnings) == 2
        assert {w.kind for w in result.warnings} == {WarningKind.MALFORMED_LINE}
        assert [w.location.line for w in result.warnings] == [3, 5]

    def test_end_time_followed_by_punctuation(self, journal_dir, write_journal):
        """Test ranges with trailing punctuation and malformed end tokens."""
        write_journal(
            "punct.md",
            """\
            # 2024-01-15
            - 09:00-10:30. Write report
            - 11:00-10:3 Call
            - 13:00-1330 Lunch
            """,
        )

        result = collect_entries([journal_dir])

        (entry,) = result.entries
        assert entry.duration == timedelta(minutes=90)
        assert entry.description == "Write report"
        assert [w.location.line for w in result.warnings] == [3, 4]
        assert {w.kind for w in result.warnings} == {WarningKind.MALFORMED_LINE}

    def test_midnight_crossing(self, journal_dir, write_journal):
        """Test 23:30-00:15 lasts 45 minutes."""
        write_journal("night.md", "# 2024-05-01\n- 23:30-00:15 Deploy\n")

        (entry,) = collect_entries([journal_dir]).entries

        assert entry.duration == timedelta(minutes=45)
        assert entry.date == date(2024, 5, 1)

    def test_orphan_entry(self, journal_dir, write_journal):
        """Test an entry before any heading is skipped on its own."""
        write_journal(
            "orphan.md",
            """\
            Some intro text
            - 08:00 Too early
            # 2024-06-01
            - 09:00-09:30 Kept
            """,
        )

        result = collect_entries([journal_dir])

        assert [e.description for e in result.entries] == ["Kept"]
        (warning,) = result.warnings
        assert warning.kind is WarningKind.ORPHAN_ENTRY
        assert warning.location.line == 2

    def test_date_context_does_not_leak_between_files(self, journal_dir, write_journal):
        """Test that each file starts without a date."""
        write_journal("a.md", "# 2024-07-01\n- 09:00 In a\n")
        write_journal("b.md", "- 10:00 In b\n")

        result = collect_entries([journal_dir])

        assert len(result.entries) == 1
        assert result.warnings[0].kind is WarningKind.ORPHAN_ENTRY

    def test_infer_end_stops_at_date_change(self, journal_dir, write_journal):
        """Test open entries are only closed by the same day's next entry."""
        write_journal(
            "week.md",
            """\
            # 2024-08-01
            - 09:00 Morning
            - 11:00 Last of the day
            # 2024-08-02
            - 09:00 Next day
            """,
        )

        result = collect_entries([journal_dir], infer_end=True)

        assert [e.end for e in result.entries] == [time(11, 0), None, None]
        assert [e.duration_minutes for e in result.entries] == [120, 0, 0]
