"""Shared test fixtures for all test modules."""

from textwrap import dedent

import pytest
import structlog

from timetracker.utils.logging import close_log_file


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any logging configuration a test (or CLI invocation) applied."""
    yield
    close_log_file()
    structlog.reset_defaults()


@pytest.fixture
def journal_dir(tmp_path):
    """Empty journal directory."""
    path = tmp_path / "journals"
    path.mkdir()
    return path


@pytest.fixture
def write_journal(journal_dir):
    """Write a dedented journal file into journal_dir and return its path."""

    def write(name: str, content: str, directory=None):
        target = (directory or journal_dir) / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(dedent(content), encoding="utf-8")
        return target

    return write
