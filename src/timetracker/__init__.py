"""timetracker - Extract time tracking entries from Markdown journals into CSV."""

__version__ = "1.0.0"
