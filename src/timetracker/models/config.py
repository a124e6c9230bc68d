"""Configuration models for timetracker."""

from pydantic import BaseModel, Field, field_validator
from typing import Literal


LogLevel = Literal["error", "warn", "info", "debug", "trace"]


class JournalConfig(BaseModel):
    """Where journals live and which files count as journals."""

    directories: list[str] = Field(
        default_factory=list,
        description="Directories to search for journal files"
    )

    recursive: bool = Field(
        default=False,
        description="Recurse into subdirectories"
    )

    extensions: list[str] = Field(
        default_factory=lambda: [".md"],
        description="File suffixes treated as journals"
    )

    date_from_filename: bool = Field(
        default=False,
        description="Use a YYYY-MM-DD / YYYY_MM_DD file name as the initial date"
    )

    @field_validator("extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        """Lower-case suffixes and make sure each starts with a dot."""
        normalized = []
        for ext in v:
            ext = ext.strip().lower()
            if not ext:
                raise ValueError("File extension must not be empty")
            if not ext.startswith("."):
                ext = f".{ext}"
            normalized.append(ext)
        if not normalized:
            raise ValueError("At least one journal file extension is required")
        return normalized

    model_config = {"frozen": True}


class OutputConfig(BaseModel):
    """CSV output settings."""

    tag_delimiter: str = Field(
        default=",",
        min_length=1,
        description="Separator placed between tags in the tags column"
    )

    strip_tags: bool = Field(
        default=False,
        description="Write descriptions without #tag tokens"
    )

    include_source: bool = Field(
        default=False,
        description="Append file and line columns"
    )

    basename: bool = Field(
        default=False,
        description="Print only the basename of source files"
    )

    model_config = {"frozen": True}


class ScanConfig(BaseModel):
    """Scanning behaviour."""

    workers: int = Field(
        default=1,
        ge=1,
        le=64,
        description="Number of files scanned concurrently"
    )

    infer_end: bool = Field(
        default=False,
        description="Close open-ended entries at the next entry's start"
    )

    model_config = {"frozen": True}


class Config(BaseModel):
    """Root configuration for timetracker."""

    journal: JournalConfig = Field(default_factory=JournalConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    log_level: LogLevel = Field(default="warn", description="Log verbosity")

    model_config = {"frozen": True}
