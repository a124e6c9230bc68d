"""Custom exceptions for timetracker services."""


class TimetrackerError(Exception):
    """Base class for errors that should stop a run."""


class ConfigError(TimetrackerError):
    """Raised when configuration cannot be loaded or validated.

    Attributes:
        path: Config file involved (None when the error came from the environment)
        message: Human-readable error message
    """

    def __init__(self, message: str, path: str | None = None):
        """Initialize ConfigError.

        Args:
            message: Human-readable error message
            path: Config file involved, if any
        """
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}" if path else message)
