"""Error types for reading ledger service payloads."""

from pathlib import Path


class ParseError(Exception):
    """Exception raised when a payload cannot be read."""

    def __init__(self, message: str, file_path: Path | None = None):
        """Initialize ParseError.

        Args:
            message: Error message.
            file_path: Optional path to the file that failed to parse.
        """
        self.file_path = file_path
        super().__init__(message)


class LoaderError(ParseError):
    """Exception raised when an input file is missing or has the wrong shape."""

    pass
