# scopus_fetcher/exceptions.py
"""Custom exceptions for the fetcher application."""


class FileAccessError(Exception):
    """Raised when the source bibliography file cannot be opened or read."""

    pass


class LookupFailed(Exception):
    """Base for per-DOI lookup failures. These are logged and skipped."""

    pass


class NetworkError(LookupFailed):
    """Raised on transport-level failures (connection, DNS, timeout)."""

    pass


class UpstreamError(LookupFailed):
    """Raised when the Scopus API answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str | None = None):
        self.status_code = status_code
        super().__init__(message or f"Scopus API returned status code {status_code}")


class DecodeError(LookupFailed):
    """Raised when a response body cannot be parsed after normalization."""

    pass


class SerializationError(Exception):
    """Raised when the result collection cannot be encoded as JSON."""

    pass


class FileWriteError(Exception):
    """Raised when the JSON output file cannot be written."""

    pass


class WorkbookError(Exception):
    """Raised when the spreadsheet cannot be built or saved."""

    pass


class UsageError(Exception):
    """Raised when a required interactive input is left blank."""

    pass
