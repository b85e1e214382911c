"""Error taxonomy for the ingest pipeline."""

from __future__ import annotations


class PipelineError(Exception):
    """Client-side rejection of a reading; maps to HTTP 400."""

    def __init__(self, message: str, *, field: str, raw_value: str) -> None:
        super().__init__(message)
        self.field = field
        self.raw_value = raw_value


class DecodeError(PipelineError):
    """Raised when a recognized numeric parameter is not a valid number."""

    def __init__(self, field: str, raw_value: str) -> None:
        super().__init__(
            f"Error parsing value for {field}: {raw_value!r}",
            field=field,
            raw_value=raw_value,
        )


class TimestampError(PipelineError):
    """Raised when the station supplied a date string that cannot be parsed."""

    def __init__(self, raw_value: str, field: str = "dateutc") -> None:
        super().__init__(
            f"Invalid date format for {field}: {raw_value!r} "
            "(expected 'YYYY-MM-DD HH:MM:SS' UTC)",
            field=field,
            raw_value=raw_value,
        )


class StorageWriteError(Exception):
    """Raised when the time-series store rejects or fails a write."""

    def __init__(self, message: str, *, storage: str) -> None:
        super().__init__(message)
        self.storage = storage


class DialectError(ValueError):
    """Raised for inconsistent or unknown dialect configuration."""
