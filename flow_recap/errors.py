from __future__ import annotations


class RecapError(Exception):
    """Base class for failures reported to the user."""


class StoreUnavailable(RecapError):
    def __init__(self, db_file, reason: str = "") -> None:
        self.db_file = db_file
        message = f"Wispr Flow database not found at: {db_file}"
        if reason:
            message = f"Could not open Wispr Flow database at {db_file}: {reason}"
        super().__init__(message)


class InvalidPeriodInput(RecapError, ValueError):
    def __init__(self, value: str, expected: str) -> None:
        self.value = value
        super().__init__(f"Invalid date '{value}'. Use formats like: {expected}")


class MalformedEvent(RecapError, ValueError):
    """A single history row that cannot be aggregated. Never fatal."""

    def __init__(self, event_id: str, reason: str) -> None:
        self.event_id = event_id
        super().__init__(f"event {event_id}: {reason}")
