"""
Pizza Menu Watch Errors

Failure taxonomy for a single watch run.
"""


class PizzaWatchError(Exception):
    """Base class for all pizza watch errors."""


class FetchError(PizzaWatchError):
    """The ordering page could not be fetched."""


class ExtractionError(PizzaWatchError):
    """The embedded state blob is missing or malformed."""

    MARKER_NOT_FOUND = "marker-not-found"
    UNBALANCED_BRACES = "unbalanced-braces"
    PARSE_FAILED = "parse-failed"

    def __init__(self, reason: str, detail: str | None = None):
        self.reason = reason
        self.detail = detail
        message = reason if not detail else f"{reason}: {detail}"
        super().__init__(message)


class StoreError(PizzaWatchError):
    """The snapshot file could not be read or written."""


class DispatchError(PizzaWatchError):
    """The notification webhook rejected or failed the request."""

    def __init__(self, status: int | None, body: str = ""):
        self.status = status
        self.body = body
        if status is None:
            super().__init__(f"Notification transport failed: {body}")
        else:
            super().__init__(f"Notification webhook returned HTTP {status}")


class LiteralParseError(PizzaWatchError):
    """Relaxed object literal text could not be parsed."""

    def __init__(self, message: str, position: int):
        self.position = position
        super().__init__(f"{message} at offset {position}")


class SchedulerError(PizzaWatchError):
    """Illegal scheduler state transition."""
