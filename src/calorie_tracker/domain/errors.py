"""Error taxonomy surfaced to request handlers."""


class TrackerError(Exception):
    """Base class for errors raised by the tracker core."""


class ValidationFailed(TrackerError):
    """Request was malformed and was rejected before any resolution."""


class InvalidSource(ValidationFailed):
    """Entry request does not reference any food source."""


class NotFound(TrackerError):
    """Referenced entry or food does not exist or is not owned by the caller."""


class UpstreamUnavailable(TrackerError):
    """The relational store failed; the request may be retried."""

    retry_after_seconds = 5


class RateLimited(TrackerError):
    """Request budget for an operation class is exhausted."""

    def __init__(self, operation: str, reset_seconds: int) -> None:
        super().__init__(
            f"Rate limit exceeded for {operation}; retry in {reset_seconds}s"
        )
        self.operation = operation
        self.reset_seconds = reset_seconds
