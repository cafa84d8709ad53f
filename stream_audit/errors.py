"""Exception hierarchy for the stream-audit crawler."""


class StreamAuditError(Exception):
    """Base class for every error raised by this package."""


class TransportError(StreamAuditError):
    """A Graph request failed for a reason that is not retried."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ThrottledError(TransportError):
    """The API rejected the request with a rate limit (HTTP 429/503)."""


class AuthExpiredError(TransportError):
    """The bearer token was rejected (HTTP 401)."""


class MalformedPayload(TransportError):
    """
    The response body is not usable JSON because it repeats an object key.

    Raised as a skip-this-item signal: callers drop the current item and
    carry on with the enclosing loop.
    """


class FatalError(StreamAuditError):
    """Retries for a single request are exhausted."""


class ThrottleExhausted(FatalError):
    pass


class AuthExhausted(FatalError):
    pass


class AuthenticationError(StreamAuditError):
    """An access token could not be obtained."""


class StorageError(StreamAuditError):
    """Uploading a finished result file failed."""


class NotFoundError(StreamAuditError):
    """Merge inputs are missing or the merge target already exists."""
