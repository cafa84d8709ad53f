"""
Per-request retry policy.

Every Graph call made by the crawler goes through :meth:`RequestRetrier.execute`.
Each call gets its own pair of counters:

* throttling (HTTP 429/503) sleeps ``5 * attempt ** attempt`` seconds
  (5 s, 20 s, 135 s …) and retries the same call;
* an expired token triggers a fresh ``ensure_authenticated()`` and a retry;
* a malformed payload is not retried and propagates as a skip signal;
* anything else is fatal.

Either counter passing ``max_retries`` ends the call with a fatal error.
"""

import time
from typing import Any, Callable

from ..config import DEFAULT_MAX_RETRY_COUNT, THROTTLE_BACKOFF_BASE
from ..errors import (
    AuthExhausted,
    AuthExpiredError,
    MalformedPayload,
    ThrottledError,
    ThrottleExhausted,
)
from ..logging_setup import log


def backoff_delay(attempt: int, base: int = THROTTLE_BACKOFF_BASE) -> int:
    """Seconds to wait before throttle retry number *attempt* (1-based)."""
    return base * attempt ** attempt


class RequestRetrier:
    """
    Wraps a single-request callable with the throttle / token-expiry policy.

    Args:
        fetch: Sends one request for a relative path and returns the parsed body.
        ensure_authenticated: Re-establishes the session after a 401.
        max_retries: Ceiling applied separately to each counter.
    """

    def __init__(
        self,
        fetch: Callable[[str], Any],
        ensure_authenticated: Callable[[], None],
        max_retries: int = DEFAULT_MAX_RETRY_COUNT,
    ) -> None:
        self.fetch = fetch
        self.ensure_authenticated = ensure_authenticated
        self.max_retries = max_retries

    def execute(self, path: str) -> Any:
        """
        Send the request for *path*, retrying throttling and token expiry.

        Args:
            path: Relative Graph path or absolute next link.

        Returns:
            The parsed JSON body of the first successful attempt.

        Raises:
            ThrottleExhausted: more than ``max_retries`` throttled attempts.
            AuthExhausted: more than ``max_retries`` token expiries.
            MalformedPayload: the body repeats a key; the caller skips the item.
            TransportError: any other failure, raised on first occurrence.
        """
        auth_retries = 0
        throttle_retries = 0
        while True:
            try:
                return self.fetch(path)
            except ThrottledError as exc:
                throttle_retries += 1
                if throttle_retries > self.max_retries:
                    raise ThrottleExhausted(
                        f"Still throttled after {self.max_retries} retries: {path}"
                    ) from exc
                delay = backoff_delay(throttle_retries)
                log.warning(
                    "Throttled on %s – waiting %ds (retry %d/%d)",
                    path, delay, throttle_retries, self.max_retries,
                )
                time.sleep(delay)
            except AuthExpiredError as exc:
                auth_retries += 1
                if auth_retries > self.max_retries:
                    raise AuthExhausted(
                        f"Authentication still rejected after {self.max_retries} "
                        f"re-authentications: {path}"
                    ) from exc
                log.warning(
                    "Access token expired on %s – re-authenticating (attempt %d/%d)",
                    path, auth_retries, self.max_retries,
                )
                self.ensure_authenticated()
            except MalformedPayload as exc:
                log.warning("Malformed payload from %s – skipping item: %s", path, exc)
                raise
