"""
Microsoft Graph transport.

Turns HTTP outcomes into the typed errors of :mod:`stream_audit.errors` so
that :class:`~stream_audit.core.retry.RequestRetrier` never has to inspect
message text, and normalizes collection responses to plain lists.
"""

import json
from typing import Any

import requests

from ..config import GRAPH_BASE_URL, REQUEST_TIMEOUT
from ..errors import (
    AuthExpiredError,
    MalformedPayload,
    ThrottledError,
    TransportError,
)
from ..logging_setup import log

THROTTLE_STATUS_CODES = frozenset([429, 503])
AUTH_STATUS_CODES = frozenset([401])


class _DuplicateKeyError(ValueError):
    pass


def _reject_duplicate_keys(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    obj: dict[str, Any] = {}
    for key, value in pairs:
        if key in obj:
            raise _DuplicateKeyError(f"duplicated key {key!r}")
        obj[key] = value
    return obj


def parse_json(text: str) -> Any:
    """
    Parse a response body, refusing objects that repeat a key.

    Some SharePoint pages carry web-part payloads with duplicated keys; the
    stdlib parser would silently keep the last value, hiding the corruption.
    """
    try:
        return json.loads(text, object_pairs_hook=_reject_duplicate_keys)
    except _DuplicateKeyError as exc:
        raise MalformedPayload(f"Response contains a {exc}") from exc
    except ValueError as exc:
        raise TransportError(f"Response is not valid JSON: {exc}") from exc


def normalise_collection(body: Any) -> list[Any]:
    """
    Return the items of a Graph response as a list of 0..N entries.

    Collections arrive as ``{"value": [...]}``; a lookup by id returns the bare
    object, and ``value`` may itself hold a single object.
    """
    if body is None:
        return []
    if isinstance(body, list):
        return body
    if isinstance(body, dict):
        if "value" in body:
            value = body["value"]
            if value is None:
                return []
            return value if isinstance(value, list) else [value]
        items = {k: v for k, v in body.items() if not k.startswith("@odata.")}
        return [body] if items else []
    return [body]


def next_link(body: Any) -> str | None:
    """Continuation cursor of a paged collection, or None on the last page."""
    if isinstance(body, dict):
        return body.get("@odata.nextLink") or None
    return None


def _error_message(resp: requests.Response) -> str:
    try:
        err = resp.json().get("error", {})
        if isinstance(err, dict):
            return f"{err.get('code', '')}: {err.get('message', '')}".strip(": ")
        return str(err)
    except (ValueError, AttributeError):
        return resp.text[:200]


class GraphClient:
    """Sends authenticated GET requests to the Graph API."""

    def __init__(self, session: requests.Session, base: str = GRAPH_BASE_URL) -> None:
        self.session = session
        self.base = base.rstrip("/")

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base}/{path.lstrip('/')}"

    def get_json(self, path: str) -> Any:
        url = self.url_for(path)
        log.debug("GET %s", url)
        try:
            resp = self.session.get(url, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as exc:
            raise TransportError(f"Request failed for {url}: {exc}") from exc

        if resp.status_code in THROTTLE_STATUS_CODES:
            raise ThrottledError(
                f"Throttled (HTTP {resp.status_code}) for {url}: {_error_message(resp)}",
                status_code=resp.status_code,
            )
        if resp.status_code in AUTH_STATUS_CODES:
            raise AuthExpiredError(
                f"Authentication required (HTTP {resp.status_code}) for {url}: "
                f"{_error_message(resp)}",
                status_code=resp.status_code,
            )
        if not resp.ok:
            raise TransportError(
                f"HTTP {resp.status_code} for {url}: {_error_message(resp)}",
                status_code=resp.status_code,
            )

        log.debug("  ← HTTP %s  %d bytes", resp.status_code, len(resp.content))
        if not resp.text.strip():
            return None
        return parse_json(resp.text)
