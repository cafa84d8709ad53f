"""OAuth2 client-credentials token acquisition for Microsoft Graph."""

import requests

from ..config import GRAPH_SCOPE, REQUEST_TIMEOUT, TOKEN_URL_TEMPLATE
from ..errors import AuthenticationError
from ..logging_setup import log


class TokenAuthenticator:
    """
    Keeps the shared session's ``Authorization`` header populated with a valid
    app-only access token.

    ``ensure_authenticated()`` always requests a fresh token: it is called once
    before the crawl and again each time the API reports an expired token, so
    a cached token would defeat the retry.
    """

    def __init__(
        self,
        session: requests.Session,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        scope: str = GRAPH_SCOPE,
    ) -> None:
        self.session = session
        self.tenant_id = tenant_id
        self.client_id = client_id
        self.client_secret = client_secret
        self.scope = scope

    @property
    def token_url(self) -> str:
        return TOKEN_URL_TEMPLATE.format(tenant=self.tenant_id)

    def ensure_authenticated(self) -> None:
        payload = {
            "grant_type": "client_credentials",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "scope": self.scope,
        }
        try:
            resp = self.session.post(self.token_url, data=payload, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as exc:
            raise AuthenticationError(f"Token request failed: {exc}") from exc

        try:
            body = resp.json()
        except ValueError:
            body = {}

        if not resp.ok or "access_token" not in body:
            detail = body.get("error_description") or body.get("error") or resp.text[:200]
            raise AuthenticationError(
                f"Token request rejected (HTTP {resp.status_code}): {detail}"
            )

        self.session.headers["Authorization"] = f"Bearer {body['access_token']}"
        log.debug(
            "Access token acquired for tenant %s (expires in %ss)",
            self.tenant_id, body.get("expires_in"),
        )
