"""HTTP session management for the stream-audit crawler."""

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from . import __version__


def build_session(verify_ssl: bool = True) -> requests.Session:
    """Return a requests.Session with connection-level retries and keep-alive."""
    session = requests.Session()
    # 429 and 503 are throttling signals handled by RequestRetrier,
    # so they must reach it instead of being retried here.
    retry = Retry(
        total=3,
        backoff_factor=0.5,
        status_forcelist=[500, 502, 504],
        allowed_methods=["GET"],
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.verify = verify_ssl
    session.headers.update({
        "User-Agent": f"stream-audit/{__version__}",
        "Accept": "application/json",
        "Connection": "keep-alive",
    })
    return session
