"""Configuration constants and the immutable crawl configuration."""

import os
from dataclasses import dataclass
from pathlib import Path

GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"
TOKEN_URL_TEMPLATE = "https://login.microsoftonline.com/{tenant}/oauth2/v2.0/token"
GRAPH_SCOPE = "https://graph.microsoft.com/.default"

# App registration credentials can also be supplied via environment variables
DEFAULT_TENANT_ID = os.environ.get("M365_TENANT_ID", "")
DEFAULT_CLIENT_ID = os.environ.get("M365_CLIENT_ID", "")
DEFAULT_CLIENT_SECRET = os.environ.get("M365_CLIENT_SECRET", "")
DEFAULT_SUBSCRIPTION_ID = os.environ.get("AZURE_SUBSCRIPTION_ID", "")

DEFAULT_OUTPUT = "stream_audit_output"
DEFAULT_PAGE_SIZE = 200
DEFAULT_RESULT_SIZE = 5000
DEFAULT_MAX_RETRY_COUNT = 3
DEFAULT_CONTAINER = "stream-audit"

REQUEST_TIMEOUT = 30  # seconds per HTTP request

# Throttle backoff: BASE * attempt ** attempt seconds
THROTTLE_BACKOFF_BASE = 5

# Any embed code referencing this domain points at Stream (Classic)
DEPRECATED_VIDEO_MARKER = "microsoftstream.com"

RESULT_EXTENSION = ".csv"
RESULT_DELIMITER = ";"
RUN_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"

UPLOAD_ERROR_POLICIES = ("abort", "continue")


@dataclass(frozen=True)
class CrawlConfig:
    """Settings for one crawl run. Built once by the CLI and never mutated."""

    output_dir: Path = Path(DEFAULT_OUTPUT)
    site_id: str | None = None
    page_size: int = DEFAULT_PAGE_SIZE
    result_size: int | None = DEFAULT_RESULT_SIZE
    max_retry_count: int = DEFAULT_MAX_RETRY_COUNT
    export: bool = False
    resource_group: str | None = None
    storage_account: str | None = None
    container: str = DEFAULT_CONTAINER
    write_header: bool = False
    on_upload_error: str = "abort"
    cache_owners: bool = False
    verbose: bool = False
    progress: bool = True

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError(f"page_size must be positive, got {self.page_size}")
        if self.max_retry_count < 0:
            raise ValueError(f"max_retry_count must not be negative, got {self.max_retry_count}")
        if self.on_upload_error not in UPLOAD_ERROR_POLICIES:
            raise ValueError(
                f"on_upload_error must be one of {UPLOAD_ERROR_POLICIES}, "
                f"got {self.on_upload_error!r}"
            )
        if self.export and not self.storage_account:
            raise ValueError("export requires a storage account name")

    @property
    def result_cap(self) -> int | None:
        """The result-size cap, or None when it is disabled (None or 0)."""
        return self.result_size or None
