"""
Command-line interface for the stream-audit crawler.

``stream-audit``        crawl the tenant and write result files
``stream-audit-merge``  merge result files into one CSV
"""

import argparse
import getpass
import logging
import sys
from datetime import datetime
from pathlib import Path

from .auth import TokenAuthenticator
from .config import (
    DEFAULT_CLIENT_ID,
    DEFAULT_CLIENT_SECRET,
    DEFAULT_CONTAINER,
    DEFAULT_MAX_RETRY_COUNT,
    DEFAULT_OUTPUT,
    DEFAULT_PAGE_SIZE,
    DEFAULT_RESULT_SIZE,
    DEFAULT_SUBSCRIPTION_ID,
    DEFAULT_TENANT_ID,
    RUN_TIMESTAMP_FORMAT,
    UPLOAD_ERROR_POLICIES,
    CrawlConfig,
)
from .core import Crawler, RequestRetrier, ResultSink
from .errors import StreamAuditError
from .logging_setup import _setup_logging, log
from .merge import merge_csv_files
from .network import GraphClient
from .session import build_session
from .storage import BlobUploader


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments for the crawl.

    Args:
        argv: Argument list; ``None`` reads ``sys.argv``.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Find SharePoint pages that still embed Microsoft Stream (Classic) "
                    "videos and report them as CSV.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Credentials can also be provided via the M365_TENANT_ID, M365_CLIENT_ID\n"
            "and M365_CLIENT_SECRET env vars.  If the client secret is not supplied\n"
            "and not in the environment, you will be prompted for it."
        ),
    )
    parser.add_argument("--tenant-id", default=DEFAULT_TENANT_ID,
                        help="Azure AD tenant id or domain")
    parser.add_argument("--client-id", default=DEFAULT_CLIENT_ID,
                        help="App registration (client) id")
    parser.add_argument("--client-secret", default=DEFAULT_CLIENT_SECRET,
                        help="App registration secret (overrides M365_CLIENT_SECRET)")
    parser.add_argument("--site-id", default=None,
                        help="Only crawl the site with this Graph site id")
    parser.add_argument("--page-size", type=int, default=DEFAULT_PAGE_SIZE,
                        help=f"Sites per listing request (default: {DEFAULT_PAGE_SIZE})")
    parser.add_argument("--result-size", type=int, default=DEFAULT_RESULT_SIZE,
                        help=f"Stop after about this many sites, 0 for no limit "
                             f"(default: {DEFAULT_RESULT_SIZE})")
    parser.add_argument("--max-retry-count", type=int, default=DEFAULT_MAX_RETRY_COUNT,
                        help=f"Retries per request for throttling and token expiry "
                             f"(default: {DEFAULT_MAX_RETRY_COUNT})")
    parser.add_argument("--output", default=DEFAULT_OUTPUT,
                        help=f"Directory for result files (default: {DEFAULT_OUTPUT})")
    parser.add_argument("--header", dest="write_header", action="store_true",
                        help="Write a header row at the top of each result file")
    parser.add_argument("--export", action="store_true",
                        help="Upload each finished result file to Azure Blob Storage")
    parser.add_argument("--resource-group", default=None,
                        help="Resource group of the storage account")
    parser.add_argument("--storage-account", default=None,
                        help="Storage account name")
    parser.add_argument("--container", default=DEFAULT_CONTAINER,
                        help=f"Blob container (default: {DEFAULT_CONTAINER})")
    parser.add_argument("--subscription-id", default=DEFAULT_SUBSCRIPTION_ID,
                        help="Subscription of the storage account, used for key lookup")
    parser.add_argument("--on-upload-error", choices=UPLOAD_ERROR_POLICIES, default="abort",
                        help="Stop the crawl or keep going when an upload fails "
                             "(default: abort)")
    parser.add_argument("--cache-owners", action="store_true",
                        help="Look up each site's owner only once per run")
    parser.add_argument("--no-progress", dest="progress", action="store_false",
                        help="Disable the progress bar")
    parser.add_argument("--verbose", action="store_true",
                        help="Enable verbose debug logging")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> CrawlConfig:
    """
    Turn parsed arguments into the immutable crawl configuration.

    Raises:
        ValueError: the combination of options is invalid.
    """
    return CrawlConfig(
        output_dir=Path(args.output),
        site_id=args.site_id,
        page_size=args.page_size,
        result_size=args.result_size,
        max_retry_count=args.max_retry_count,
        export=args.export,
        resource_group=args.resource_group,
        storage_account=args.storage_account,
        container=args.container,
        write_header=args.write_header,
        on_upload_error=args.on_upload_error,
        cache_owners=args.cache_owners,
        verbose=args.verbose,
        progress=args.progress,
    )


def run(args: argparse.Namespace, config: CrawlConfig) -> None:
    """
    Authenticate, wire transport, retrier, sink and uploader, then crawl.

    Args:
        args: Parsed arguments, used for the credentials.
        config: Crawl configuration built from the same arguments.
    """
    config.output_dir.mkdir(parents=True, exist_ok=True)

    session = build_session()
    auth = TokenAuthenticator(session, args.tenant_id, args.client_id, args.client_secret)
    auth.ensure_authenticated()

    client = GraphClient(session)
    retrier = RequestRetrier(client.get_json, auth.ensure_authenticated, config.max_retry_count)

    uploader = None
    if config.export:
        uploader = BlobUploader(
            config.storage_account,
            config.container,
            resource_group=config.resource_group,
            subscription_id=args.subscription_id or None,
        )
    sink = ResultSink(
        config.output_dir,
        datetime.now().strftime(RUN_TIMESTAMP_FORMAT),
        uploader=uploader,
        container=config.container,
        write_header=config.write_header,
        on_upload_error=config.on_upload_error,
    )
    Crawler(config, retrier, sink).run()


def main(argv: list[str] | None = None) -> None:
    """
    Main entry point for the ``stream-audit`` CLI.
    """
    args = parse_args(argv)

    _setup_logging(debug=args.verbose)
    if args.verbose:
        logging.getLogger("urllib3").setLevel(logging.DEBUG)

    if not args.tenant_id or not args.client_id:
        log.error("Tenant id and client id are required (--tenant-id / --client-id)")
        sys.exit(2)
    if not args.client_secret:
        args.client_secret = getpass.getpass("Client secret: ")

    try:
        config = build_config(args)
    except ValueError as exc:
        log.error("Invalid configuration: %s", exc)
        sys.exit(2)

    try:
        run(args, config)
    except StreamAuditError as exc:
        log.error("Crawl aborted: %s", exc)
        sys.exit(1)


def merge_main(argv: list[str] | None = None) -> None:
    """Entry point for ``stream-audit-merge``."""
    parser = argparse.ArgumentParser(
        description="Merge stream-audit result files into a single CSV.",
    )
    parser.add_argument("folder", help="Directory holding the .csv files to merge")
    parser.add_argument("--output", default=None,
                        help="Merged file path (default: <folder>/merged-<timestamp>.csv)")
    parser.add_argument("--verbose", action="store_true",
                        help="Enable verbose debug logging")
    args = parser.parse_args(argv)

    _setup_logging(debug=args.verbose)
    try:
        merge_csv_files(Path(args.folder), Path(args.output) if args.output else None)
    except StreamAuditError as exc:
        log.error("Merge failed: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
