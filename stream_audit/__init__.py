"""
stream_audit
============
Audit a Microsoft 365 tenant for SharePoint pages that still embed
Microsoft Stream (Classic) videos.

Package structure
-----------------
stream_audit/
├── __init__.py       – package init and public API
├── config.py         – constants and the immutable CrawlConfig
├── errors.py         – exception hierarchy
├── logging_setup.py  – colored console logging
├── session.py        – requests.Session factory
├── models.py         – Site / Page / Component / MatchRecord
├── classify.py       – Stream (Classic) embed detection
├── merge.py          – merge result files into one CSV
├── cli.py            – argparse CLIs (``stream-audit``, ``stream-audit-merge``)
├── auth/             – client-credentials access tokens
├── network/          – Graph transport and request paths
├── storage/          – Azure Blob Storage upload
└── core/
    ├── retry.py      – per-request throttle / token-expiry retry
    ├── crawler.py    – sites → pages → web parts traversal
    └── sink.py       – per-listing-page CSV files with rollover

Quick start
-----------
    from datetime import datetime
    from pathlib import Path

    from stream_audit import (
        CrawlConfig, Crawler, GraphClient, RequestRetrier, ResultSink,
        TokenAuthenticator, build_session,
    )

    session = build_session()
    auth = TokenAuthenticator(session, "contoso.onmicrosoft.com", CLIENT_ID, SECRET)
    auth.ensure_authenticated()
    retrier = RequestRetrier(GraphClient(session).get_json, auth.ensure_authenticated)
    config = CrawlConfig(output_dir=Path("report"))
    sink = ResultSink(config.output_dir, datetime.now().strftime("%Y%m%d%H%M%S"))
    Crawler(config, retrier, sink).run()
"""

__version__ = "1.0.0"

from .auth import TokenAuthenticator
from .classify import matches
from .config import CrawlConfig
from .core import Crawler, CrawlSummary, RequestRetrier, ResultSink
from .merge import merge_csv_files
from .models import Component, MatchRecord, Page, Site
from .network import GraphClient
from .session import build_session

__all__ = [
    "__version__",
    "TokenAuthenticator",
    "matches",
    "CrawlConfig",
    "Crawler",
    "CrawlSummary",
    "RequestRetrier",
    "ResultSink",
    "merge_csv_files",
    "Component",
    "MatchRecord",
    "Page",
    "Site",
    "GraphClient",
    "build_session",
]
