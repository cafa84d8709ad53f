"""
Core crawl engine: retry policy, traversal and result output.
"""

from .crawler import Crawler, CrawlSummary
from .retry import RequestRetrier, backoff_delay
from .sink import ResultSink

__all__ = ["Crawler", "CrawlSummary", "RequestRetrier", "ResultSink", "backoff_delay"]
