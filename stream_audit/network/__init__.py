"""
Network operations module for the Graph transport.
"""

from .client import GraphClient, normalise_collection, next_link, parse_json

__all__ = ["GraphClient", "normalise_collection", "next_link", "parse_json"]
