"""
Page retrieval: cache, error classification and fetching.
"""

from .search_cache import SearchCache
from .error_classifier import classify
from .page_fetch import PageFetcher, ConnectionCheckError

__all__ = [
    "SearchCache",
    "classify",
    "PageFetcher",
    "ConnectionCheckError",
]
