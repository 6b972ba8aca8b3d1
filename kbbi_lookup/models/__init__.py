"""
Data models for KBBI lookups.
"""

from .errors import ErrorKind
from .entry import (
    DEFAULT_HOST,
    WordClass,
    Sense,
    Etymology,
    Entry,
    SearchResult,
)

__all__ = [
    "ErrorKind",
    "DEFAULT_HOST",
    "WordClass",
    "Sense",
    "Etymology",
    "Entry",
    "SearchResult",
]
