"""
kbbi-lookup

Looks up words in KBBI Daring (Kamus Besar Bahasa Indonesia) and turns the
result pages into structured entries: senses, word classes, etymology and
related words.
"""

__version__ = "1.0.0"

from .config import Settings
from .core import KBBIDictionary, KBBISession, lookup
from .models import SearchResult, Entry, Sense, Etymology, WordClass, ErrorKind

__all__ = [
    "Settings",
    "KBBIDictionary",
    "KBBISession",
    "lookup",
    "SearchResult",
    "Entry",
    "Sense",
    "Etymology",
    "WordClass",
    "ErrorKind",
    "__version__",
]
