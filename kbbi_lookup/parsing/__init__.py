"""
Markup parsing for KBBI Daring pages.
"""

from .roles import SemanticRoles
from .entry_parser import EntryParser, ParseError, parse_result

__all__ = [
    "SemanticRoles",
    "EntryParser",
    "ParseError",
    "parse_result",
]
