"""
Core lookup components.
"""

from .session import KBBISession, AuthenticationError
from .dictionary import KBBIDictionary, lookup

__all__ = [
    "KBBISession",
    "AuthenticationError",
    "KBBIDictionary",
    "lookup",
]
