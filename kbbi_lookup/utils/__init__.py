"""
Utility modules for kbbi-lookup.
"""

from .retry import (
    RetryableError,
    TransientError,
    PermanentError,
    KBBIError,
    EntryNotFoundError,
    DailyLimitExceededError,
    RestrictedModeError,
    AccountSuspendedError,
    GenericFailureError,
    FetchFailedError,
    error_for_kind,
    create_retrying,
    RateLimiter,
)
from .logging_config import configure_logging, LookupLogger

__all__ = [
    # Errors and retry
    "RetryableError",
    "TransientError",
    "PermanentError",
    "KBBIError",
    "EntryNotFoundError",
    "DailyLimitExceededError",
    "RestrictedModeError",
    "AccountSuspendedError",
    "GenericFailureError",
    "FetchFailedError",
    "error_for_kind",
    "create_retrying",
    "RateLimiter",
    # Logging
    "configure_logging",
    "LookupLogger",
]
