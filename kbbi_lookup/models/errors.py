"""
Error kinds reported by the dictionary source.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure kinds the source signals through redirects or markup."""

    NOT_FOUND = "not_found"
    DAILY_LIMIT_EXCEEDED = "daily_limit_exceeded"
    RESTRICTED_MODE = "restricted_mode"
    ACCOUNT_SUSPENDED = "account_suspended"
    GENERIC_FAILURE = "generic_failure"

    @property
    def is_terminal(self) -> bool:
        """Whether a response of this kind must not be retried."""
        return self is not ErrorKind.GENERIC_FAILURE
