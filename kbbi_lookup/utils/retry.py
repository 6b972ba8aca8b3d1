"""
Error taxonomy and retry utilities for dictionary page fetches.
"""

import time
from typing import Callable, Optional, Tuple, Type
from tenacity import (
    Retrying,
    stop_after_attempt,
    wait_incrementing,
    retry_if_exception,
    before_sleep_log,
)
import httpx
import logging

from ..models import ErrorKind

logger = logging.getLogger(__name__)


# Custom exceptions for retry categorization
class RetryableError(Exception):
    """Base class for errors that should trigger a retry."""
    pass


class TransientError(RetryableError):
    """Temporary network or server error."""
    pass


class PermanentError(Exception):
    """Error that should not be retried."""
    pass


class KBBIError(Exception):
    """
    Failure signalled by the dictionary source itself.

    Carries the classified kind and the markup that produced it, since a
    not-found page still holds a suggestion list.
    """

    kind: ErrorKind = ErrorKind.GENERIC_FAILURE
    message: str = "Terjadi kesalahan saat memproses permintaan Anda"

    def __init__(self, html: str = "", message: Optional[str] = None):
        self.html = html
        super().__init__(message or self.message)


class EntryNotFoundError(KBBIError, PermanentError):
    """The term has no entry; the page may suggest similar entries."""

    kind = ErrorKind.NOT_FOUND
    message = "Entri tidak ditemukan dalam KBBI"

    def __init__(self, html: str = "", message: Optional[str] = None, result=None):
        super().__init__(html, message)
        # Suggestion-only SearchResult, attached by the dictionary facade
        self.result = result


class DailyLimitExceededError(KBBIError, PermanentError):
    """The account or address hit the daily search quota."""

    kind = ErrorKind.DAILY_LIMIT_EXCEEDED
    message = "Pencarian Anda telah mencapai batas maksimum dalam sehari"


class RestrictedModeError(KBBIError, PermanentError):
    """The source only serves registered users right now."""

    kind = ErrorKind.RESTRICTED_MODE
    message = (
        "KBBI Daring sedang dalam moda terbatas. "
        "Fitur pencarian dibatasi untuk pengguna umum"
    )


class AccountSuspendedError(KBBIError, PermanentError):
    """The authenticated account has been suspended."""

    kind = ErrorKind.ACCOUNT_SUSPENDED
    message = "Akun ini sedang dibekukan, tidak dapat digunakan"


class GenericFailureError(KBBIError, RetryableError):
    """The source redirected to its generic error page."""

    kind = ErrorKind.GENERIC_FAILURE


_ERRORS_BY_KIND = {
    cls.kind: cls
    for cls in (
        EntryNotFoundError,
        DailyLimitExceededError,
        RestrictedModeError,
        AccountSuspendedError,
        GenericFailureError,
    )
}


def error_for_kind(kind: ErrorKind, html: str = "") -> KBBIError:
    """
    Build the exception matching a classified error kind.

    Args:
        kind: Classified error kind
        html: Markup of the offending response

    Returns:
        Exception instance (not raised)
    """
    return _ERRORS_BY_KIND[kind](html)


class FetchFailedError(Exception):
    """All attempts failed with retryable errors."""

    def __init__(self, attempts: int, last_error: Optional[BaseException]):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Gagal mengambil halaman setelah {attempts} percobaan: {last_error}"
        )


DEFAULT_RETRYABLE: Tuple[Type[BaseException], ...] = (
    RetryableError,
    httpx.RequestError,
)


def create_retrying(
    max_attempts: int = 3,
    backoff_start: float = 1.0,
    backoff_increment: float = 1.0,
    retryable_exceptions: Tuple[Type[BaseException], ...] = DEFAULT_RETRYABLE,
    sleep: Callable[[float], None] = time.sleep,
) -> Retrying:
    """
    Create a retry controller with linearly increasing backoff.

    The n-th retry waits ``backoff_start + (n - 1) * backoff_increment``
    seconds. Source errors are retried unless their kind is terminal; other
    exceptions outside ``retryable_exceptions`` propagate on the
    first attempt.

    Args:
        max_attempts: Maximum number of attempts, including the first
        backoff_start: Wait before the first retry (seconds)
        backoff_increment: Added to the wait for each further retry
        retryable_exceptions: Tuple of exception types to retry on
        sleep: Sleep function, replaceable in tests

    Returns:
        A tenacity ``Retrying`` instance; exhaustion raises ``RetryError``
    """
    def _should_retry(error: BaseException) -> bool:
        if isinstance(error, KBBIError):
            return not error.kind.is_terminal
        return isinstance(error, retryable_exceptions)

    return Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_incrementing(start=backoff_start, increment=backoff_increment),
        retry=retry_if_exception(_should_retry),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        sleep=sleep,
        reraise=False,
    )


class RateLimiter:
    """
    Fixed courtesy delay applied before every outbound request.

    Independent of the retry backoff.
    """

    def __init__(
        self,
        delay: float = 0.5,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Initialize the rate limiter.

        Args:
            delay: Seconds to wait before each request
            sleep: Sleep function, replaceable in tests
        """
        self.delay = delay
        self._sleep = sleep

    def wait_sync(self) -> None:
        """Synchronous wait according to the configured delay."""
        if self.delay > 0:
            self._sleep(self.delay)
