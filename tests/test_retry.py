"""Test suite for the error taxonomy and retry helpers."""

import pytest
from tenacity import RetryError

from kbbi_lookup.models import ErrorKind
from kbbi_lookup.utils import (
    EntryNotFoundError,
    FetchFailedError,
    GenericFailureError,
    KBBIError,
    PermanentError,
    RetryableError,
    TransientError,
    create_retrying,
    error_for_kind,
)


@pytest.mark.parametrize("kind", list(ErrorKind))
def test_error_for_kind(kind):
    """Test every kind maps to an exception of that kind holding the page."""
    error = error_for_kind(kind, "<html></html>")

    assert error.kind is kind
    assert error.html == "<html></html>"
    assert isinstance(error, RetryableError) == (not kind.is_terminal)
    assert isinstance(error, PermanentError) == kind.is_terminal


def test_not_found_message():
    assert str(EntryNotFoundError()) == "Entri tidak ditemukan dalam KBBI"
    assert EntryNotFoundError().result is None


def test_fetch_failed_message():
    error = FetchFailedError(3, TransientError("status 503"))

    assert error.attempts == 3
    assert "3 percobaan" in str(error)
    assert "status 503" in str(error)


def test_retrying_waits_increase_linearly():
    sleeps = []
    calls = []

    def flaky():
        calls.append(1)
        raise GenericFailureError()

    retrying = create_retrying(max_attempts=4, sleep=sleeps.append)

    with pytest.raises(RetryError):
        retrying(flaky)

    assert len(calls) == 4
    assert sleeps == [1, 2, 3]


def test_retrying_does_not_retry_permanent_errors():
    calls = []

    def missing():
        calls.append(1)
        raise EntryNotFoundError("<html></html>")

    retrying = create_retrying(sleep=lambda seconds: None)

    with pytest.raises(EntryNotFoundError):
        retrying(missing)

    assert len(calls) == 1


@pytest.mark.parametrize("kind", list(ErrorKind))
def test_retrying_follows_error_kind(kind):
    """Test source errors are retried exactly when their kind is not terminal."""
    calls = []

    def failing():
        calls.append(1)
        raise error_for_kind(kind)

    retrying = create_retrying(max_attempts=3, sleep=lambda seconds: None)

    with pytest.raises((RetryError, KBBIError)):
        retrying(failing)

    assert len(calls) == (1 if kind.is_terminal else 3)


def test_retrying_retries_plain_source_errors():
    """Test a bare KBBIError counts as a generic, retryable failure."""
    calls = []

    def failing():
        calls.append(1)
        raise KBBIError()

    retrying = create_retrying(max_attempts=2, sleep=lambda seconds: None)

    with pytest.raises(RetryError):
        retrying(failing)

    assert len(calls) == 2
