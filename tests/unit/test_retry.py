"""Tests for retry utilities."""

import pytest

from hoist.utils.retry import retry_on_exception


class FlakyError(Exception):
    """Test exception."""


def test_retry_on_exception_success_first_try():
    """Test successful execution on first try."""
    call_count = 0

    @retry_on_exception(max_attempts=3)
    def func():
        nonlocal call_count
        call_count += 1
        return "success"

    assert func() == "success"
    assert call_count == 1


def test_retry_on_exception_success_after_retries():
    """Test successful execution after retries."""
    call_count = 0

    @retry_on_exception(exceptions=(FlakyError,), max_attempts=3, min_wait=0.01, max_wait=0.1)
    def func():
        nonlocal call_count
        call_count += 1
        if call_count < 3:
            raise FlakyError("Temporary error")
        return "success"

    assert func() == "success"
    assert call_count == 3


def test_retry_on_exception_exhausted():
    """Test the last exception is re-raised when attempts run out."""

    @retry_on_exception(exceptions=(FlakyError,), max_attempts=2, min_wait=0.01, max_wait=0.1)
    def func():
        raise FlakyError("Persistent error")

    with pytest.raises(FlakyError, match="Persistent error"):
        func()


def test_retry_on_exception_wrong_exception_type():
    """Test that other exception types are not retried."""
    call_count = 0

    @retry_on_exception(exceptions=(FlakyError,), max_attempts=3)
    def func():
        nonlocal call_count
        call_count += 1
        raise ValueError("not retried")

    with pytest.raises(ValueError):
        func()
    assert call_count == 1
