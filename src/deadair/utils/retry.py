"""Retry decorators using tenacity."""

from __future__ import annotations

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from deadair.errors import ToolTimeoutError


def retry_on_timeout(max_attempts: int = 2):
    """Retry a media tool call that timed out, with a short backoff."""
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
        retry=retry_if_exception_type(ToolTimeoutError),
        reraise=True,
    )
