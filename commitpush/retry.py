"""Retry with backoff for calls into network services."""

from __future__ import annotations

import random
import re
import time
from collections.abc import Callable
from typing import TypeVar

from pydantic import BaseModel, Field

from commitpush.constants import DEFAULT_RETRY_ATTEMPTS
from commitpush.logging import get_logger

logger = get_logger("retry")

T = TypeVar("T")

_RETRYABLE_PATTERNS = [
    re.compile(r"network", re.IGNORECASE),
    re.compile(r"timed? ?out", re.IGNORECASE),
    re.compile(r"rate limit", re.IGNORECASE),
    re.compile(r"connection (reset|refused|aborted)", re.IGNORECASE),
    re.compile(r"\b429\b"),  # Too Many Requests
    re.compile(r"\b5\d\d\b"),  # Server errors
]


class RetryPolicy(BaseModel):
    """Retry settings."""

    strategy: str = Field(default="exponential", pattern="^(exponential|linear|fixed)$")
    attempts: int = Field(default=DEFAULT_RETRY_ATTEMPTS, ge=1, le=10)
    base_seconds: float = Field(default=1.0, ge=0.0, le=60.0)
    max_seconds: float = Field(default=10.0, ge=0.0, le=600.0)


class RetryBackoffCalculator:
    """Calculate backoff delays between attempts."""

    @staticmethod
    def calculate_delay(
        attempt: int,
        strategy: str,
        base_seconds: float,
        max_seconds: float,
    ) -> float:
        """Calculate backoff delay with jitter.

        Args:
            attempt: Retry attempt number (1-based)
            strategy: Backoff strategy (exponential, linear, fixed)
            base_seconds: Base delay in seconds
            max_seconds: Maximum delay cap in seconds

        Returns:
            Delay in seconds with ±10% jitter applied
        """
        if strategy == "exponential":
            delay = base_seconds * (2 ** (attempt - 1))
        elif strategy == "linear":
            delay = base_seconds * attempt
        elif strategy == "fixed":
            delay = base_seconds
        else:
            raise ValueError(f"Unknown backoff strategy: {strategy}")

        delay = min(delay, max_seconds)

        jitter = delay * 0.1
        delay = delay + random.uniform(-jitter, jitter)

        return float(max(0.0, delay))


def is_retryable_error(error: BaseException) -> bool:
    """Whether ``error`` looks transient (network, timeout, 429, 5xx)."""
    message = str(error)
    return any(pattern.search(message) for pattern in _RETRYABLE_PATTERNS)


def with_retry(
    operation: Callable[[], T],
    policy: RetryPolicy | None = None,
    should_retry: Callable[[BaseException], bool] = is_retryable_error,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run ``operation``, retrying transient failures.

    Args:
        operation: Zero-argument callable to run
        policy: Retry settings; defaults to RetryPolicy()
        should_retry: Predicate deciding whether an error is worth retrying
        sleep: Sleep function, injectable for tests

    Returns:
        The operation's return value

    Raises:
        Exception: The last error, or the first one ``should_retry`` rejects
    """
    policy = policy or RetryPolicy()

    for attempt in range(1, policy.attempts + 1):
        try:
            return operation()
        except Exception as error:
            retries_left = policy.attempts - attempt
            if not should_retry(error) or retries_left == 0:
                if retries_left == 0:
                    logger.warning(
                        "Operation failed (attempt %d/%d). No more retries left.", attempt, policy.attempts
                    )
                raise
            delay = RetryBackoffCalculator.calculate_delay(
                attempt, policy.strategy, policy.base_seconds, policy.max_seconds
            )
            logger.warning(
                "Operation failed (attempt %d/%d). Retrying in %.1fs...", attempt, policy.attempts, delay
            )
            sleep(delay)

    raise AssertionError("unreachable")  # pragma: no cover
