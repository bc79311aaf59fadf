"""Tenacity integration utilities for retry logic."""

import logging
from typing import Callable

import tenacity
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from vault_to_ssm.retry.config import RetryConfiguration

logger = logging.getLogger(__name__)


def get_wait_strategy(config: RetryConfiguration):
    """Create exponential backoff plus random jitter from configuration.

    The nth wait is base_delay * exponential_base ** (n - 1), capped at
    max_delay, plus a uniform 0..jitter seconds.
    """
    backoff = wait_exponential(
        multiplier=config.base_delay,
        max=config.max_delay,
        exp_base=config.exponential_base,
    )
    return backoff + wait_random(0, config.jitter)


def get_stop_strategy(config: RetryConfiguration):
    """Create stop strategy from configuration."""
    return stop_after_attempt(config.max_attempts)


def before_sleep_log(retry_state: tenacity.RetryCallState) -> None:
    """Log before each retry attempt.

    Args:
        retry_state: Current retry state from tenacity
    """
    if retry_state.outcome is None:
        return

    exception = retry_state.outcome.exception()
    if exception:
        logger.warning(
            f"Retrying (attempt {retry_state.attempt_number}) "
            f"after exception: {type(exception).__name__}: {exception}"
        )


def get_tenacity_decorator(
    config: RetryConfiguration,
    retry_if: Callable[[BaseException], bool],
) -> Callable:
    """Create a tenacity decorator from configuration.

    The last exception is re-raised unchanged once attempts are exhausted, so
    callers translate errors the same way with or without retries.

    Args:
        config: Complete RetryConfiguration
        retry_if: Predicate deciding whether an exception is transient

    Returns:
        Configured tenacity decorator
    """
    return retry(
        wait=get_wait_strategy(config),
        stop=get_stop_strategy(config),
        retry=retry_if_exception(retry_if),
        before_sleep=before_sleep_log,
        reraise=True,
    )
