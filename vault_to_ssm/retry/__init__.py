"""Retry policies with exponential backoff for Vault and Parameter Store calls."""

from vault_to_ssm.retry.config import RetryConfiguration
from vault_to_ssm.retry.tenacity_base import get_tenacity_decorator
from vault_to_ssm.retry.policies import (
    RetryPresets,
    SSM_NON_RETRYABLE_ERROR_CODES,
    SSM_RETRYABLE_ERROR_CODES,
    VAULT_RETRYABLE_EXCEPTIONS,
    is_ssm_retryable_error,
    is_vault_retryable_error,
    with_ssm_retry,
    with_vault_retry,
)

__all__ = [
    "RetryConfiguration",
    "get_tenacity_decorator",
    "RetryPresets",
    "SSM_NON_RETRYABLE_ERROR_CODES",
    "SSM_RETRYABLE_ERROR_CODES",
    "VAULT_RETRYABLE_EXCEPTIONS",
    "is_ssm_retryable_error",
    "is_vault_retryable_error",
    "with_ssm_retry",
    "with_vault_retry",
]
