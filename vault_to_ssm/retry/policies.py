"""Retry policies for Vault reads and Parameter Store writes."""

from typing import Callable, Optional

import hvac.exceptions
from botocore.exceptions import (
    ClientError,
    ConnectionClosedError,
    EndpointConnectionError,
    ReadTimeoutError,
)
from requests.exceptions import ConnectionError, Timeout

from vault_to_ssm.retry.config import RetryConfiguration
from vault_to_ssm.retry.tenacity_base import get_tenacity_decorator

# hvac exceptions raised for transient server side conditions
VAULT_RETRYABLE_EXCEPTIONS = (
    hvac.exceptions.VaultDown,
    hvac.exceptions.InternalServerError,
    hvac.exceptions.BadGateway,
    hvac.exceptions.RateLimitExceeded,
    ConnectionError,
    Timeout,
)

# SSM error codes that ARE retryable (throttling and server errors)
SSM_RETRYABLE_ERROR_CODES = frozenset({
    "ThrottlingException",
    "Throttling",
    "TooManyUpdates",
    "InternalServerError",
    "InternalFailure",
    "ServiceUnavailable",
    "RequestTimeout",
})

# SSM error codes that should NOT be retried (fail immediately)
SSM_NON_RETRYABLE_ERROR_CODES = frozenset({
    "AccessDeniedException",
    "ParameterAlreadyExists",
    "ParameterLimitExceeded",
    "ParameterMaxVersionLimitExceeded",
    "HierarchyLevelLimitExceededException",
    "HierarchyTypeMismatchException",
    "ValidationException",
    "UnsupportedParameterType",
})

SSM_RETRYABLE_EXCEPTIONS = (
    ConnectionClosedError,
    EndpointConnectionError,
    ReadTimeoutError,
)


def is_vault_retryable_error(exception: BaseException) -> bool:
    """Check whether a Vault request failure is transient."""
    return isinstance(exception, VAULT_RETRYABLE_EXCEPTIONS)


def is_ssm_retryable_error(exception: BaseException) -> bool:
    """Check whether a Parameter Store failure is transient.

    Args:
        exception: Exception raised by the boto3 SSM client

    Returns:
        True if the error is retryable, False otherwise
    """
    if isinstance(exception, ClientError):
        error_code = exception.response.get("Error", {}).get("Code", "")
        if error_code in SSM_NON_RETRYABLE_ERROR_CODES:
            return False
        if error_code in SSM_RETRYABLE_ERROR_CODES:
            return True
        status = exception.response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0)
        return 500 <= status < 600

    return isinstance(exception, SSM_RETRYABLE_EXCEPTIONS)


class RetryPresets:
    """Pre-configured retry settings for the two sides of the migration."""

    VAULT_READ = RetryConfiguration(
        max_attempts=3,
        base_delay=0.5,
        max_delay=10.0,
        jitter=0.5,
    )

    SSM_WRITE = RetryConfiguration(
        max_attempts=5,
        base_delay=1.0,
        max_delay=30.0,
        jitter=1.0,
    )


def with_vault_retry(config: Optional[RetryConfiguration] = None) -> Callable:
    """Decorator retrying transient Vault failures.

    Examples:
        @with_vault_retry(RetryConfiguration(max_attempts=5))
        def list_keys(client, path):
            return client.secrets.kv.v1.list_secrets(path=path)
    """
    return get_tenacity_decorator(config or RetryPresets.VAULT_READ, is_vault_retryable_error)


def with_ssm_retry(config: Optional[RetryConfiguration] = None) -> Callable:
    """Decorator retrying throttled or failed Parameter Store calls.

    Non-retryable errors such as ParameterAlreadyExists or
    AccessDeniedException are raised on the first attempt.
    """
    return get_tenacity_decorator(config or RetryPresets.SSM_WRITE, is_ssm_retryable_error)
