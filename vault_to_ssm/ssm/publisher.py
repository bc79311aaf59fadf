"""Publish the aggregated secrets to Parameter Store.

Every entry is an independent ``PutParameter`` call. A failed write is
reported and the remaining entries are still attempted.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Mapping, Optional

from botocore.exceptions import BotoCoreError, ClientError

from vault_to_ssm.exceptions import WriteError
from vault_to_ssm.retry import RetryConfiguration, with_ssm_retry

logger = logging.getLogger(__name__)

PARAMETER_TYPE = "String"
NAME_PREFIX = "/"


def parameter_name(key: str) -> str:
    """Parameter Store names are hierarchical and start with '/'."""
    return NAME_PREFIX + key


@dataclass
class PublishResult:
    """Outcome of publishing the aggregated mapping."""

    successful: list[str] = field(default_factory=list)
    failed: list[dict] = field(default_factory=list)
    dry_run: bool = False

    @property
    def total(self) -> int:
        return len(self.successful) + len(self.failed)

    def summary(self) -> str:
        prefix = "[DRY RUN] " if self.dry_run else ""
        return (
            f"{prefix}Published {len(self.successful)} of {self.total} parameters, "
            f"{len(self.failed)} failed"
        )


class ParameterStorePublisher:
    """Writer for flat secrets to AWS SSM Parameter Store."""

    def __init__(
        self,
        ssm_client: Any,
        overwrite: bool = False,
        dry_run: bool = False,
        workers: int = 1,
        retry_config: Optional[RetryConfiguration] = None,
    ):
        """Initialize the publisher.

        Args:
            ssm_client: boto3 SSM client
            overwrite: Replace parameters that already exist
            dry_run: Log planned writes without calling SSM
            workers: Number of concurrent writes
            retry_config: Retry policy for throttled writes
        """
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self.ssm_client = ssm_client
        self.overwrite = overwrite
        self.dry_run = dry_run
        self.workers = workers
        self._put = with_ssm_retry(retry_config)(self._put_parameter)
        self._result_lock = Lock()

    def _put_parameter(self, name: str, value: str) -> None:
        self.ssm_client.put_parameter(
            Name=name,
            Value=value,
            Type=PARAMETER_TYPE,
            Overwrite=self.overwrite,
        )

    def write_parameter(self, key: str, value: str) -> str:
        """Write one flat entry.

        Args:
            key: Flat secret path without a leading separator
            value: Flat secret value

        Returns:
            The parameter name that was written

        Raises:
            WriteError: If Parameter Store rejects the write
        """
        name = parameter_name(key)
        if self.dry_run:
            logger.info(f"[DRY RUN] Would create parameter '{name}'")
            return name

        try:
            self._put(name, value)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            raise WriteError(
                name,
                message=f"Failed to write parameter '{name}': {e}",
                details={"code": code},
            ) from e
        except BotoCoreError as e:
            raise WriteError(name, message=f"Failed to write parameter '{name}': {e}") from e

        logger.info(f"Parameter '{name}' created successfully")
        return name

    def _publish_entry(self, key: str, value: str, result: PublishResult) -> None:
        try:
            name = self.write_parameter(key, value)
        except WriteError as e:
            logger.error(str(e))
            with self._result_lock:
                result.failed.append({"name": e.name, "error": e.message, **e.details})
            return
        with self._result_lock:
            result.successful.append(name)

    def publish(self, data: Mapping[str, str]) -> PublishResult:
        """Write every entry of the aggregated mapping.

        Args:
            data: Flat secret path to value

        Returns:
            PublishResult listing written and failed parameter names
        """
        result = PublishResult(dry_run=self.dry_run)
        items = sorted(data.items())

        if self.workers == 1:
            for key, value in items:
                self._publish_entry(key, value, result)
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                futures = [
                    executor.submit(self._publish_entry, key, value, result)
                    for key, value in items
                ]
                for future in futures:
                    future.result()

        logger.info(result.summary())
        return result
