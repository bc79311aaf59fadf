"""Parameter Store side of the migration."""

from vault_to_ssm.ssm.client import ParameterStoreConfig
from vault_to_ssm.ssm.publisher import (
    ParameterStorePublisher,
    PublishResult,
    parameter_name,
)

__all__ = [
    "ParameterStoreConfig",
    "ParameterStorePublisher",
    "PublishResult",
    "parameter_name",
]
