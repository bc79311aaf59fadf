"""boto3 client configuration for AWS Systems Manager Parameter Store."""

from dataclasses import dataclass
from typing import Any, Optional

import boto3
from botocore.config import Config as BotoConfig

# Throttled writes are retried by the publisher's tenacity policy; botocore
# sends each call exactly once so the two layers never multiply.
SINGLE_ATTEMPT = {"total_max_attempts": 1, "mode": "standard"}


@dataclass
class ParameterStoreConfig:
    """Configuration for the Parameter Store client.

    Attributes:
        region: AWS region; falls back to the profile or environment default
        profile: Named profile from the shared credentials file
        endpoint_url: Custom endpoint (e.g. a local emulator)
    """

    region: Optional[str] = None
    profile: Optional[str] = None
    endpoint_url: Optional[str] = None

    def create_ssm_client(self) -> Any:
        """Create an SSM client from a dedicated session."""
        session = boto3.session.Session(
            profile_name=self.profile,
            region_name=self.region,
        )
        return session.client(
            "ssm",
            endpoint_url=self.endpoint_url,
            config=BotoConfig(retries=SINGLE_ATTEMPT),
        )
