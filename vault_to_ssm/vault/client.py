"""VaultClient wrapper for HashiCorp Vault.

This module provides the read-only client used by the migration: mount
discovery, listing and reading through a protocol backend, with transient
failures retried and hvac errors translated into migration errors.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from threading import RLock
from typing import Any, Iterator, Optional

import hvac
import requests
from hvac.exceptions import Forbidden, InvalidPath, Unauthorized

from vault_to_ssm.exceptions import (
    AccessError,
    ConfigurationError,
    NotFoundError,
    TransportError,
)
from vault_to_ssm.retry import RetryConfiguration, RetryPresets, with_vault_retry
from vault_to_ssm.vault.backends import SecretBackend
from vault_to_ssm.vault.models import VaultConnectionConfig

logger = logging.getLogger(__name__)

KUBERNETES_TOKEN_PATH = "/var/run/secrets/kubernetes.io/serviceaccount/token"


@contextmanager
def translate_errors(path: str, operation: str) -> Iterator[None]:
    """Translate hvac and requests errors raised inside the block.

    Args:
        path: Vault path the operation targets
        operation: Short operation name used in messages (list, read, ...)
    """
    try:
        yield
    except InvalidPath as e:
        raise NotFoundError(
            path=path,
            message=f"Nothing found to {operation} at path: {path}",
        ) from e
    except (Forbidden, Unauthorized) as e:
        raise AccessError(
            f"Permission denied for {operation} on path: {path}",
            path=path,
        ) from e
    except (hvac.exceptions.VaultError, requests.exceptions.RequestException) as e:
        raise TransportError(
            path=path,
            message=f"Failed to {operation} path {path}: {e}",
            details={"error": type(e).__name__},
        ) from e


class VaultClient:
    """Read-only client for the Vault side of the migration.

    Example:
        >>> config = VaultConnectionConfig(
        ...     vault_addr="https://vault.example.com:8200",
        ...     token="s.xxxx",
        ... )
        >>> with VaultClient(config) as client:
        ...     mounts = client.list_mounts()
    """

    def __init__(
        self,
        config: VaultConnectionConfig,
        retry_config: Optional[RetryConfiguration] = None,
        hvac_client: Optional[hvac.Client] = None,
    ):
        """Initialize Vault client.

        Args:
            config: Connection configuration
            retry_config: Retry policy for transient failures (defaults to
                ``config.retries`` attempts)
            hvac_client: Pre-built hvac client; authentication still runs
                on first use
        """
        self.config = config
        self.retry_config = retry_config or RetryConfiguration(
            max_attempts=config.retries,
            base_delay=RetryPresets.VAULT_READ.base_delay,
            max_delay=RetryPresets.VAULT_READ.max_delay,
            jitter=RetryPresets.VAULT_READ.jitter,
        )
        self._retry = with_vault_retry(self.retry_config)
        self._client: Optional[hvac.Client] = hvac_client
        self._auth_lock = RLock()
        self._initialized = False

    def _get_client(self) -> hvac.Client:
        """Get or create the underlying hvac client."""
        if self._client is None:
            with self._auth_lock:
                if self._client is None:
                    self._client = hvac.Client(
                        url=self.config.vault_addr,
                        verify=self.config.verify,
                        timeout=self.config.timeout,
                        namespace=self.config.namespace,
                    )
        return self._client

    def _authenticate(self) -> None:
        """Authenticate with Vault using the configured method."""
        client = self._get_client()

        if self.config.auth_method == "token":
            if not self.config.token:
                raise ConfigurationError("Token authentication requires token")
            client.token = self.config.token

        elif self.config.auth_method == "approle":
            if not self.config.role_id or not self.config.secret_id:
                raise ConfigurationError(
                    "AppRole authentication requires role_id and secret_id"
                )
            with translate_errors("auth/approle/login", "login"):
                response = client.auth.approle.login(
                    role_id=self.config.role_id,
                    secret_id=self.config.secret_id,
                )
            client.token = self._token_from(response, "AppRole")

        elif self.config.auth_method == "kubernetes":
            jwt = Path(KUBERNETES_TOKEN_PATH).read_text().strip()
            with translate_errors("auth/kubernetes/login", "login"):
                response = client.auth.kubernetes.login(
                    role=self.config.kubernetes_role or "default",
                    jwt=jwt,
                )
            client.token = self._token_from(response, "Kubernetes")

        else:
            raise ConfigurationError(
                f"Unsupported authentication method: {self.config.auth_method}"
            )

        self._initialized = True
        logger.info(f"Authenticated to Vault at {self.config.vault_addr}")

    @staticmethod
    def _token_from(response: Any, method: str) -> str:
        token = (response or {}).get("auth", {}).get("client_token")
        if not token:
            raise AccessError(f"{method} login did not return a token")
        return token

    def _ensure_authenticated(self) -> hvac.Client:
        """Ensure the client is authenticated and return it."""
        if not self._initialized:
            # one login per client, even when walker threads race here
            with self._auth_lock:
                if not self._initialized:
                    self._authenticate()
        return self._get_client()

    def list_mounts(self) -> dict[str, dict[str, Any]]:
        """List mounted secrets engines.

        Returns:
            Mapping of mount path to its description ('type', 'options', ...)

        Raises:
            AccessError: If the token may not read sys/mounts
            TransportError: If Vault is unreachable
        """
        client = self._ensure_authenticated()
        with translate_errors("sys/mounts", "list mounts"):
            response = self._retry(client.sys.list_mounted_secrets_engines)()

        # Newer Vault versions nest the mounts under "data"; older ones put
        # them at the top level next to request metadata.
        mounts = (response or {}).get("data") or response or {}
        return {
            path: info
            for path, info in mounts.items()
            if isinstance(info, dict) and "type" in info
        }

    def list_children(self, backend: SecretBackend, path: str) -> list[str]:
        """List child names under an interior node.

        Raises:
            NotFoundError: If the path does not exist
            AccessError: If listing is not permitted
            TransportError: For any other failure
        """
        client = self._ensure_authenticated()
        with translate_errors(path, "list"):
            return self._retry(backend.list_children)(client, path)

    def read_secret(self, backend: SecretBackend, path: str) -> Optional[dict[str, Any]]:
        """Read the payload of a leaf node, or None when it holds no data.

        Raises:
            NotFoundError: If the secret does not exist
            AccessError: If reading is not permitted
            TransportError: For any other failure
        """
        client = self._ensure_authenticated()
        with translate_errors(path, "read"):
            return self._retry(backend.read_secret)(client, path)

    def close(self) -> None:
        """Drop the underlying hvac client and its session."""
        if self._client is not None:
            self._client.adapter.close()
            self._client = None
        self._initialized = False
        logger.debug("Vault client closed")

    def __enter__(self) -> "VaultClient":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
