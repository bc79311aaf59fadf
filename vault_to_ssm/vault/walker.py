"""Recursive walk over a KV mount.

The walk lists every interior node, reads every leaf and returns the mount's
flat mapping of full secret path to normalized value. It stops at the first
failure so partial results never leave the walker.
"""

import logging
from typing import Optional

from vault_to_ssm.exceptions import NotFoundError, WalkDepthError
from vault_to_ssm.vault.backends import SecretBackend, create_backend
from vault_to_ssm.vault.client import VaultClient
from vault_to_ssm.vault.models import PATH_SEPARATOR, Mount
from vault_to_ssm.vault.normalizer import normalize_payload

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64


class TreeWalker:
    """Walk one mount and collect its flat entries."""

    def __init__(
        self,
        client: VaultClient,
        mount: Mount,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        """Initialize the walker.

        Args:
            client: Vault client used for listing and reading
            mount: Mount to walk
            max_depth: Deepest interior level allowed below the mount root
        """
        if max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {max_depth}")
        self.client = client
        self.mount = mount
        self.max_depth = max_depth
        # selected once; never re-derived during the walk
        self.backend: SecretBackend = create_backend(mount)

    def walk(self) -> dict[str, str]:
        """Collect every leaf under the mount.

        Returns:
            Full secret path (no leading separator) to flat value

        Raises:
            NotFoundError: If a non-root path disappears during the walk
            AccessError: If listing or reading is denied
            TransportError: For any other Vault failure
            WalkDepthError: If the tree is deeper than ``max_depth``
        """
        data: dict[str, str] = {}
        try:
            self._walk(self.mount.path, 0, data)
        except NotFoundError as e:
            # Vault answers 404 to a LIST on a mount holding no secrets
            if e.path != self.mount.path:
                raise
            logger.info(f"Mount {self.mount.path} is empty")
            return {}

        logger.info(f"Collected {len(data)} secrets from mount {self.mount.path}")
        return data

    def _walk(self, path: str, depth: int, data: dict[str, str]) -> None:
        if depth > self.max_depth:
            raise WalkDepthError(path, self.max_depth)

        for name in self.client.list_children(self.backend, path):
            sub_path = path + name
            if name.endswith(PATH_SEPARATOR):
                self._walk(sub_path, depth + 1, data)
                continue

            value = self._read(sub_path)
            if value is None:
                logger.debug(f"No data at {sub_path}, skipping")
                continue
            data[sub_path] = value

    def _read(self, path: str) -> Optional[str]:
        payload = self.client.read_secret(self.backend, path)
        return normalize_payload(payload)
