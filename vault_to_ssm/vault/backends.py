"""Protocol backends for KV version 1 and KV version 2 mounts.

Each backend is bound to one mount and translates a full secret path
(``mount/sub/path``) into the request shape of its engine version.
"""

import logging
from typing import Any, Optional, Protocol

import hvac

from vault_to_ssm.exceptions import ConfigurationError
from vault_to_ssm.vault.models import KVVersion, Mount

logger = logging.getLogger(__name__)


def relative_path(mount: Mount, path: str) -> str:
    """Strip the mount prefix from a full path.

    Args:
        mount: Mount the path belongs to
        path: Full path, e.g. "secret/app/db"

    Returns:
        Path relative to the mount, e.g. "app/db"

    Raises:
        ConfigurationError: If the path is outside the mount
    """
    if path == mount.mount_point or path == mount.path:
        return ""
    if not path.startswith(mount.path):
        raise ConfigurationError(
            f"Path {path} is outside mount {mount.path}",
            {"path": path, "mount": mount.path},
        )
    return path[len(mount.path):]


def _keys(response: Optional[dict]) -> list[str]:
    if not response:
        return []
    return list((response.get("data") or {}).get("keys") or [])


class SecretBackend(Protocol):
    """Protocol implemented by the KV backends."""

    mount: Mount
    variant: KVVersion

    def list_children(self, client: hvac.Client, path: str) -> list[str]:
        """List child names directly under a path ending with '/'.

        Args:
            client: Authenticated hvac client
            path: Full path of an interior node

        Returns:
            Child names; names ending with '/' are interior nodes
        """
        ...

    def read_secret(self, client: hvac.Client, path: str) -> Optional[dict[str, Any]]:
        """Read the payload of a leaf node.

        Args:
            client: Authenticated hvac client
            path: Full path of a leaf node

        Returns:
            Payload mapping, or None when the secret holds no data
        """
        ...


class KVv1Backend:
    """Backend for 'generic' mounts and 'kv' mounts declared as version 1."""

    variant = KVVersion.V1

    def __init__(self, mount: Mount):
        self.mount = mount

    def list_children(self, client: hvac.Client, path: str) -> list[str]:
        response = client.secrets.kv.v1.list_secrets(
            path=relative_path(self.mount, path),
            mount_point=self.mount.mount_point,
        )
        return _keys(response)

    def read_secret(self, client: hvac.Client, path: str) -> Optional[dict[str, Any]]:
        response = client.secrets.kv.v1.read_secret(
            path=relative_path(self.mount, path),
            mount_point=self.mount.mount_point,
        )
        if not response:
            return None
        return response.get("data")


class KVv2Backend:
    """Backend for versioned 'kv' mounts.

    Listing goes through the metadata endpoint and reads return the latest
    version. A soft-deleted latest version has no data and reads as None.
    """

    variant = KVVersion.V2

    def __init__(self, mount: Mount):
        self.mount = mount

    def list_children(self, client: hvac.Client, path: str) -> list[str]:
        response = client.secrets.kv.v2.list_secrets(
            path=relative_path(self.mount, path),
            mount_point=self.mount.mount_point,
        )
        return _keys(response)

    def read_secret(self, client: hvac.Client, path: str) -> Optional[dict[str, Any]]:
        response = client.secrets.kv.v2.read_secret_version(
            path=relative_path(self.mount, path),
            mount_point=self.mount.mount_point,
            raise_on_deleted_version=False,
        )
        if not response:
            return None
        return (response.get("data") or {}).get("data")


BACKENDS = {
    KVVersion.V1: KVv1Backend,
    KVVersion.V2: KVv2Backend,
}


def create_backend(mount: Mount) -> SecretBackend:
    """Select the backend for a mount's protocol variant.

    Raises:
        ConfigurationError: If the variant is not supported
    """
    backend_cls = BACKENDS.get(mount.variant)
    if backend_cls is None:
        raise ConfigurationError(
            f"Unknown backend type {mount.variant} for path {mount.path}",
            {"path": mount.path, "variant": str(mount.variant)},
        )
    logger.debug(f"Using {backend_cls.__name__} for mount {mount.path}")
    return backend_cls(mount)
