"""Vault side of the migration.

This package discovers KV mounts, walks their trees through a KV version 1
or version 2 backend and normalizes the secrets it finds.
"""

from vault_to_ssm.vault.backends import (
    KVv1Backend,
    KVv2Backend,
    SecretBackend,
    create_backend,
)
from vault_to_ssm.vault.classifier import (
    build_mounts,
    classify_mounts,
    parse_mount_spec,
    parse_mount_specs,
)
from vault_to_ssm.vault.client import VaultClient
from vault_to_ssm.vault.models import KVVersion, Mount, VaultConnectionConfig
from vault_to_ssm.vault.normalizer import normalize_payload
from vault_to_ssm.vault.walker import TreeWalker

__all__ = [
    "KVv1Backend",
    "KVv2Backend",
    "SecretBackend",
    "create_backend",
    "build_mounts",
    "classify_mounts",
    "parse_mount_spec",
    "parse_mount_specs",
    "VaultClient",
    "KVVersion",
    "Mount",
    "VaultConnectionConfig",
    "normalize_payload",
    "TreeWalker",
]
