"""Shared fixtures: in-memory stand-ins for hvac and the SSM client."""

from typing import Any, Optional
from unittest.mock import MagicMock

import pytest
from hvac.exceptions import InvalidPath

from vault_to_ssm.retry import RetryConfiguration
from vault_to_ssm.vault.client import VaultClient
from vault_to_ssm.vault.models import VaultConnectionConfig


class FakeKVEngine:
    """Answers hvac KV v1/v2 list and read calls from an in-memory tree."""

    def __init__(self):
        self.secrets: dict[str, dict[str, Optional[dict[str, Any]]]] = {}
        self.failures: dict[tuple[str, str], Exception] = {}
        self.list_calls: list[tuple[str, str]] = []
        self.read_calls: list[tuple[str, str]] = []

    def add(self, mount_point: str, path: str, payload: Optional[dict[str, Any]]) -> None:
        self.secrets.setdefault(mount_point, {})[path] = payload

    def fail(self, mount_point: str, path: str, error: Exception) -> None:
        self.failures[(mount_point, path)] = error

    def _check(self, mount_point: str, path: str) -> None:
        error = self.failures.get((mount_point, path))
        if error is not None:
            raise error

    def list_secrets(self, path: str, mount_point: str) -> dict:
        self.list_calls.append((mount_point, path))
        self._check(mount_point, path)
        keys = set()
        for secret_path in self.secrets.get(mount_point, {}):
            if not secret_path.startswith(path):
                continue
            head, sep, _ = secret_path[len(path):].partition("/")
            keys.add(head + sep)
        if not keys:
            raise InvalidPath(f"no keys under {mount_point}/{path}")
        return {"data": {"keys": sorted(keys)}}

    def _payload(self, path: str, mount_point: str) -> Optional[dict[str, Any]]:
        self.read_calls.append((mount_point, path))
        self._check(mount_point, path)
        try:
            return self.secrets[mount_point][path]
        except KeyError:
            raise InvalidPath(f"no secret at {mount_point}/{path}")

    # KV version 1
    def read_secret(self, path: str, mount_point: str) -> dict:
        return {"data": self._payload(path, mount_point)}

    # KV version 2
    def read_secret_version(
        self,
        path: str,
        mount_point: str,
        raise_on_deleted_version: bool = True,
    ) -> dict:
        return {
            "data": {
                "data": self._payload(path, mount_point),
                "metadata": {"version": 1},
            }
        }


@pytest.fixture
def kv1() -> FakeKVEngine:
    return FakeKVEngine()


@pytest.fixture
def kv2() -> FakeKVEngine:
    return FakeKVEngine()


@pytest.fixture
def hvac_client(kv1, kv2) -> MagicMock:
    client = MagicMock()
    client.secrets.kv.v1 = kv1
    client.secrets.kv.v2 = kv2
    client.sys.list_mounted_secrets_engines.return_value = {
        "data": {
            "secret/": {"type": "kv", "options": {"version": "1"}},
            "kv/": {"type": "kv", "options": {"version": "2"}},
            "sys/": {"type": "system", "options": None},
            "cubbyhole/": {"type": "cubbyhole", "options": None},
        }
    }
    return client


@pytest.fixture
def vault_config() -> VaultConnectionConfig:
    return VaultConnectionConfig(
        vault_addr="http://127.0.0.1:8200",
        auth_method="token",
        token="test-token",
    )


@pytest.fixture
def vault_client(vault_config, hvac_client) -> VaultClient:
    return VaultClient(
        vault_config,
        retry_config=RetryConfiguration.no_retry(),
        hvac_client=hvac_client,
    )


@pytest.fixture
def ssm_client() -> MagicMock:
    client = MagicMock()
    client.put_parameter.return_value = {"Version": 1, "Tier": "Standard"}
    return client
