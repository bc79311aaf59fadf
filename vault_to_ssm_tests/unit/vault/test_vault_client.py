"""Tests for VaultClient authentication, retries and error translation."""

from unittest.mock import MagicMock

import pytest
import requests
from hvac.exceptions import Forbidden, InternalServerError, InvalidPath, VaultDown

from vault_to_ssm.exceptions import (
    AccessError,
    ConfigurationError,
    NotFoundError,
    TransportError,
)
from vault_to_ssm.retry import RetryConfiguration
from vault_to_ssm.vault.backends import create_backend
from vault_to_ssm.vault.client import VaultClient, translate_errors
from vault_to_ssm.vault.models import KVVersion, Mount, VaultConnectionConfig


@pytest.fixture
def backend():
    return create_backend(Mount(path="secret/", variant=KVVersion.V1))


class TestTranslateErrors:
    """Test hvac error translation."""

    def test_invalid_path(self):
        with pytest.raises(NotFoundError) as exc_info:
            with translate_errors("secret/app/", "list"):
                raise InvalidPath("missing")
        assert exc_info.value.path == "secret/app/"

    def test_forbidden(self):
        with pytest.raises(AccessError) as exc_info:
            with translate_errors("secret/app/", "read"):
                raise Forbidden("denied")
        assert "secret/app/" in str(exc_info.value)

    def test_server_error(self):
        with pytest.raises(TransportError) as exc_info:
            with translate_errors("secret/app/", "list"):
                raise VaultDown("sealed")
        assert exc_info.value.path == "secret/app/"
        assert exc_info.value.details == {"error": "VaultDown"}

    def test_connection_error(self):
        with pytest.raises(TransportError):
            with translate_errors("kv/", "list"):
                raise requests.exceptions.ConnectionError("refused")

    def test_other_exceptions_pass_through(self):
        with pytest.raises(KeyError):
            with translate_errors("kv/", "read"):
                raise KeyError("bug")


class TestAuthentication:
    """Test authentication methods."""

    def test_token_auth(self, vault_client, hvac_client):
        vault_client.list_mounts()
        assert hvac_client.token == "test-token"

    def test_token_auth_requires_token(self, hvac_client):
        config = VaultConnectionConfig(vault_addr="http://vault:8200", auth_method="token")
        client = VaultClient(config, hvac_client=hvac_client)
        with pytest.raises(ConfigurationError):
            client.list_mounts()

    def test_approle_auth(self, hvac_client):
        hvac_client.auth.approle.login.return_value = {"auth": {"client_token": "s.app"}}
        config = VaultConnectionConfig(
            vault_addr="http://vault:8200",
            auth_method="approle",
            role_id="role",
            secret_id="secret",
        )
        client = VaultClient(config, hvac_client=hvac_client)
        client.list_mounts()
        hvac_client.auth.approle.login.assert_called_once_with(role_id="role", secret_id="secret")
        assert hvac_client.token == "s.app"

    def test_approle_without_token_in_response(self, hvac_client):
        hvac_client.auth.approle.login.return_value = {"auth": {}}
        config = VaultConnectionConfig(
            vault_addr="http://vault:8200",
            auth_method="approle",
            role_id="role",
            secret_id="secret",
        )
        with pytest.raises(AccessError):
            VaultClient(config, hvac_client=hvac_client).list_mounts()

    def test_authenticates_once(self, vault_client, hvac_client, kv1, backend):
        kv1.add("secret", "a", {"value": "1"})
        vault_client.list_mounts()
        vault_client.list_children(backend, "secret/")
        assert vault_client._initialized is True


class TestListMounts:
    """Test mount discovery."""

    def test_nested_data_response(self, vault_client):
        mounts = vault_client.list_mounts()
        assert set(mounts) == {"secret/", "kv/", "sys/", "cubbyhole/"}

    def test_legacy_top_level_response(self, vault_client, hvac_client):
        hvac_client.sys.list_mounted_secrets_engines.return_value = {
            "secret/": {"type": "generic", "options": None},
            "request_id": "abc",
            "lease_duration": 0,
        }
        assert vault_client.list_mounts() == {"secret/": {"type": "generic", "options": None}}

    def test_forbidden(self, vault_client, hvac_client):
        hvac_client.sys.list_mounted_secrets_engines.side_effect = Forbidden("denied")
        with pytest.raises(AccessError):
            vault_client.list_mounts()


class TestRetries:
    """Test transient failures are retried before translation."""

    def test_transient_failure_retried(self, vault_config, hvac_client, kv1, backend):
        kv1.add("secret", "a", {"value": "1"})
        real_list = kv1.list_secrets
        calls = {"n": 0}

        def flaky(path, mount_point):
            calls["n"] += 1
            if calls["n"] == 1:
                raise InternalServerError("boom")
            return real_list(path=path, mount_point=mount_point)

        hvac_client.secrets.kv.v1 = MagicMock(wraps=kv1)
        hvac_client.secrets.kv.v1.list_secrets.side_effect = flaky
        client = VaultClient(
            vault_config,
            retry_config=RetryConfiguration(max_attempts=3, base_delay=0.0, max_delay=0.0, jitter=0.0),
            hvac_client=hvac_client,
        )
        assert client.list_children(backend, "secret/") == ["a"]
        assert calls["n"] == 2

    def test_exhausted_retries_raise_transport_error(self, vault_config, hvac_client, kv1, backend):
        kv1.fail("secret", "", VaultDown("down"))
        client = VaultClient(
            vault_config,
            retry_config=RetryConfiguration(max_attempts=2, base_delay=0.0, max_delay=0.0, jitter=0.0),
            hvac_client=hvac_client,
        )
        with pytest.raises(TransportError):
            client.list_children(backend, "secret/")
        assert len(kv1.list_calls) == 2

    def test_not_found_not_retried(self, vault_config, hvac_client, kv1, backend):
        client = VaultClient(
            vault_config,
            retry_config=RetryConfiguration(max_attempts=3, base_delay=0.0, max_delay=0.0, jitter=0.0),
            hvac_client=hvac_client,
        )
        with pytest.raises(NotFoundError):
            client.read_secret(backend, "secret/missing")
        assert len(kv1.read_calls) == 1


class TestClose:
    """Test client cleanup."""

    def test_context_manager_closes_adapter(self, vault_config, hvac_client):
        with VaultClient(vault_config, hvac_client=hvac_client) as client:
            client.list_mounts()
        hvac_client.adapter.close.assert_called_once()
        assert client._client is None
