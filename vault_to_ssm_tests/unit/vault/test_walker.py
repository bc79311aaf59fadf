"""Tests for the recursive mount walk."""

import json

import pytest
from hvac.exceptions import Forbidden, InvalidPath, VaultDown

from vault_to_ssm.exceptions import (
    AccessError,
    NotFoundError,
    TransportError,
    WalkDepthError,
)
from vault_to_ssm.vault.models import KVVersion, Mount
from vault_to_ssm.vault.walker import TreeWalker


@pytest.fixture
def secret_mount():
    return Mount(path="secret/", variant=KVVersion.V1)


@pytest.fixture
def kv_mount():
    return Mount(path="kv/", variant=KVVersion.V2)


class TestTreeWalker:
    """Test TreeWalker.walk."""

    def test_scalar_leaf_on_v1_mount(self, vault_client, kv1, secret_mount):
        kv1.add("secret", "app/db", {"value": "pw123"})
        assert TreeWalker(vault_client, secret_mount).walk() == {"secret/app/db": "pw123"}

    def test_blob_leaf_on_v2_mount(self, vault_client, kv2, kv_mount):
        kv2.add("kv", "config", {"host": "x", "port": "5432"})
        data = TreeWalker(vault_client, kv_mount).walk()
        assert list(data) == ["kv/config"]
        assert json.loads(data["kv/config"]) == {"host": "x", "port": "5432"}

    def test_recurses_into_interior_nodes(self, vault_client, kv2, kv_mount):
        kv2.add("kv", "sub/leaf1", {"value": "one"})
        kv2.add("kv", "sub/nested/leaf2", {"value": "two"})
        data = TreeWalker(vault_client, kv_mount).walk()
        assert data == {"kv/sub/leaf1": "one", "kv/sub/nested/leaf2": "two"}
        assert ("kv", "sub/") in kv2.list_calls
        assert ("kv", "sub/nested/") in kv2.list_calls
        assert ("kv", "sub/leaf1") in kv2.read_calls

    def test_backend_matches_mount_variant(self, vault_client, kv1, kv2, kv_mount):
        kv2.add("kv", "a", {"value": "1"})
        TreeWalker(vault_client, kv_mount).walk()
        assert kv1.list_calls == []
        assert kv1.read_calls == []

    def test_empty_payloads_skipped(self, vault_client, kv2, kv_mount):
        kv2.add("kv", "deleted", None)
        kv2.add("kv", "empty", {})
        kv2.add("kv", "kept", {"value": "v"})
        assert TreeWalker(vault_client, kv_mount).walk() == {"kv/kept": "v"}

    def test_empty_mount(self, vault_client, kv_mount):
        assert TreeWalker(vault_client, kv_mount).walk() == {}

    def test_listing_failure_aborts_walk(self, vault_client, kv2, kv_mount):
        kv2.add("kv", "a/leaf", {"value": "1"})
        kv2.add("kv", "b/leaf", {"value": "2"})
        kv2.fail("kv", "b/", VaultDown("sealed"))
        with pytest.raises(TransportError) as exc_info:
            TreeWalker(vault_client, kv_mount).walk()
        assert exc_info.value.path == "kv/b/"

    def test_read_failure_aborts_walk(self, vault_client, kv1, secret_mount):
        kv1.add("secret", "app/db", {"value": "pw"})
        kv1.fail("secret", "app/db", Forbidden("denied"))
        with pytest.raises(AccessError) as exc_info:
            TreeWalker(vault_client, secret_mount).walk()
        assert exc_info.value.path == "secret/app/db"

    def test_missing_nested_listing_is_fatal(self, vault_client, kv1, secret_mount):
        # a listed folder that vanished before it was listed
        kv1.add("secret", "app/db", {"value": "pw"})
        kv1.fail("secret", "app/", InvalidPath("gone"))
        with pytest.raises(NotFoundError) as exc_info:
            TreeWalker(vault_client, secret_mount).walk()
        assert exc_info.value.path == "secret/app/"

    def test_depth_limit(self, vault_client, kv2, kv_mount):
        kv2.add("kv", "a/b/c/leaf", {"value": "deep"})
        with pytest.raises(WalkDepthError) as exc_info:
            TreeWalker(vault_client, kv_mount, max_depth=2).walk()
        assert exc_info.value.path == "kv/a/b/c/"
        assert exc_info.value.max_depth == 2

    def test_depth_limit_boundary(self, vault_client, kv2, kv_mount):
        kv2.add("kv", "a/b/leaf", {"value": "ok"})
        assert TreeWalker(vault_client, kv_mount, max_depth=2).walk() == {"kv/a/b/leaf": "ok"}

    def test_negative_depth_rejected(self, vault_client, kv_mount):
        with pytest.raises(ValueError):
            TreeWalker(vault_client, kv_mount, max_depth=-1)
