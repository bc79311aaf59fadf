"""Tests for payload normalization."""

import json

from vault_to_ssm.vault.normalizer import normalize_payload


class TestNormalizePayload:
    """Test normalize_payload."""

    def test_scalar_value_returned_verbatim(self):
        assert normalize_payload({"value": "pw123"}) == "pw123"

    def test_scalar_value_not_serialized(self):
        value = '{"looks": "like json"}'
        assert normalize_payload({"value": value}) == value

    def test_value_wins_over_other_fields(self):
        assert normalize_payload({"value": "x", "other": "y"}) == "x"

    def test_empty_string_value(self):
        assert normalize_payload({"value": ""}) == ""

    def test_blob_serialized(self):
        payload = {"host": "x", "port": "5432"}
        result = normalize_payload(payload)
        assert json.loads(result) == payload

    def test_non_string_value_field_serializes_whole_payload(self):
        payload = {"value": 42, "unit": "s"}
        assert json.loads(normalize_payload(payload)) == payload

    def test_nested_blob_round_trips(self):
        payload = {"db": {"user": "app", "replicas": ["a", "b"]}, "enabled": True}
        assert json.loads(normalize_payload(payload)) == payload

    def test_serialization_is_stable(self):
        assert normalize_payload({"b": "2", "a": "1"}) == '{"a":"1","b":"2"}'

    def test_absent_payload(self):
        assert normalize_payload(None) is None

    def test_empty_payload(self):
        assert normalize_payload({}) is None
