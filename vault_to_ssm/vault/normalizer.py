"""Flatten secret payloads into a single string value."""

import json
from typing import Any, Mapping, Optional

SCALAR_FIELD = "value"


def normalize_payload(payload: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Turn a secret payload into the value stored in Parameter Store.

    A payload whose ``value`` field is a string is treated as a scalar and
    that string is returned verbatim. Any other payload is serialized as
    compact JSON with sorted keys.

    Args:
        payload: Secret data as read from Vault

    Returns:
        Flat string value, or None when the payload is absent or empty
    """
    if not payload:
        return None

    value = payload.get(SCALAR_FIELD)
    if isinstance(value, str):
        return value

    return json.dumps(dict(payload), sort_keys=True, separators=(",", ":"), default=str)
