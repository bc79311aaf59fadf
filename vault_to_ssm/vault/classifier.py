"""Mount discovery and protocol classification.

Only KV mounts are migrated. 'generic' is the legacy name of the KV version 1
engine; 'kv' mounts are version 1 when declared so and version 2 otherwise.
"""

import logging
from typing import Any, Iterable, Mapping, Optional

from vault_to_ssm.exceptions import AccessError, ConfigurationError
from vault_to_ssm.vault.models import KVVersion, Mount

logger = logging.getLogger(__name__)

LEGACY_ENGINE_TYPE = "generic"
KV_ENGINE_TYPE = "kv"

VARIANT_ALIASES = {
    "v1": KVVersion.V1,
    "kv1": KVVersion.V1,
    "1": KVVersion.V1,
    "v2": KVVersion.V2,
    "kv2": KVVersion.V2,
    "2": KVVersion.V2,
}


def classify_engine(
    engine_type: str,
    options: Optional[Mapping[str, Any]],
) -> Optional[KVVersion]:
    """Return the protocol variant of an engine, or None if it is not KV."""
    if engine_type == LEGACY_ENGINE_TYPE:
        return KVVersion.V1
    if engine_type == KV_ENGINE_TYPE:
        if (options or {}).get("version") == "1":
            return KVVersion.V1
        return KVVersion.V2
    return None


def classify_mounts(mounts: Mapping[str, Mapping[str, Any]]) -> dict[str, KVVersion]:
    """Map every KV mount to its protocol variant.

    Args:
        mounts: Mount path to description, as returned by sys/mounts

    Returns:
        Mount path to protocol variant

    Raises:
        AccessError: If no KV mount is visible
    """
    classified: dict[str, KVVersion] = {}
    for path, info in mounts.items():
        variant = classify_engine(info.get("type", ""), info.get("options"))
        if variant is None:
            logger.debug(f"Skipping mount {path} of type {info.get('type')}")
            continue
        classified[path] = variant

    if not classified:
        raise AccessError()

    return classified


def build_mounts(mounts: Mapping[str, Mapping[str, Any]]) -> list[Mount]:
    """Classify discovered mounts and wrap them in Mount models, sorted by path."""
    classified = classify_mounts(mounts)
    result = []
    for path, variant in classified.items():
        try:
            mount = Mount(
                path=path,
                variant=variant,
                engine_type=mounts[path].get("type"),
                options=dict(mounts[path].get("options") or {}),
            )
        except ValueError as e:
            raise ConfigurationError(
                f"Mount {path!r} cannot be migrated: {e}",
                details={"mount": path},
            ) from e
        result.append(mount)
    result.sort(key=lambda m: m.path)
    for mount in result:
        logger.info(f"Discovered mount {mount.path} ({mount.engine_type}, {mount.variant.value})")
    return result


def parse_mount_spec(spec: str) -> Mount:
    """Build a Mount from an allow-list entry such as 'secret=v1'.

    A bare mount path defaults to KV version 2.

    Raises:
        ConfigurationError: If the variant is not recognized
    """
    path, _, raw_variant = spec.partition("=")
    raw_variant = raw_variant.strip().lower() or "v2"
    variant = VARIANT_ALIASES.get(raw_variant)
    if variant is None:
        raise ConfigurationError(
            f"Unknown backend type {raw_variant} for path {path}",
            {"path": path, "variant": raw_variant},
        )
    try:
        return Mount(path=path, variant=variant)
    except ValueError as e:
        raise ConfigurationError(f"Invalid mount '{spec}': {e}") from e


def parse_mount_specs(specs: Iterable[str]) -> list[Mount]:
    """Parse an explicit allow-list, dropping duplicate paths (last one wins)."""
    mounts = {}
    for spec in specs:
        mount = parse_mount_spec(spec)
        mounts[mount.path] = mount
    return sorted(mounts.values(), key=lambda m: m.path)
