"""Merge per-mount results into the mapping that gets published."""

import logging
from threading import Lock
from typing import Mapping, MutableMapping

logger = logging.getLogger(__name__)


def merge_mount_data(source: Mapping[str, str], destination: MutableMapping[str, str]) -> None:
    """Copy every entry of source into destination; existing keys are overwritten."""
    for key, value in source.items():
        destination[key] = value


class SecretAggregator:
    """Owns the aggregated mapping for one run.

    Merges are serialized so mount walks may complete on worker threads.
    """

    def __init__(self):
        self._data: dict[str, str] = {}
        self._counts: dict[str, int] = {}
        self._lock = Lock()

    def merge(self, mount_path: str, partial: Mapping[str, str]) -> None:
        """Merge the complete result of a successful mount walk."""
        with self._lock:
            overwritten = sum(1 for key in partial if key in self._data)
            merge_mount_data(partial, self._data)
            self._counts[mount_path] = len(partial)
        if overwritten:
            logger.warning(f"Mount {mount_path} overwrote {overwritten} existing entries")

    @property
    def data(self) -> dict[str, str]:
        """Snapshot of the aggregated mapping."""
        with self._lock:
            return dict(self._data)

    @property
    def counts(self) -> dict[str, int]:
        """Entries contributed by each merged mount."""
        with self._lock:
            return dict(self._counts)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
