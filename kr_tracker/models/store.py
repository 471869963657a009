# kr_tracker/models/store.py
"""
Snapshot store protocol and in-memory implementation.

The store is the single place a snapshot is replaced. Every replace names the
version it was computed from; if the stored snapshot has moved on since, the
replace is refused (compare-and-swap) and the caller must re-plan.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from uuid import uuid4

from kr_tracker.errors import StaleSnapshotError
from kr_tracker.models.entities import Snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VersionedSnapshot:
    """A snapshot together with the version token it was read at."""

    snapshot: Snapshot
    version: str


class SnapshotStore(ABC):
    """
    Abstract base class for snapshot storage.

    Both the in-memory and the JSON file store implement this protocol.
    """

    @abstractmethod
    def load(self) -> VersionedSnapshot:
        """
        Read the current snapshot.

        Returns:
            VersionedSnapshot with the snapshot and its version token
        """
        pass

    @abstractmethod
    def replace(self, snapshot: Snapshot, expected_version: str) -> str:
        """
        Replace the stored snapshot.

        Args:
            snapshot: New snapshot
            expected_version: Version the new snapshot was derived from

        Returns:
            Version token of the stored snapshot

        Raises:
            StaleSnapshotError: If the stored version is not expected_version
        """
        pass


class InMemorySnapshotStore(SnapshotStore):
    """
    Snapshot held in memory.

    Single-process, single-owner; no locking.
    """

    def __init__(self, snapshot: Snapshot | None = None) -> None:
        self._snapshot = snapshot or Snapshot()
        self._version = generate_version()
        logger.info("Initialized InMemorySnapshotStore")

    def load(self) -> VersionedSnapshot:
        return VersionedSnapshot(snapshot=self._snapshot, version=self._version)

    def replace(self, snapshot: Snapshot, expected_version: str) -> str:
        if expected_version != self._version:
            raise StaleSnapshotError(expected_version, self._version)

        self._snapshot = snapshot
        self._version = generate_version()
        logger.info("Replaced snapshot", extra={"version": self._version})
        return self._version


def generate_version() -> str:
    """
    Generate a fresh version token.

    Returns:
        12-character hex string (UUID4 truncated)
    """
    return uuid4().hex[:12]
