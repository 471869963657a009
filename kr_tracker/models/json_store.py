# kr_tracker/models/json_store.py
"""
JSON file snapshot store.

Reads and writes the tracker's camelCase snapshot JSON. The version token is
the SHA-256 of the file bytes, so any outside edit between load and replace
is detected. Writes go to a sibling temp file that is renamed into place.
"""

import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from kr_tracker.errors import SnapshotLoadError, StaleSnapshotError
from kr_tracker.models.entities import Snapshot
from kr_tracker.models.store import SnapshotStore, VersionedSnapshot

logger = logging.getLogger(__name__)

MISSING_FILE_VERSION = "missing"


class JsonFileSnapshotStore(SnapshotStore):
    """Snapshot persisted as a single JSON document."""

    def __init__(self, path: str | Path) -> None:
        """
        Initialize JSON file store.

        Args:
            path: Path to the snapshot JSON file (need not exist yet)
        """
        self._path = Path(path)
        logger.info(f"Created JsonFileSnapshotStore with path: {self._path}")

    @property
    def path(self) -> Path:
        return self._path

    def _read_bytes(self) -> bytes | None:
        try:
            return self._path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise SnapshotLoadError(f"Could not read snapshot file '{self._path}': {e}")

    @staticmethod
    def _version_of(raw: bytes | None) -> str:
        if raw is None:
            return MISSING_FILE_VERSION
        return hashlib.sha256(raw).hexdigest()

    def load(self) -> VersionedSnapshot:
        """
        Read and validate the snapshot file.

        A missing file reads as an empty snapshot.

        Raises:
            SnapshotLoadError: If the file is not valid JSON or not a valid snapshot
        """
        raw = self._read_bytes()
        if raw is None:
            logger.warning(f"Snapshot file {self._path} does not exist; using empty snapshot")
            return VersionedSnapshot(snapshot=Snapshot(), version=MISSING_FILE_VERSION)

        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SnapshotLoadError(f"Snapshot file '{self._path}' is not valid JSON: {e}")

        try:
            snapshot = Snapshot.model_validate(data)
        except ValidationError as e:
            raise SnapshotLoadError(
                f"Snapshot file '{self._path}' failed validation: {e.error_count()} error(s)",
                details={"errors": e.errors(include_url=False)},
            )

        logger.info(f"Loaded snapshot from {self._path}")
        return VersionedSnapshot(snapshot=snapshot, version=self._version_of(raw))

    def replace(self, snapshot: Snapshot, expected_version: str) -> str:
        current = self._version_of(self._read_bytes())
        if current != expected_version:
            raise StaleSnapshotError(expected_version, current)

        payload = serialize_snapshot(snapshot)
        write_snapshot_bytes(self._path, payload)

        version = self._version_of(payload)
        logger.info(f"Wrote snapshot to {self._path}", extra={"version": version})
        return version


def write_snapshot_bytes(path: Path, payload: bytes) -> None:
    """Atomically write ``payload`` to ``path`` via a temp file in the same directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def serialize_snapshot(snapshot: Snapshot) -> bytes:
    return json.dumps(snapshot.to_json_dict(), indent=2, ensure_ascii=False).encode("utf-8")


def write_snapshot(path: str | Path, snapshot: Snapshot) -> None:
    """Write ``snapshot`` to ``path`` without any version check."""
    write_snapshot_bytes(Path(path), serialize_snapshot(snapshot))
    logger.info(f"Wrote snapshot to {path}")
