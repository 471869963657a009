# kr_tracker/errors.py
"""Exceptions raised by the kr-tracker deletion engine."""


class KrTrackerError(Exception):
    """Base exception for all kr-tracker errors."""

    def __init__(self, message: str, *, details: dict[str, object] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class UnknownDeleteTypeError(KrTrackerError, ValueError):
    """Raised when a delete request names an entity type with no cascade rule."""

    def __init__(self, delete_type: object) -> None:
        super().__init__(
            f"Unknown delete type: {delete_type!r}",
            details={"delete_type": delete_type},
        )


class StaleSnapshotError(KrTrackerError):
    """Raised when a snapshot replace is attempted against an outdated version."""

    def __init__(self, expected_version: str, actual_version: str) -> None:
        super().__init__(
            "Snapshot changed since it was read "
            f"(expected version {expected_version[:12]}, found {actual_version[:12]})",
            details={"expected_version": expected_version, "actual_version": actual_version},
        )


class WorkflowStateError(KrTrackerError):
    """Raised when a deletion workflow transition is not allowed in the current state."""


class SnapshotLoadError(KrTrackerError):
    """Raised when a snapshot file cannot be read or does not validate."""
