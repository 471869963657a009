"""
Data models for kr-tracker.

Provides the entity records, snapshot stores and Pydantic response models.
"""

from kr_tracker.models.entities import (
    ALL_TEAMS,
    KR,
    UNASSIGNED_OWNER,
    Initiative,
    Objective,
    OrgFunction,
    Organization,
    Person,
    Pod,
    PodMember,
    Snapshot,
    Team,
)
from kr_tracker.models.json_store import JsonFileSnapshotStore
from kr_tracker.models.store import InMemorySnapshotStore, SnapshotStore, VersionedSnapshot
from kr_tracker.models.responses import (
    CascadeItemResponse,
    DanglingReferenceResponse,
    DeletionPlanResponse,
    IntegrityReportResponse,
)

__all__ = [
    # Entities
    "Organization",
    "Team",
    "Pod",
    "PodMember",
    "Person",
    "OrgFunction",
    "Objective",
    "KR",
    "Initiative",
    "Snapshot",
    "ALL_TEAMS",
    "UNASSIGNED_OWNER",
    # Stores
    "SnapshotStore",
    "VersionedSnapshot",
    "InMemorySnapshotStore",
    "JsonFileSnapshotStore",
    # Response models
    "CascadeItemResponse",
    "DeletionPlanResponse",
    "DanglingReferenceResponse",
    "IntegrityReportResponse",
]
