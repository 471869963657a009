# kr_tracker/deletion/plan.py
"""
Deletion plan records.

A DeletionPlan is a recomputable description of what deleting one entity will
do: which ids disappear (removals), which surviving records get field patches
(updates), and the preview text shown before the user confirms.

Internal records (plain frozen dataclasses). The JSON view lives in
kr_tracker.models.responses.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DeleteType(str, Enum):
    """Entity kinds that can be deleted."""

    ORGANIZATION = "organization"
    TEAM = "team"
    POD = "pod"
    PERSON = "person"
    FUNCTION = "function"
    OBJECTIVE = "objective"
    KR = "kr"
    INITIATIVE = "initiative"


# Snapshot collection holding each deletable kind.
COLLECTION_FOR_TYPE: dict[DeleteType, str] = {
    DeleteType.ORGANIZATION: "organizations",
    DeleteType.TEAM: "teams",
    DeleteType.POD: "pods",
    DeleteType.PERSON: "people",
    DeleteType.FUNCTION: "functions",
    DeleteType.OBJECTIVE: "objectives",
    DeleteType.KR: "krs",
    DeleteType.INITIATIVE: "initiatives",
}

Patch = Mapping[str, Any]


@dataclass(frozen=True)
class CascadeItem:
    """One line of the confirmation preview, e.g. ("Pods", 3)."""

    label: str
    count: int | None = None
    description: str | None = None


@dataclass(frozen=True)
class Removals:
    """Ids to delete outright, per snapshot collection."""

    organizations: frozenset[str] = frozenset()
    teams: frozenset[str] = frozenset()
    pods: frozenset[str] = frozenset()
    people: frozenset[str] = frozenset()
    functions: frozenset[str] = frozenset()
    objectives: frozenset[str] = frozenset()
    krs: frozenset[str] = frozenset()
    initiatives: frozenset[str] = frozenset()

    def for_kind(self, kind: str) -> frozenset[str]:
        return getattr(self, kind, frozenset())

    @property
    def total(self) -> int:
        return sum(
            len(ids)
            for ids in (
                self.organizations,
                self.teams,
                self.pods,
                self.people,
                self.functions,
                self.objectives,
                self.krs,
                self.initiatives,
            )
        )


@dataclass(frozen=True)
class Updates:
    """Field patches for surviving records: id -> {field_name: new_value}."""

    pods: Mapping[str, Patch] = field(default_factory=dict)
    people: Mapping[str, Patch] = field(default_factory=dict)
    objectives: Mapping[str, Patch] = field(default_factory=dict)
    krs: Mapping[str, Patch] = field(default_factory=dict)
    initiatives: Mapping[str, Patch] = field(default_factory=dict)

    def for_kind(self, kind: str) -> Mapping[str, Patch]:
        return getattr(self, kind, {})

    @property
    def total(self) -> int:
        return sum(
            len(patches)
            for patches in (self.pods, self.people, self.objectives, self.krs, self.initiatives)
        )


@dataclass(frozen=True)
class DeletionPlan:
    """Effects of deleting one entity, plus the text for its confirmation dialog."""

    type: DeleteType
    id: str
    name: str
    title: str
    confirm_label: str
    description: str | None = None
    cascade_items: tuple[CascadeItem, ...] = ()
    notes: str | None = None
    removals: Removals = field(default_factory=Removals)
    updates: Updates = field(default_factory=Updates)
