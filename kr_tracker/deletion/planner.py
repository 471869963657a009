# kr_tracker/deletion/planner.py
"""
Deletion planner.

Computes, without touching the snapshot, everything that deleting one entity
implies: the transitive set of dependent records to remove and the patches
that keep surviving records from pointing at removed ones.

Each DeleteType has exactly one handler, registered with @_handles. The
registry is checked at import time so a new DeleteType without a cascade rule
fails loudly instead of silently planning nothing.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from kr_tracker.deletion.helpers import build_cascade_items, find_by_id, ids_of, merge_patch
from kr_tracker.deletion.plan import (
    CascadeItem,
    DeleteType,
    DeletionPlan,
    Removals,
    Updates,
)
from kr_tracker.errors import UnknownDeleteTypeError
from kr_tracker.models.entities import UNASSIGNED_OWNER, Person, Snapshot, Team, member_name

logger = logging.getLogger(__name__)

PlanHandler = Callable[[str, Snapshot, str], "DeletionPlan | None"]

_HANDLERS: dict[DeleteType, PlanHandler] = {}


def _handles(delete_type: DeleteType) -> Callable[[PlanHandler], PlanHandler]:
    def register(handler: PlanHandler) -> PlanHandler:
        if delete_type in _HANDLERS:
            raise RuntimeError(f"Duplicate deletion handler for '{delete_type.value}'")
        _HANDLERS[delete_type] = handler
        return handler

    return register


def team_belongs_to_organization(
    team: Team, organization_id: str, fallback_org_id: str | None = None
) -> bool:
    """
    Whether ``team`` belongs to ``organization_id``.

    Teams without an organization_id belong to the fallback organization
    (the first one in the snapshot).
    """
    if team.organization_id:
        return team.organization_id == organization_id
    if fallback_org_id:
        return fallback_org_id == organization_id
    return False


@dataclass
class _Detachment:
    """Patches that clear references to removed people and pods."""

    pods: dict[str, dict[str, Any]] = field(default_factory=dict)
    people: dict[str, dict[str, Any]] = field(default_factory=dict)
    objectives: dict[str, dict[str, Any]] = field(default_factory=dict)
    krs: dict[str, dict[str, Any]] = field(default_factory=dict)
    initiatives: dict[str, dict[str, Any]] = field(default_factory=dict)

    @property
    def managers_cleared(self) -> int:
        return sum(1 for patch in self.people.values() if "manager_id" in patch)

    @property
    def owners_reset(self) -> int:
        return sum(1 for patch in self.krs.values() if "owner" in patch) + sum(
            1 for patch in self.initiatives.values() if "owner" in patch
        )

    @property
    def pod_links_cleared(self) -> int:
        return sum(
            1
            for patches in (self.people, self.objectives, self.krs, self.initiatives)
            for patch in patches.values()
            if "pod_id" in patch
        )

    def updates(self) -> Updates:
        return Updates(
            pods=self.pods,
            people=self.people,
            objectives=self.objectives,
            krs=self.krs,
            initiatives=self.initiatives,
        )


def _detach_people(
    removed: list[Person],
    snapshot: Snapshot,
    timestamp: str,
    removing: Removals = Removals(),
) -> _Detachment:
    """
    Clear manager links and name-based references pointing at ``removed``.

    Records listed in ``removing`` are being deleted themselves and get no
    patches.
    """
    detachment = _Detachment()
    person_ids = ids_of(removed)
    names = {person.name for person in removed if person.name}

    for person in snapshot.people:
        if person.id not in person_ids and person.manager_id in person_ids:
            merge_patch(detachment.people, person.id, {"manager_id": None})

    for kr in snapshot.krs:
        if kr.id not in removing.krs and kr.owner and kr.owner in names:
            merge_patch(
                detachment.krs, kr.id, {"owner": UNASSIGNED_OWNER, "last_updated": timestamp}
            )

    for initiative in snapshot.initiatives:
        if (
            initiative.id not in removing.initiatives
            and initiative.owner
            and initiative.owner in names
        ):
            merge_patch(detachment.initiatives, initiative.id, {"owner": UNASSIGNED_OWNER})

    # Pod members are stored by name as well.
    for pod in snapshot.pods:
        if pod.id in removing.pods:
            continue
        kept = [member for member in pod.members if member_name(member) not in names]
        if len(kept) != len(pod.members):
            merge_patch(detachment.pods, pod.id, {"members": kept})

    return detachment


def _detach_pods(
    pod_ids: frozenset[str],
    snapshot: Snapshot,
    detachment: _Detachment,
    removing: Removals = Removals(),
) -> None:
    """Clear ``pod_id`` on every record that points at a removed pod."""
    if not pod_ids:
        return
    clear = {"pod_id": None}
    for kind in ("people", "objectives", "krs", "initiatives"):
        skip = removing.for_kind(kind)
        patches = getattr(detachment, kind)
        for item in getattr(snapshot, kind):
            if item.id not in skip and item.pod_id in pod_ids:
                merge_patch(patches, item.id, clear)


@dataclass
class _TeamCascade:
    removals: Removals
    detachment: _Detachment


def _cascade_from_teams(
    team_ids: frozenset[str],
    snapshot: Snapshot,
    timestamp: str,
    organization_id: str | None = None,
) -> _TeamCascade:
    """
    Everything owned by ``team_ids``.

    When ``organization_id`` is given, objectives and KRs scoped directly to the
    organization are swept up as well. Surviving records that point at a
    removed person or pod are detached.
    """
    pod_ids = ids_of(pod for pod in snapshot.pods if pod.team_id in team_ids)

    removed_people = [
        person for person in snapshot.people if person.team_id and person.team_id in team_ids
    ]

    objective_ids = ids_of(
        objective
        for objective in snapshot.objectives
        if (organization_id is not None and objective.organization_id == organization_id)
        or (objective.team_id and objective.team_id in team_ids)
    )

    kr_ids = ids_of(
        kr
        for kr in snapshot.krs
        if (organization_id is not None and kr.organization_id == organization_id)
        or kr.team_id in team_ids
        or (kr.objective_id and kr.objective_id in objective_ids)
    )

    initiative_ids = ids_of(
        initiative
        for initiative in snapshot.initiatives
        if initiative.team_id in team_ids
        or any(kr_id in kr_ids for kr_id in initiative.linked_kr_ids)
    )

    removals = Removals(
        teams=team_ids,
        pods=pod_ids,
        people=ids_of(removed_people),
        objectives=objective_ids,
        krs=kr_ids,
        initiatives=initiative_ids,
    )
    detachment = _detach_people(removed_people, snapshot, timestamp, removing=removals)
    _detach_pods(pod_ids, snapshot, detachment, removing=removals)

    return _TeamCascade(removals=removals, detachment=detachment)


def _team_cascade_items(cascade: _TeamCascade) -> list[CascadeItem]:
    removals = cascade.removals
    detachment = cascade.detachment
    return [
        CascadeItem("Pods", len(removals.pods)),
        CascadeItem("People removed", len(removals.people)),
        CascadeItem("Objectives", len(removals.objectives)),
        CascadeItem("Key Results", len(removals.krs)),
        CascadeItem("Initiatives", len(removals.initiatives)),
        CascadeItem("Managers cleared", detachment.managers_cleared),
        CascadeItem("Owners reset", detachment.owners_reset),
        CascadeItem("Pod links cleared", detachment.pod_links_cleared),
        CascadeItem("Pod memberships updated", len(detachment.pods)),
    ]


@_handles(DeleteType.ORGANIZATION)
def _plan_organization(entity_id: str, snapshot: Snapshot, timestamp: str) -> DeletionPlan | None:
    organization = find_by_id(snapshot.organizations, entity_id)
    if organization is None:
        return None

    fallback_org_id = snapshot.organizations[0].id if snapshot.organizations else None
    team_ids = ids_of(
        team
        for team in snapshot.teams
        if team_belongs_to_organization(team, organization.id, fallback_org_id)
    )
    cascade = _cascade_from_teams(team_ids, snapshot, timestamp, organization_id=organization.id)

    return DeletionPlan(
        type=DeleteType.ORGANIZATION,
        id=entity_id,
        name=organization.name,
        title=f'Delete organization "{organization.name}"?',
        description=(
            "Removing an organization will cascade to all teams, pods, people, "
            "objectives, and KRs within it."
        ),
        confirm_label="Delete Organization",
        cascade_items=build_cascade_items(
            CascadeItem("Teams", len(cascade.removals.teams)),
            *_team_cascade_items(cascade),
        ),
        notes="This action cannot be undone.",
        removals=replace(cascade.removals, organizations=frozenset({entity_id})),
        updates=cascade.detachment.updates(),
    )


@_handles(DeleteType.TEAM)
def _plan_team(entity_id: str, snapshot: Snapshot, timestamp: str) -> DeletionPlan | None:
    team = find_by_id(snapshot.teams, entity_id)
    if team is None:
        return None

    cascade = _cascade_from_teams(frozenset({entity_id}), snapshot, timestamp)

    return DeletionPlan(
        type=DeleteType.TEAM,
        id=entity_id,
        name=team.name,
        title=f'Delete team "{team.name}"?',
        description=(
            "Deleting a team removes all pods, people, objectives, and key results "
            "associated with it."
        ),
        confirm_label="Delete Team",
        cascade_items=build_cascade_items(*_team_cascade_items(cascade)),
        notes="Team removal reassigns any managed reports to have no manager.",
        removals=cascade.removals,
        updates=cascade.detachment.updates(),
    )


@_handles(DeleteType.POD)
def _plan_pod(entity_id: str, snapshot: Snapshot, timestamp: str) -> DeletionPlan | None:
    pod = find_by_id(snapshot.pods, entity_id)
    if pod is None:
        return None

    detachment = _Detachment()
    _detach_pods(frozenset({entity_id}), snapshot, detachment)

    return DeletionPlan(
        type=DeleteType.POD,
        id=entity_id,
        name=pod.name,
        title=f'Delete pod "{pod.name}"?',
        description=(
            "Deleting a pod clears its association from members, objectives, key results, "
            "and initiatives."
        ),
        confirm_label="Delete Pod",
        cascade_items=build_cascade_items(
            CascadeItem("Members unassigned", len(detachment.people)),
            CascadeItem("Objectives updated", len(detachment.objectives)),
            CascadeItem("Key Results updated", len(detachment.krs)),
            CascadeItem("Initiatives updated", len(detachment.initiatives)),
        ),
        removals=Removals(pods=frozenset({entity_id})),
        updates=detachment.updates(),
    )


@_handles(DeleteType.PERSON)
def _plan_person(entity_id: str, snapshot: Snapshot, timestamp: str) -> DeletionPlan | None:
    person = find_by_id(snapshot.people, entity_id)
    if person is None:
        return None

    detachment = _detach_people(
        [person], snapshot, timestamp, removing=Removals(people=frozenset({entity_id}))
    )

    # Contributors are names too; drop this person's name from every list.
    contributor_updates = 0
    if person.name:
        for initiative in snapshot.initiatives:
            if person.name in initiative.contributors:
                merge_patch(
                    detachment.initiatives,
                    initiative.id,
                    {"contributors": [c for c in initiative.contributors if c != person.name]},
                )
                contributor_updates += 1

    namesakes = [
        other for other in snapshot.people if other.id != entity_id and other.name == person.name
    ]
    notes = None
    if namesakes:
        notes = (
            f"{len(namesakes)} other {'person shares' if len(namesakes) == 1 else 'people share'} "
            f'the name "{person.name}"; records they own by name will also be reset.'
        )

    return DeletionPlan(
        type=DeleteType.PERSON,
        id=entity_id,
        name=person.name,
        title=f"Delete {person.name}?",
        description=(
            "This removes the person from the organization and clears dependent relationships."
        ),
        confirm_label="Delete Person",
        cascade_items=build_cascade_items(
            CascadeItem("Direct reports reassigned", detachment.managers_cleared),
            CascadeItem("KR owners reset", len(detachment.krs)),
            CascadeItem("Initiatives updated", len(detachment.initiatives)),
            CascadeItem(
                "Contributor lists updated",
                contributor_updates,
                description="Name removed from initiative contributors",
            ),
            CascadeItem("Pod memberships updated", len(detachment.pods)),
        ),
        notes=notes,
        removals=Removals(people=frozenset({entity_id})),
        updates=detachment.updates(),
    )


@_handles(DeleteType.FUNCTION)
def _plan_function(entity_id: str, snapshot: Snapshot, timestamp: str) -> DeletionPlan | None:
    function = find_by_id(snapshot.functions, entity_id)
    if function is None:
        return None

    remaining = [fn for fn in snapshot.functions if fn.id != entity_id]
    holders = [person for person in snapshot.people if person.function_id == entity_id]

    if remaining:
        fallback = remaining[0]
        people_updates = {person.id: {"function_id": fallback.id} for person in holders}
        return DeletionPlan(
            type=DeleteType.FUNCTION,
            id=entity_id,
            name=function.name,
            title=f'Delete function "{function.name}"?',
            description=f"Members will be reassigned to {fallback.name}.",
            confirm_label="Delete Function",
            cascade_items=build_cascade_items(
                CascadeItem(f"People reassigned to {fallback.name}", len(people_updates)),
            ),
            removals=Removals(functions=frozenset({entity_id})),
            updates=Updates(people=people_updates),
        )

    # Last function: nobody can hold a function that no longer exists.
    removals = Removals(functions=frozenset({entity_id}), people=ids_of(holders))
    detachment = _detach_people(holders, snapshot, timestamp, removing=removals)
    return DeletionPlan(
        type=DeleteType.FUNCTION,
        id=entity_id,
        name=function.name,
        title=f'Delete function "{function.name}"?',
        description="No other functions exist; associated people will be removed.",
        confirm_label="Delete Function",
        cascade_items=build_cascade_items(
            CascadeItem("People removed", len(removals.people)),
            CascadeItem("Managers cleared", detachment.managers_cleared),
            CascadeItem("Owners reset", detachment.owners_reset),
            CascadeItem("Pod memberships updated", len(detachment.pods)),
        ),
        notes="A person cannot exist without a function.",
        removals=removals,
        updates=detachment.updates(),
    )


@_handles(DeleteType.OBJECTIVE)
def _plan_objective(entity_id: str, snapshot: Snapshot, timestamp: str) -> DeletionPlan | None:
    objective = find_by_id(snapshot.objectives, entity_id)
    if objective is None:
        return None

    kr_ids = ids_of(kr for kr in snapshot.krs if kr.objective_id == entity_id)
    initiative_ids = ids_of(
        initiative
        for initiative in snapshot.initiatives
        if any(kr_id in kr_ids for kr_id in initiative.linked_kr_ids)
    )

    return DeletionPlan(
        type=DeleteType.OBJECTIVE,
        id=entity_id,
        name=objective.title,
        title=f'Delete objective "{objective.title}"?',
        description=(
            "All key results linked to this objective (and their initiatives) will be removed."
        ),
        confirm_label="Delete Objective",
        cascade_items=build_cascade_items(
            CascadeItem("Key Results", len(kr_ids)),
            CascadeItem("Initiatives", len(initiative_ids)),
        ),
        removals=Removals(
            objectives=frozenset({entity_id}), krs=kr_ids, initiatives=initiative_ids
        ),
    )


@_handles(DeleteType.KR)
def _plan_kr(entity_id: str, snapshot: Snapshot, timestamp: str) -> DeletionPlan | None:
    kr = find_by_id(snapshot.krs, entity_id)
    if kr is None:
        return None

    initiative_ids = ids_of(
        initiative for initiative in snapshot.initiatives if entity_id in initiative.linked_kr_ids
    )
    objective_links = sum(1 for objective in snapshot.objectives if entity_id in objective.kr_ids)

    return DeletionPlan(
        type=DeleteType.KR,
        id=entity_id,
        name=kr.title,
        title=f'Delete key result "{kr.title}"?',
        description="This removes the key result and any initiatives that depend on it.",
        confirm_label="Delete Key Result",
        cascade_items=build_cascade_items(
            CascadeItem("Initiatives", len(initiative_ids)),
            CascadeItem("Objective links updated", objective_links),
        ),
        removals=Removals(krs=frozenset({entity_id}), initiatives=initiative_ids),
    )


@_handles(DeleteType.INITIATIVE)
def _plan_initiative(entity_id: str, snapshot: Snapshot, timestamp: str) -> DeletionPlan | None:
    initiative = find_by_id(snapshot.initiatives, entity_id)
    if initiative is None:
        return None

    return DeletionPlan(
        type=DeleteType.INITIATIVE,
        id=entity_id,
        name=initiative.title,
        title=f'Delete initiative "{initiative.title}"?',
        description=(
            "The linked key results will remain, but this initiative and its metadata "
            "will be removed."
        ),
        confirm_label="Delete Initiative",
        cascade_items=build_cascade_items(
            CascadeItem("Linked Key Results affected", len(initiative.linked_kr_ids)),
        ),
        removals=Removals(initiatives=frozenset({entity_id})),
    )


_missing = [delete_type.value for delete_type in DeleteType if delete_type not in _HANDLERS]
if _missing:
    raise RuntimeError(f"No deletion handler registered for: {', '.join(_missing)}")


def compute_deletion_plan(
    delete_type: DeleteType | str,
    entity_id: str,
    snapshot: Snapshot,
    *,
    now: datetime | None = None,
) -> DeletionPlan | None:
    """
    Plan the deletion of one entity.

    Pure: reads ``snapshot`` and never modifies it, so it is safe to call once
    for the preview and again right before committing.

    Args:
        delete_type: Kind of entity to delete (DeleteType or its string value)
        entity_id: Id of the entity to delete
        snapshot: Current state of the entity graph
        now: Timestamp stamped on KR owner resets (default: current UTC time)

    Returns:
        DeletionPlan, or None if no entity of that kind has that id

    Raises:
        UnknownDeleteTypeError: If delete_type is not a known entity kind
    """
    try:
        resolved = DeleteType(delete_type)
    except ValueError:
        raise UnknownDeleteTypeError(delete_type) from None

    timestamp = (now or datetime.now(timezone.utc)).isoformat()
    plan = _HANDLERS[resolved](entity_id, snapshot, timestamp)

    if plan is None:
        logger.debug(f"No {resolved.value} with id '{entity_id}'; nothing to delete")
        return None

    logger.info(
        f"Planned deletion of {resolved.value} '{entity_id}': "
        f"{plan.removals.total} removal(s), {plan.updates.total} update(s)",
        extra={
            "delete_type": resolved.value,
            "entity_id": entity_id,
            "removals": plan.removals.total,
            "updates": plan.updates.total,
        },
    )
    return plan
