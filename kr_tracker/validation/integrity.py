# kr_tracker/validation/integrity.py
"""
Referential integrity checks for a snapshot.

Scans every reference field and reports the ones pointing at records that do
not exist. Id references are hard errors; name references (owners and
contributors are stored as person names) are reported separately because a
rename orphans them without any deletion having happened.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from kr_tracker.deletion.helpers import ids_of
from kr_tracker.models.entities import UNASSIGNED_OWNER, Snapshot, member_name

logger = logging.getLogger(__name__)

ReferenceKind = Literal["id", "name"]


@dataclass(frozen=True)
class DanglingReference:
    """A reference field whose target does not exist."""

    collection: str
    entity_id: str
    field: str
    value: str
    reference: ReferenceKind = "id"

    def describe(self) -> str:
        return f"{self.collection}/{self.entity_id}.{self.field} -> '{self.value}'"


def _check(
    found: list[DanglingReference],
    collection: str,
    entity_id: str,
    field: str,
    values: Iterable[str | None],
    valid: frozenset[str] | set[str],
    reference: ReferenceKind = "id",
) -> None:
    for value in values:
        if value and value not in valid:
            found.append(DanglingReference(collection, entity_id, field, value, reference))


def find_dangling_references(snapshot: Snapshot) -> list[DanglingReference]:
    """
    List every reference in ``snapshot`` whose target is missing.

    Empty values and the "Unassigned" owner sentinel are not references.
    Team organization_id is optional (teams without one belong to the first
    organization), so only an explicit value is checked.

    Returns:
        DanglingReference per offending value, id references first
    """
    organizations = ids_of(snapshot.organizations)
    teams = ids_of(snapshot.teams)
    pods = ids_of(snapshot.pods)
    people = ids_of(snapshot.people)
    functions = ids_of(snapshot.functions)
    objectives = ids_of(snapshot.objectives)
    krs = ids_of(snapshot.krs)
    initiatives = ids_of(snapshot.initiatives)

    found: list[DanglingReference] = []

    for team in snapshot.teams:
        _check(found, "teams", team.id, "organization_id", [team.organization_id], organizations)

    for pod in snapshot.pods:
        _check(found, "pods", pod.id, "team_id", [pod.team_id], teams)

    for person in snapshot.people:
        _check(found, "people", person.id, "team_id", [person.team_id], teams)
        _check(found, "people", person.id, "pod_id", [person.pod_id], pods)
        _check(found, "people", person.id, "function_id", [person.function_id], functions)
        _check(found, "people", person.id, "manager_id", [person.manager_id], people)

    for objective in snapshot.objectives:
        _check(
            found, "objectives", objective.id, "organization_id",
            [objective.organization_id], organizations,
        )
        _check(found, "objectives", objective.id, "team_id", [objective.team_id], teams)
        _check(found, "objectives", objective.id, "pod_id", [objective.pod_id], pods)
        _check(found, "objectives", objective.id, "kr_ids", objective.kr_ids, krs)

    for kr in snapshot.krs:
        _check(found, "krs", kr.id, "organization_id", [kr.organization_id], organizations)
        _check(found, "krs", kr.id, "team_id", [kr.team_id], teams)
        _check(found, "krs", kr.id, "pod_id", [kr.pod_id], pods)
        _check(found, "krs", kr.id, "objective_id", [kr.objective_id], objectives)
        _check(
            found, "krs", kr.id, "linked_initiative_ids", kr.linked_initiative_ids, initiatives
        )

    for initiative in snapshot.initiatives:
        _check(found, "initiatives", initiative.id, "team_id", [initiative.team_id], teams)
        _check(found, "initiatives", initiative.id, "pod_id", [initiative.pod_id], pods)
        _check(
            found, "initiatives", initiative.id, "linked_kr_ids", initiative.linked_kr_ids, krs
        )

    names = {person.name for person in snapshot.people} | {UNASSIGNED_OWNER}
    for pod in snapshot.pods:
        _check(
            found, "pods", pod.id, "members",
            [member_name(member) for member in pod.members], names, "name",
        )
    for kr in snapshot.krs:
        _check(found, "krs", kr.id, "owner", [kr.owner], names, "name")
    for initiative in snapshot.initiatives:
        _check(found, "initiatives", initiative.id, "owner", [initiative.owner], names, "name")
        _check(
            found, "initiatives", initiative.id, "contributors",
            initiative.contributors, names, "name",
        )

    if found:
        logger.warning(f"Found {len(found)} dangling reference(s)")
    return found
