# kr_tracker/deletion/applier.py
"""
Deletion applier.

Turns a DeletionPlan and the snapshot it was computed against into the next
snapshot. The input snapshot is never modified: every record in the result is
a fresh copy, so holders of the previous snapshot observe no change.
"""

import logging

from kr_tracker.deletion.helpers import apply_patches, remove_ids, strip_ids
from kr_tracker.deletion.plan import DeletionPlan
from kr_tracker.models.entities import ALL_TEAMS, COLLECTIONS, Snapshot

logger = logging.getLogger(__name__)


def apply_deletion_plan(plan: DeletionPlan, snapshot: Snapshot) -> Snapshot:
    """
    Apply ``plan`` to ``snapshot`` and return the resulting snapshot.

    Removals are dropped first, then surviving records are patched. A second
    pass strips removed KR ids from objectives and initiatives (and removed
    initiative ids from KRs) even when those records were not targeted by the
    plan, so no survivor can reference a deleted record.

    If a removed team's name is the current team filter, the filter resets
    to "all".

    Args:
        plan: Plan from compute_deletion_plan(), computed against ``snapshot``
        snapshot: Current state of the entity graph

    Returns:
        New Snapshot
    """
    removals = plan.removals
    updates = plan.updates

    collections = {
        kind: apply_patches(
            remove_ids(getattr(snapshot, kind), removals.for_kind(kind)),
            updates.for_kind(kind),
        )
        for kind in COLLECTIONS
    }

    removed_krs = removals.krs
    if removed_krs:
        collections["objectives"] = [
            objective.model_copy(update={"kr_ids": strip_ids(objective.kr_ids, removed_krs)})
            if any(kr_id in removed_krs for kr_id in objective.kr_ids)
            else objective
            for objective in collections["objectives"]
        ]
        collections["initiatives"] = [
            initiative.model_copy(
                update={"linked_kr_ids": strip_ids(initiative.linked_kr_ids, removed_krs)}
            )
            if any(kr_id in removed_krs for kr_id in initiative.linked_kr_ids)
            else initiative
            for initiative in collections["initiatives"]
        ]

    removed_initiatives = removals.initiatives
    if removed_initiatives:
        collections["krs"] = [
            kr.model_copy(
                update={
                    "linked_initiative_ids": strip_ids(
                        kr.linked_initiative_ids, removed_initiatives
                    )
                }
            )
            if any(i in removed_initiatives for i in kr.linked_initiative_ids)
            else kr
            for kr in collections["krs"]
        ]

    selected_team = snapshot.selected_team
    removed_team_names = {team.name for team in snapshot.teams if team.id in removals.teams}
    if selected_team != ALL_TEAMS and selected_team in removed_team_names:
        logger.info(f"Team filter '{selected_team}' was deleted; resetting to '{ALL_TEAMS}'")
        selected_team = ALL_TEAMS

    result = snapshot.model_copy(
        update={**collections, "selected_team": selected_team}, deep=True
    )

    logger.info(
        f"Applied deletion of {plan.type.value} '{plan.id}': "
        f"{removals.total} removed, {updates.total} patched",
        extra={
            "delete_type": plan.type.value,
            "entity_id": plan.id,
            "removals": removals.total,
            "updates": updates.total,
        },
    )
    return result
