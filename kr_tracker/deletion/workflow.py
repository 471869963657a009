# kr_tracker/deletion/workflow.py
"""
Deletion workflow: request, preview, then cancel or confirm.

    IDLE --request--> PREVIEWING --cancel--> IDLE
                      PREVIEWING --confirm--> (re-plan, apply, replace) --> IDLE

The previewed plan is only for display. On confirm the plan is recomputed
against the store's latest snapshot and committed with compare-and-swap, so a
plan computed against a stale snapshot is never applied.
"""

import logging
from datetime import datetime
from enum import Enum

from kr_tracker.deletion.applier import apply_deletion_plan
from kr_tracker.deletion.plan import DeleteType, DeletionPlan
from kr_tracker.deletion.planner import compute_deletion_plan
from kr_tracker.errors import WorkflowStateError
from kr_tracker.models.entities import Snapshot
from kr_tracker.models.store import SnapshotStore

logger = logging.getLogger(__name__)


class WorkflowState(Enum):
    """Deletion workflow states."""

    IDLE = "idle"
    PREVIEWING = "previewing"


class DeletionWorkflow:
    """Drives one deletion at a time against a SnapshotStore."""

    def __init__(self, store: SnapshotStore) -> None:
        self._store = store
        self._state = WorkflowState.IDLE
        self._pending: DeletionPlan | None = None

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def pending(self) -> DeletionPlan | None:
        """The plan being previewed, if any."""
        return self._pending

    def request(
        self, delete_type: DeleteType | str, entity_id: str, *, now: datetime | None = None
    ) -> DeletionPlan | None:
        """
        Plan a deletion for preview.

        A new request replaces any plan already being previewed.

        Returns:
            The plan to show, or None if the entity does not exist (state stays IDLE)
        """
        current = self._store.load()
        plan = compute_deletion_plan(delete_type, entity_id, current.snapshot, now=now)

        if plan is None:
            self._reset()
            return None

        self._pending = plan
        self._state = WorkflowState.PREVIEWING
        logger.info(f"Previewing deletion of {plan.type.value} '{plan.id}'")
        return plan

    def cancel(self) -> None:
        """
        Discard the previewed plan.

        Raises:
            WorkflowStateError: If nothing is being previewed
        """
        self._require_previewing("cancel")
        logger.info(f"Cancelled deletion of {self._pending.type.value} '{self._pending.id}'")
        self._reset()

    def confirm(self, *, now: datetime | None = None) -> Snapshot | None:
        """
        Commit the previewed deletion.

        Re-plans against the latest snapshot, applies, and replaces the stored
        snapshot in one compare-and-swap. The workflow returns to IDLE whether
        or not the commit succeeds.

        Returns:
            The committed snapshot, or None if the entity no longer exists

        Raises:
            WorkflowStateError: If nothing is being previewed
            StaleSnapshotError: If the store changed between re-plan and replace
        """
        self._require_previewing("confirm")
        previewed = self._pending

        try:
            current = self._store.load()
            plan = compute_deletion_plan(previewed.type, previewed.id, current.snapshot, now=now)
            if plan is None:
                logger.warning(
                    f"{previewed.type.value} '{previewed.id}' disappeared before confirmation; "
                    "nothing to delete"
                )
                return None

            if plan.removals != previewed.removals:
                logger.info(
                    f"Snapshot changed since preview of {previewed.type.value} '{previewed.id}'; "
                    "applying recomputed plan"
                )

            result = apply_deletion_plan(plan, current.snapshot)
            version = self._store.replace(result, expected_version=current.version)
            logger.info(
                f"Committed deletion of {plan.type.value} '{plan.id}'",
                extra={"delete_type": plan.type.value, "entity_id": plan.id, "version": version},
            )
            return result
        finally:
            self._reset()

    def _require_previewing(self, action: str) -> None:
        if self._state is not WorkflowState.PREVIEWING or self._pending is None:
            raise WorkflowStateError(f"Cannot {action}: no deletion is being previewed")

    def _reset(self) -> None:
        self._pending = None
        self._state = WorkflowState.IDLE


def delete_entity(
    store: SnapshotStore,
    delete_type: DeleteType | str,
    entity_id: str,
    *,
    now: datetime | None = None,
) -> Snapshot | None:
    """
    Plan, apply and commit a deletion without a preview step.

    Returns:
        The committed snapshot, or None if the entity does not exist
    """
    workflow = DeletionWorkflow(store)
    if workflow.request(delete_type, entity_id, now=now) is None:
        return None
    return workflow.confirm(now=now)
