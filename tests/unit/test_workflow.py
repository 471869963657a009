# tests/unit/test_workflow.py
"""Tests for the request / cancel / confirm deletion workflow."""

import pytest

from kr_tracker.deletion import DeleteType, DeletionWorkflow, WorkflowState, delete_entity
from kr_tracker.errors import StaleSnapshotError, WorkflowStateError
from kr_tracker.models.entities import Person
from kr_tracker.models.store import InMemorySnapshotStore


class RacingStore(InMemorySnapshotStore):
    """Store that lets another writer commit just before the next replace."""

    def __init__(self, snapshot):
        super().__init__(snapshot)
        self.race = False

    def replace(self, snapshot, expected_version):
        if self.race:
            self.race = False
            current = self.load()
            super().replace(current.snapshot, expected_version=current.version)
        return super().replace(snapshot, expected_version)


def _store_with(store, **collections):
    current = store.load()
    store.replace(current.snapshot.model_copy(update=collections), current.version)


class TestRequestAndCancel:
    """Tests for entering and leaving the preview state."""

    def test_starts_idle(self, snapshot):
        workflow = DeletionWorkflow(InMemorySnapshotStore(snapshot))

        assert workflow.state is WorkflowState.IDLE
        assert workflow.pending is None

    def test_request_previews(self, snapshot, now):
        workflow = DeletionWorkflow(InMemorySnapshotStore(snapshot))

        plan = workflow.request(DeleteType.TEAM, "team-1", now=now)

        assert plan is not None
        assert workflow.state is WorkflowState.PREVIEWING
        assert workflow.pending is plan

    def test_request_missing_entity_stays_idle(self, snapshot, now):
        workflow = DeletionWorkflow(InMemorySnapshotStore(snapshot))

        assert workflow.request("team", "team-9", now=now) is None
        assert workflow.state is WorkflowState.IDLE

    def test_new_request_replaces_pending(self, snapshot, now):
        workflow = DeletionWorkflow(InMemorySnapshotStore(snapshot))
        workflow.request("pod", "pod-1", now=now)

        plan = workflow.request("kr", "kr-1", now=now)

        assert workflow.pending is plan
        assert plan.type is DeleteType.KR

    def test_cancel_leaves_store_untouched(self, snapshot, now):
        store = InMemorySnapshotStore(snapshot)
        version = store.load().version
        workflow = DeletionWorkflow(store)
        workflow.request("team", "team-1", now=now)

        workflow.cancel()

        assert workflow.state is WorkflowState.IDLE
        assert workflow.pending is None
        assert store.load().version == version

    def test_cancel_when_idle(self, snapshot):
        workflow = DeletionWorkflow(InMemorySnapshotStore(snapshot))

        with pytest.raises(WorkflowStateError):
            workflow.cancel()


class TestConfirm:
    """Tests for committing a previewed deletion."""

    def test_confirm_commits(self, snapshot, now):
        store = InMemorySnapshotStore(snapshot)
        workflow = DeletionWorkflow(store)
        workflow.request("team", "team-1", now=now)

        result = workflow.confirm(now=now)

        assert [t.id for t in result.teams] == ["team-2"]
        assert store.load().snapshot == result
        assert workflow.state is WorkflowState.IDLE
        assert workflow.pending is None

    def test_confirm_when_idle(self, snapshot):
        workflow = DeletionWorkflow(InMemorySnapshotStore(snapshot))

        with pytest.raises(WorkflowStateError):
            workflow.confirm()

    def test_confirm_replans_against_latest_snapshot(self, snapshot, now):
        """A person added to the team after the preview is removed too."""
        store = InMemorySnapshotStore(snapshot)
        workflow = DeletionWorkflow(store)
        preview = workflow.request("team", "team-1", now=now)

        newcomer = Person(id="person-9", name="Dana", function_id="function-a", team_id="team-1")
        _store_with(store, people=[*snapshot.people, newcomer])

        result = workflow.confirm(now=now)

        assert "person-9" not in preview.removals.people
        assert [p.id for p in result.people] == ["person-3"]

    def test_confirm_after_entity_vanished(self, snapshot, now):
        store = InMemorySnapshotStore(snapshot)
        workflow = DeletionWorkflow(store)
        workflow.request("kr", "kr-2", now=now)

        _store_with(store, krs=[kr for kr in snapshot.krs if kr.id != "kr-2"])
        version = store.load().version

        assert workflow.confirm(now=now) is None
        assert workflow.state is WorkflowState.IDLE
        assert store.load().version == version

    def test_concurrent_commit_is_refused(self, snapshot, now):
        """A replace that loses the race raises and leaves the workflow idle."""
        store = RacingStore(snapshot)
        workflow = DeletionWorkflow(store)
        workflow.request("team", "team-1", now=now)
        store.race = True

        with pytest.raises(StaleSnapshotError):
            workflow.confirm(now=now)

        assert workflow.state is WorkflowState.IDLE
        assert store.load().snapshot == snapshot

    def test_second_confirm_fails(self, snapshot, now):
        workflow = DeletionWorkflow(InMemorySnapshotStore(snapshot))
        workflow.request("pod", "pod-1", now=now)
        workflow.confirm(now=now)

        with pytest.raises(WorkflowStateError):
            workflow.confirm(now=now)


class TestDeleteEntity:
    """Tests for the one-shot delete_entity helper."""

    def test_deletes(self, snapshot, now):
        store = InMemorySnapshotStore(snapshot)

        result = delete_entity(store, "initiative", "init-2", now=now)

        assert [i.id for i in result.initiatives] == ["init-1"]
        assert store.load().snapshot == result

    def test_missing_entity(self, snapshot, now):
        store = InMemorySnapshotStore(snapshot)
        version = store.load().version

        assert delete_entity(store, "initiative", "init-9", now=now) is None
        assert store.load().version == version
