# tests/unit/test_integrity.py
"""Tests for find_dangling_references."""

from kr_tracker.models.entities import KR, Initiative, Person, PodMember, Snapshot, Team
from kr_tracker.validation import DanglingReference, find_dangling_references


def _with(snapshot, **collections):
    return snapshot.model_copy(update=collections)


class TestFindDanglingReferences:
    """Tests for the referential integrity scan."""

    def test_clean_snapshot(self, snapshot):
        assert find_dangling_references(snapshot) == []

    def test_empty_snapshot(self):
        assert find_dangling_references(Snapshot()) == []

    def test_dangling_manager(self, snapshot):
        orphan = Person(id="p-9", name="Alice", function_id="function-a", manager_id="ghost")

        found = find_dangling_references(_with(snapshot, people=[*snapshot.people, orphan]))

        assert found == [DanglingReference("people", "p-9", "manager_id", "ghost")]

    def test_dangling_kr_link(self, snapshot):
        objective = snapshot.objectives[0].model_copy(update={"kr_ids": ["kr-1", "kr-gone"]})

        found = find_dangling_references(
            _with(snapshot, objectives=[objective, snapshot.objectives[1]])
        )

        assert [(f.field, f.value) for f in found] == [("kr_ids", "kr-gone")]

    def test_team_without_organization_is_fine(self, snapshot):
        team = Team(id="team-3", name="Team Gamma")

        assert find_dangling_references(_with(snapshot, teams=[*snapshot.teams, team])) == []

    def test_name_references(self, snapshot):
        """Owners and contributors that match no person are name references."""
        kr = KR(id="kr-9", title="T", owner="Zed")
        initiative = Initiative(id="init-9", title="T", owner="Bob", contributors=["Yan"])

        found = find_dangling_references(
            _with(
                snapshot,
                krs=[*snapshot.krs, kr],
                initiatives=[*snapshot.initiatives, initiative],
            )
        )

        assert {(f.entity_id, f.field, f.value, f.reference) for f in found} == {
            ("kr-9", "owner", "Zed", "name"),
            ("init-9", "contributors", "Yan", "name"),
        }

    def test_pod_member_names(self, snapshot):
        pod = snapshot.pods[0].model_copy(
            update={"members": ["Alice", PodMember(name="Zed", role="design")]}
        )

        found = find_dangling_references(_with(snapshot, pods=[pod, snapshot.pods[1]]))

        assert found == [DanglingReference("pods", "pod-1", "members", "Zed", "name")]

    def test_unassigned_is_not_a_reference(self, snapshot):
        kr = KR(id="kr-9", title="T", owner="Unassigned")

        assert find_dangling_references(_with(snapshot, krs=[*snapshot.krs, kr])) == []

    def test_id_references_listed_first(self, snapshot):
        kr = KR(id="kr-9", title="T", owner="Zed", pod_id="pod-gone")

        found = find_dangling_references(_with(snapshot, krs=[*snapshot.krs, kr]))

        assert [f.reference for f in found] == ["id", "name"]

    def test_describe(self):
        finding = DanglingReference("krs", "kr-1", "objective_id", "obj-9")
        assert finding.describe() == "krs/kr-1.objective_id -> 'obj-9'"
