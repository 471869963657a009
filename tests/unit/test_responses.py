# tests/unit/test_responses.py
"""Tests for the JSON response views."""

from kr_tracker.deletion import DeleteType, compute_deletion_plan
from kr_tracker.models.responses import DeletionPlanResponse, IntegrityReportResponse
from kr_tracker.validation import DanglingReference


class TestDeletionPlanResponse:
    """Tests for DeletionPlanResponse.from_plan."""

    def test_removals_sorted_and_empty_omitted(self, snapshot, now):
        plan = compute_deletion_plan(DeleteType.TEAM, "team-1", snapshot, now=now)

        response = DeletionPlanResponse.from_plan(plan)

        assert response.type == "team"
        assert response.removals == {
            "teams": ["team-1"],
            "pods": ["pod-1"],
            "people": ["person-1", "person-2"],
            "objectives": ["obj-1"],
            "krs": ["kr-1", "kr-2"],
            "initiatives": ["init-1"],
        }
        assert response.updates == {
            "people": {"person-3": {"manager_id": None}},
            "krs": {"kr-3": {"owner": "Unassigned", "last_updated": now.isoformat()}},
        }

    def test_objective_updates(self, snapshot, now):
        objective = snapshot.objectives[0].model_copy(update={"pod_id": "pod-1"})
        snapshot = snapshot.model_copy(update={"objectives": [objective, snapshot.objectives[1]]})
        plan = compute_deletion_plan(DeleteType.POD, "pod-1", snapshot, now=now)

        response = DeletionPlanResponse.from_plan(plan)

        assert response.removals == {"pods": ["pod-1"]}
        assert response.updates["objectives"] == {"obj-1": {"pod_id": None}}

    def test_cascade_items(self, snapshot, now):
        plan = compute_deletion_plan(DeleteType.KR, "kr-1", snapshot, now=now)

        data = DeletionPlanResponse.from_plan(plan).model_dump()

        assert data["confirm_label"] == "Delete Key Result"
        assert [item["label"] for item in data["cascade_items"]] == [
            "Initiatives",
            "Objective links updated",
        ]


class TestIntegrityReportResponse:
    """Tests for IntegrityReportResponse.from_findings."""

    def test_clean(self):
        report = IntegrityReportResponse.from_findings([])

        assert report.ok is True
        assert report.id_references == 0
        assert report.findings == []

    def test_name_references_do_not_fail(self):
        findings = [DanglingReference("krs", "kr-1", "owner", "Zed", "name")]

        report = IntegrityReportResponse.from_findings(findings)

        assert report.ok is True
        assert report.name_references == 1

    def test_id_references_fail(self):
        findings = [
            DanglingReference("people", "p-1", "function_id", "f-9"),
            DanglingReference("krs", "kr-1", "owner", "Zed", "name"),
        ]

        report = IntegrityReportResponse.from_findings(findings)

        assert report.ok is False
        assert report.id_references == 1
        assert report.name_references == 1
        assert report.findings[0].field == "function_id"
