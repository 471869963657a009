# tests/unit/conftest.py
"""Shared fixtures: a two-organization, two-team snapshot."""

from datetime import datetime, timezone

import pytest

from kr_tracker.models.entities import (
    KR,
    Initiative,
    Objective,
    OrgFunction,
    Organization,
    Person,
    Pod,
    Snapshot,
    Team,
)

FIXED_NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def build_snapshot(selected_team: str = "all") -> Snapshot:
    """
    org-1 / team-1 "Team Alpha": pod-1, Alice (person-1), Bob (person-2, reports
    to Alice), obj-1 -> kr-1, kr-2, init-1 linked to kr-1.

    org-2 / team-2 "Team Beta": pod-2, Carol (person-3, reports to Bob),
    obj-2 -> kr-3 (owned by Bob), init-2 linked to kr-3 with Bob contributing.
    """
    return Snapshot(
        organizations=[
            Organization(id="org-1", name="Org One"),
            Organization(id="org-2", name="Org Two"),
        ],
        teams=[
            Team(id="team-1", organization_id="org-1", name="Team Alpha", color="#111111"),
            Team(id="team-2", organization_id="org-2", name="Team Beta", color="#222222"),
        ],
        pods=[
            Pod(id="pod-1", name="Pod Alpha", team_id="team-1"),
            Pod(id="pod-2", name="Pod Beta", team_id="team-2"),
        ],
        functions=[
            OrgFunction(id="function-a", name="Alpha Function"),
            OrgFunction(id="function-b", name="Beta Function"),
        ],
        people=[
            Person(id="person-1", name="Alice", function_id="function-a", team_id="team-1", pod_id="pod-1"),
            Person(
                id="person-2", name="Bob", function_id="function-a", team_id="team-1",
                pod_id="pod-1", manager_id="person-1",
            ),
            Person(
                id="person-3", name="Carol", function_id="function-b", team_id="team-2",
                pod_id="pod-2", manager_id="person-2",
            ),
        ],
        objectives=[
            Objective(
                id="obj-1", organization_id="org-1", team_id="team-1",
                title="Increase Revenue", kr_ids=["kr-1", "kr-2"],
            ),
            Objective(
                id="obj-2", organization_id="org-2", team_id="team-2",
                title="Improve Retention", kr_ids=["kr-3"],
            ),
        ],
        krs=[
            KR(
                id="kr-1", title="Grow ARR", organization_id="org-1", team_id="team-1",
                owner="Alice", objective_id="obj-1", pod_id="pod-1",
                linked_initiative_ids=["init-1"],
            ),
            KR(
                id="kr-2", title="Reduce Churn", organization_id="org-1", team_id="team-1",
                owner="Bob", objective_id="obj-1", pod_id="pod-1",
            ),
            KR(
                id="kr-3", title="Launch Beta", organization_id="org-2", team_id="team-2",
                owner="Bob", objective_id="obj-2", pod_id="pod-2",
                linked_initiative_ids=["init-2"],
            ),
        ],
        initiatives=[
            Initiative(
                id="init-1", title="Enterprise Outreach", team_id="team-1", owner="Alice",
                contributors=["Alice", "Bob"], pod_id="pod-1", linked_kr_ids=["kr-1"],
            ),
            Initiative(
                id="init-2", title="Referral Program", team_id="team-2", owner="Carol",
                contributors=["Bob"], pod_id="pod-2", linked_kr_ids=["kr-3"],
            ),
        ],
        selected_team=selected_team,
    )


@pytest.fixture
def snapshot() -> Snapshot:
    return build_snapshot()


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def make_snapshot():
    """Factory for fresh copies of the base snapshot."""
    return build_snapshot
