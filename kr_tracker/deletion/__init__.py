"""
Entity deletion engine.

Plans the full cascade of deleting one entity, previews it, and applies it to
produce the next snapshot.
"""

from .applier import apply_deletion_plan
from .plan import CascadeItem, DeleteType, DeletionPlan, Removals, Updates
from .planner import compute_deletion_plan, team_belongs_to_organization
from .workflow import DeletionWorkflow, WorkflowState, delete_entity

__all__ = [
    "CascadeItem",
    "DeleteType",
    "DeletionPlan",
    "Removals",
    "Updates",
    "compute_deletion_plan",
    "apply_deletion_plan",
    "team_belongs_to_organization",
    "DeletionWorkflow",
    "WorkflowState",
    "delete_entity",
]
