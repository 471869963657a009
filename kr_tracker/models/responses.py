# kr_tracker/models/responses.py
"""
Pydantic response models for CLI and caller-facing output.

DeletionPlan and DanglingReference are internal dataclasses; these models are
their JSON-serializable views.
"""

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from kr_tracker.deletion.plan import DeletionPlan
    from kr_tracker.validation.integrity import DanglingReference


class CascadeItemResponse(BaseModel):
    """One line of a deletion preview."""

    label: str = Field(description="What is affected (e.g. 'Pods', 'KR owners reset')")
    count: int | None = Field(default=None, description="How many records are affected")
    description: str | None = Field(default=None, description="Optional detail")


class DeletionPlanResponse(BaseModel):
    """JSON view of a deletion plan, for confirmation dialogs."""

    type: str = Field(description="Entity kind being deleted")
    id: str = Field(description="Id of the entity being deleted")
    name: str = Field(description="Display name of the entity being deleted")
    title: str = Field(description="Confirmation dialog title")
    description: str | None = Field(default=None, description="What the deletion does")
    confirm_label: str = Field(description="Label for the confirm button")
    cascade_items: list[CascadeItemResponse] = Field(
        default_factory=list, description="Non-empty cascade counts"
    )
    notes: str | None = Field(default=None, description="Extra warning shown under the preview")
    removals: dict[str, list[str]] = Field(
        default_factory=dict, description="Ids removed per collection (sorted, empty omitted)"
    )
    updates: dict[str, dict[str, dict[str, Any]]] = Field(
        default_factory=dict, description="Field patches per collection and id (empty omitted)"
    )

    @classmethod
    def from_plan(cls, plan: "DeletionPlan") -> "DeletionPlanResponse":
        removals = {
            kind: sorted(plan.removals.for_kind(kind))
            for kind in (
                "organizations", "teams", "pods", "people",
                "functions", "objectives", "krs", "initiatives",
            )
            if plan.removals.for_kind(kind)
        }
        updates = {
            kind: {entity_id: dict(patch) for entity_id, patch in patches.items()}
            for kind in ("pods", "people", "objectives", "krs", "initiatives")
            if (patches := plan.updates.for_kind(kind))
        }
        return cls(
            type=plan.type.value,
            id=plan.id,
            name=plan.name,
            title=plan.title,
            description=plan.description,
            confirm_label=plan.confirm_label,
            cascade_items=[
                CascadeItemResponse(label=i.label, count=i.count, description=i.description)
                for i in plan.cascade_items
            ],
            notes=plan.notes,
            removals=removals,
            updates=updates,
        )


class DanglingReferenceResponse(BaseModel):
    """A reference whose target is missing."""

    collection: str = Field(description="Collection holding the referencing record")
    entity_id: str = Field(description="Id of the referencing record")
    field: str = Field(description="Reference field name")
    value: str = Field(description="Missing target (id or person name)")
    reference: str = Field(description="'id' or 'name'")


class IntegrityReportResponse(BaseModel):
    """Result of an integrity check."""

    ok: bool = Field(description="True when no id reference dangles")
    id_references: int = Field(description="Number of dangling id references")
    name_references: int = Field(description="Number of dangling name references")
    findings: list[DanglingReferenceResponse] = Field(default_factory=list)

    @classmethod
    def from_findings(cls, findings: "list[DanglingReference]") -> "IntegrityReportResponse":
        id_count = sum(1 for f in findings if f.reference == "id")
        return cls(
            ok=id_count == 0,
            id_references=id_count,
            name_references=len(findings) - id_count,
            findings=[
                DanglingReferenceResponse(
                    collection=f.collection,
                    entity_id=f.entity_id,
                    field=f.field,
                    value=f.value,
                    reference=f.reference,
                )
                for f in findings
            ],
        )
