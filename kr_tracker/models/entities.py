# kr_tracker/models/entities.py
"""
Entity records for the organizational data set.

Models accept the tracker's camelCase JSON keys (organizationId, linkedKRIds, ...)
as well as snake_case field names, and keep unknown keys so a snapshot written
back to disk loses nothing. All records are frozen: changes go through
model_copy() and produce new instances.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

UNASSIGNED_OWNER = "Unassigned"
ALL_TEAMS = "all"


class EntityModel(BaseModel):
    """Shared configuration for snapshot entities."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )

    id: str


class Organization(EntityModel):
    name: str
    description: str | None = None


class Team(EntityModel):
    name: str
    organization_id: str | None = Field(
        default=None, description="Owning organization (None = first organization)"
    )
    description: str | None = None
    color: str = ""


class PodMember(BaseModel):
    """Pod member with a role. Older snapshots list members as bare names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )

    name: str
    role: str = ""


class Pod(EntityModel):
    name: str
    team_id: str
    description: str | None = None
    members: list[str | PodMember] = Field(
        default_factory=list, description="Person names, bare or with a role"
    )


def member_name(member: str | PodMember) -> str:
    return member if isinstance(member, str) else member.name


class OrgFunction(EntityModel):
    name: str
    description: str | None = None
    color: str = ""
    created_at: str = ""


class Person(EntityModel):
    name: str
    email: str = ""
    function_id: str
    manager_id: str | None = None
    team_id: str | None = None
    pod_id: str | None = None
    join_date: str = ""
    active: bool = True


class Objective(EntityModel):
    title: str
    organization_id: str | None = None
    description: str | None = None
    owner: str | None = None
    team_id: str | None = None
    pod_id: str | None = None
    status: str | None = None
    kr_ids: list[str] = Field(default_factory=list)


class KR(EntityModel):
    """Key result. ``owner`` holds a person's name, not an id."""

    title: str
    description: str = ""
    organization_id: str | None = None
    team_id: str = ""
    team_ids: list[str] = Field(default_factory=list)
    pod_id: str | None = None
    owner: str = ""
    objective_id: str | None = None
    quarter_id: str = ""
    status: str = "not-started"
    last_updated: str = ""
    linked_initiative_ids: list[str] = Field(default_factory=list)


class Initiative(EntityModel):
    """Initiative. ``owner`` and ``contributors`` hold person names."""

    title: str
    description: str = ""
    team_id: str = ""
    pod_id: str | None = None
    owner: str = ""
    contributors: list[str] = Field(default_factory=list)
    status: str = "planning"
    linked_kr_ids: list[str] = Field(default_factory=list, alias="linkedKRIds")


class Snapshot(BaseModel):
    """
    The whole entity graph plus the team filter selection.

    Replaced wholesale on every change; never mutated in place.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )

    organizations: list[Organization] = Field(default_factory=list)
    teams: list[Team] = Field(default_factory=list)
    pods: list[Pod] = Field(default_factory=list)
    people: list[Person] = Field(default_factory=list)
    functions: list[OrgFunction] = Field(default_factory=list)
    objectives: list[Objective] = Field(default_factory=list)
    krs: list[KR] = Field(default_factory=list)
    initiatives: list[Initiative] = Field(default_factory=list)
    selected_team: str = ALL_TEAMS

    def to_json_dict(self) -> dict:
        """Serialize with the tracker's camelCase keys, omitting cleared fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# Snapshot collections in dependency order (owners before owned).
COLLECTIONS: tuple[str, ...] = (
    "organizations",
    "functions",
    "teams",
    "pods",
    "people",
    "objectives",
    "krs",
    "initiatives",
)
