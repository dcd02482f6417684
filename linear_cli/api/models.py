"""
Typed views of Linear GraphQL responses.

Only the fields the CLI selects in its queries are modeled. Field names are
snake_case in Python and camelCase on the wire; ``populate_by_name`` allows
either when constructing models in tests.

Example:
    >>> issue = Issue.model_validate({"id": "1", "identifier": "ENG-1", "title": "Fix"})
    >>> issue.label_names
    []
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class LinearModel(BaseModel):
    """Base model mapping camelCase GraphQL fields to snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class WorkflowState(LinearModel):
    name: str
    type: str


class Label(LinearModel):
    name: str


class Team(LinearModel):
    name: str
    key: str | None = None


class Project(LinearModel):
    name: str


class UserRef(LinearModel):
    name: str
    display_name: str | None = None


class Cycle(LinearModel):
    """A Linear cycle (sprint).

    ``is_active``/``is_next``/``is_previous`` are point-in-time flags from
    the API and go stale once the active cycle ends.
    """

    id: str | None = None
    number: int
    name: str | None = None
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    is_active: bool = False
    is_next: bool = False
    is_previous: bool = False

    @field_validator("number", mode="before")
    @classmethod
    def _whole_number(cls, value: object) -> object:
        # GraphQL Float
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value


class IssueRef(LinearModel):
    identifier: str
    title: str


def _unwrap_nodes(value: object) -> object:
    """Flatten a ``{"nodes": [...]}`` connection into a list."""
    if isinstance(value, dict) and "nodes" in value:
        return value["nodes"] or []
    return value


class Issue(LinearModel):
    """Issue as shown in list views."""

    id: str
    identifier: str
    title: str
    state: WorkflowState | None = None
    priority: float = 0
    labels: list[Label] = Field(default_factory=list)
    updated_at: datetime | None = None
    created_at: datetime | None = None
    cycle: Cycle | None = None
    assignee: UserRef | None = None
    project: Project | None = None
    estimate: float | None = None
    due_date: str | None = None

    @field_validator("labels", mode="before")
    @classmethod
    def _unwrap_labels(cls, value: object) -> object:
        return _unwrap_nodes(value) or []

    @property
    def label_names(self) -> list[str]:
        return [label.name for label in self.labels]


class IssueDetail(Issue):
    """Issue with the extra fields fetched by ``issue get``."""

    description: str | None = None
    team: Team | None = None
    branch_name: str = ""
    url: str = ""
    parent: IssueRef | None = None


class User(LinearModel):
    id: str | None = None
    name: str
    display_name: str
    email: str = ""
    admin: bool = False
    active: bool = True
    is_me: bool = False
