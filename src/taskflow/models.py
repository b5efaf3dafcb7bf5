"""Persisted data model: repositories, configuration and tasks."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

CREATED_AT_FORMAT = "%B %d, %Y"


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Status(str, Enum):
    """Board column a task currently sits in.

    Any status may move to any other; there is no terminal state.
    """

    TODO = "Todo"
    IN_PROGRESS = "InProgress"
    NEEDS_HELP = "NeedsHelp"
    DONE = "Done"

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


STATUS_LABELS: dict[Status, str] = {
    Status.TODO: "Todo",
    Status.IN_PROGRESS: "In Progress",
    Status.NEEDS_HELP: "Needs Help",
    Status.DONE: "Done",
}

# Fixed column order used by the board and the status picker.
STATUS_ORDER: tuple[Status, ...] = (
    Status.TODO,
    Status.IN_PROGRESS,
    Status.NEEDS_HELP,
    Status.DONE,
)


class Repository(BaseModel):
    """A GitHub repository the user works against."""

    model_config = ConfigDict(frozen=True)

    owner: str
    name: str
    display_name: str = Field(default="")

    @field_validator("owner", "name")
    @classmethod
    def _require_non_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @model_validator(mode="before")
    @classmethod
    def _default_display_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not str(data.get("display_name") or "").strip():
            data = {**data, "display_name": str(data.get("name") or "").strip()}
        return data

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def describe(self) -> str:
        return f"{self.display_name} ({self.full_name})"


class Configuration(BaseModel):
    """Credential plus the ordered list of known repositories.

    Older records stored the token as `github_token` and carried unused
    `default_repo_*` keys; both are accepted on load.
    """

    credential: str | None = Field(
        default=None,
        validation_alias=AliasChoices("credential", "github_token"),
    )
    repositories: list[Repository] = Field(default_factory=list)


class Task(BaseModel):
    """A single tracked task."""

    id: int = Field(ge=0)
    title: str
    description: str = Field(default="")
    priority: Priority = Field(default=Priority.LOW)
    status: Status = Field(default=Status.TODO)
    due_date: str = Field(default="")
    github_issue_number: int | None = Field(default=None)
    created_at: str

    @field_validator("title")
    @classmethod
    def _require_title(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Task title is required")
        return value


def format_created_at(moment: datetime) -> str:
    return moment.strftime(CREATED_AT_FORMAT)
