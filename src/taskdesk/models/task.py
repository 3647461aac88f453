"""Task entity as returned by the remote task API."""

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Priority(str, Enum):
    """Task priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def to_calendar_date(value: str) -> str:
    """Truncate an ISO date or timestamp to its calendar-date part.

    "2024-05-01T00:00:00.000Z" -> "2024-05-01". Values without a time part
    are returned unchanged.
    """
    return value.split("T", 1)[0]


def reference_id(value: Any) -> str:
    """Identifier of a user reference, whether sent as an id or a populated object."""
    if isinstance(value, dict):
        value = value.get("_id", "")
    return "" if value is None else str(value)


class Task(BaseModel):
    """A task record owned by the remote API.

    The client only holds a transient copy: every mutation is followed by a
    full re-fetch, so instances are replaced, never patched. Only ``_id`` is
    required; everything else is read as sent, so one odd record never hides
    the rest of the list. Unknown fields are kept as-is.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )

    id: str = Field(..., alias="_id", description="Server-assigned opaque identifier")
    title: str = Field(default="")
    description: str = Field(default="")
    due_date: str = Field(default="", alias="dueDate", description="ISO date or timestamp")
    priority: str = Field(default=Priority.LOW.value, description="Normally one of Priority")
    status: str = Field(default="", description="Free-form status string")
    assigned_to: Any = Field(default="", alias="assignedTo", description="User id or populated user")
    created_by: Any = Field(default="", alias="createdBy", description="User id or populated user")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_validator("title", "description", "due_date", "priority", "status", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        """Read null as empty and scalars as their string form."""
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    @property
    def assignee_id(self) -> str:
        return reference_id(self.assigned_to)

    @property
    def due(self) -> date | None:
        """Due date at calendar precision, or None when unparseable."""
        if not self.due_date:
            return None
        try:
            return date.fromisoformat(to_calendar_date(self.due_date))
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(self.due_date.replace("Z", "+00:00")).date()
        except ValueError:
            return None
