"""Form state held by the screens.

Forms are mutable pydantic models validated on assignment. Each field can
be set by its API name (``assignedTo``) or its Python name (``assigned_to``),
which is how a field-change event from a form lands in the model.
"""

from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from taskdesk.models.task import Priority, Task, to_calendar_date


class FormModel(BaseModel):
    """Base for editable forms."""

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        validate_default=True,
        use_enum_values=True,
    )

    def set_field(self, name: str, value: Any) -> None:
        """Set a single field by API name or attribute name.

        Raises:
            KeyError: If no field answers to the given name
        """
        for field_name, info in type(self).model_fields.items():
            if name in (field_name, info.alias):
                setattr(self, field_name, value)
                return
        raise KeyError(f"Unknown form field: {name}")

    def to_payload(self) -> dict[str, Any]:
        """Request body using the API's field names."""
        return self.model_dump(mode="json", by_alias=True)


class Credentials(FormModel):
    """Login form."""

    email: str = ""
    password: str = ""


class Registration(FormModel):
    """Registration form."""

    name: str = ""
    email: str = ""
    password: str = ""


class TaskDraft(FormModel):
    """Task creation form."""

    title: str = ""
    description: str = ""
    due_date: str = Field(default="", alias="dueDate")
    priority: Priority = Priority.LOW
    assigned_to: str = Field(default="", alias="assignedTo")

    def reset(self) -> None:
        """Return every field to its empty default."""
        for field_name, info in type(self).model_fields.items():
            setattr(self, field_name, info.get_default(call_default_factory=True))


class EditBuffer(FormModel):
    """Editable copy of one task's fields."""

    title: str = ""
    description: str = ""
    due_date: str = Field(default="", alias="dueDate")
    # any server value; new input is restricted to Priority by the CLI
    priority: str = Priority.LOW.value
    status: str = "pending"
    assigned_to: str = Field(default="", alias="assignedTo")

    @classmethod
    def from_task(cls, task: Task) -> "EditBuffer":
        """Copy a task's editable fields, truncating the due date to a calendar date."""
        return cls(
            title=task.title,
            description=task.description,
            due_date=to_calendar_date(task.due_date),
            priority=task.priority,
            status=task.status,
            assigned_to=task.assignee_id,
        )


class EditState(NamedTuple):
    """The task currently in edit mode and its buffer."""

    task_id: str
    buffer: EditBuffer
