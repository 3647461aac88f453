"""Data models for the task client."""

from taskdesk.models.forms import (
    Credentials,
    EditBuffer,
    EditState,
    FormModel,
    Registration,
    TaskDraft,
)
from taskdesk.models.task import Priority, Task, reference_id, to_calendar_date

__all__ = [
    # Entity
    "Task",
    "Priority",
    "reference_id",
    "to_calendar_date",
    # Forms
    "FormModel",
    "Credentials",
    "Registration",
    "TaskDraft",
    "EditBuffer",
    "EditState",
]
