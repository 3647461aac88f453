"""Plain-text rendering of dashboard state."""

import click

from taskdesk.models import Task

PRIORITY_COLORS = {"low": "green", "medium": "yellow", "high": "red"}


def format_due(task: Task) -> str:
    """Calendar date for display; unparseable values are shown verbatim."""
    due = task.due
    return due.isoformat() if due else task.due_date


def format_task(task: Task, color: bool = True) -> str:
    """Render one task card."""
    title = click.style(task.title, bold=True) if color else task.title
    priority = task.priority
    if color:
        priority = click.style(priority, fg=PRIORITY_COLORS.get(priority))
    lines = [
        f"{title}  [{task.id}]",
        *([f"  {task.description}"] if task.description else []),
        f"  Due: {format_due(task)}",
        f"  Priority: {priority}",
        f"  Status: {task.status}",
    ]
    return "\n".join(lines)


def format_task_list(tasks: list[Task], color: bool = True) -> str:
    if not tasks:
        return "No tasks."
    return "\n\n".join(format_task(task, color=color) for task in tasks)
