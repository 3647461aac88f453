"""CLI entry point for taskdesk.

Each command drives one screen against the task API and renders the
resulting state.

Usage:
    taskdesk register --name Ada --email ada@example.com
    taskdesk login --email ada@example.com
    taskdesk tasks list
    taskdesk tasks create --title "Write report" --due 2025-01-31 --assigned-to ada
    taskdesk tasks edit 42 --priority high
    taskdesk tasks delete 42
    taskdesk logout
    taskdesk init-config
"""

import asyncio
import contextlib
import sys
from collections.abc import Awaitable, Callable
from datetime import datetime
from pathlib import Path
from typing import Any, TypeVar

import click
import tomli_w
from pydantic import ValidationError

from taskdesk import __version__
from taskdesk.api import TaskApiClient
from taskdesk.config import Settings, get_config_path, get_default_config, load_settings_with_toml
from taskdesk.models import Priority
from taskdesk.render import format_task_list
from taskdesk.screens import DashboardScreen, LoginScreen, Navigator, Prompter, RegisterScreen, Route
from taskdesk.session import SessionStore
from taskdesk.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)

T = TypeVar("T")

PRIORITY_CHOICES = [p.value for p in Priority]
LOAD_FAILED = "Could not load tasks."


class ErrorCategory:
    """Error categories for clear error messages."""

    CONFIGURATION = "configuration"
    SESSION = "session"
    VALIDATION = "validation"


def format_error(category: str, message: str, remediation: str) -> str:
    """Format error with category and remediation.

    Args:
        category: Error category
        message: Error message
        remediation: Suggested fix

    Returns:
        Formatted error string
    """
    return f"""
Error [{category.upper()}]: {message}

Remediation: {remediation}
"""


class ClickPrompter(Prompter):
    """Terminal dialogs backed by click."""

    def __init__(self, assume_yes: bool = False) -> None:
        self.assume_yes = assume_yes
        self.last_answer: bool | None = None

    def alert(self, message: str) -> None:
        click.echo(click.style(message, fg="red"), err=True)

    def confirm(self, message: str) -> bool:
        self.last_answer = True if self.assume_yes else click.confirm(message, default=False)
        return self.last_answer


def _settings(ctx: click.Context) -> Settings:
    return ctx.obj["settings"]


def _make_client(ctx: click.Context) -> TaskApiClient:
    settings = _settings(ctx)
    return TaskApiClient(
        base_url=settings.api_base_url,
        timeout=settings.request_timeout_seconds,
        transport=ctx.obj.get("transport"),
    )


def _session(ctx: click.Context) -> SessionStore:
    return SessionStore(_settings(ctx).session_path)


def _iso_date(value: datetime | None) -> str | None:
    return value.date().isoformat() if value else None


def _run_dashboard(
    ctx: click.Context,
    action: Callable[[DashboardScreen], Awaitable[T]],
    prompter: ClickPrompter | None = None,
) -> tuple[DashboardScreen, T | None]:
    """Mount the dashboard and run an action on it.

    Exits with status 1 when there is no session.
    """
    navigator = Navigator(Route.DASHBOARD)

    async def _run() -> tuple[DashboardScreen, T | None]:
        async with _make_client(ctx) as client:
            screen = DashboardScreen(client, _session(ctx), navigator, prompter or ClickPrompter())
            if not await screen.mount():
                return screen, None
            return screen, await action(screen)

    screen, result = asyncio.run(_run())

    if navigator.current is Route.LOGIN:
        click.echo(
            format_error(ErrorCategory.SESSION, "Not logged in", "Run: taskdesk login"),
            err=True,
        )
        sys.exit(1)

    return screen, result


@click.group()
@click.option(
    "--config",
    type=click.Path(exists=False, dir_okay=False),
    help="Override global config file path",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Override log level",
)
@click.option("--api-url", type=str, help="Override the task API base URL")
@click.version_option(version=__version__, prog_name="taskdesk")
@click.pass_context
def main(
    ctx: click.Context,
    config: str | None,
    log_level: str | None,
    api_url: str | None,
) -> None:
    """Task dashboard for a remote task API.

    Configuration is loaded from (in priority order):
    1. CLI options
    2. Environment variables (TASKDESK_*)
    3. Global config file (~/.config/taskdesk/config.toml)
    4. Built-in defaults
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config

    try:
        settings = load_settings_with_toml(
            Path(config) if config else None,
            log_level=log_level,
            api_base_url=api_url,
        )
    except (ValidationError, ValueError) as e:
        click.echo(
            format_error(
                ErrorCategory.CONFIGURATION,
                "Invalid configuration",
                f"Check {config or get_config_path()} and TASKDESK_* variables.\n\nDetails: {e}",
            ),
            err=True,
        )
        sys.exit(1)

    ctx.obj["settings"] = settings
    setup_logging(settings)
    logger.debug("settings_loaded", api_base_url=settings.api_base_url, session_path=settings.session_path)


@main.command()
@click.option("--email", prompt=True, help="Account email")
@click.option("--password", prompt=True, hide_input=True, help="Account password")
@click.pass_context
def login(ctx: click.Context, email: str, password: str) -> None:
    """Log in and store the session token."""

    async def _login() -> LoginScreen:
        async with _make_client(ctx) as client:
            screen = LoginScreen(client, _session(ctx), Navigator(Route.LOGIN))
            screen.handle_change("email", email)
            screen.handle_change("password", password)
            await screen.submit()
            return screen

    screen = asyncio.run(_login())
    if screen.navigator.current is not Route.DASHBOARD:
        click.echo(click.style(screen.error, fg="red"), err=True)
        sys.exit(1)
    click.echo("Logged in.")


@main.command()
@click.option("--name", prompt=True, help="Display name")
@click.option("--email", prompt=True, help="Account email")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True, help="Account password")
@click.pass_context
def register(ctx: click.Context, name: str, email: str, password: str) -> None:
    """Create a new account."""

    async def _register() -> RegisterScreen:
        async with _make_client(ctx) as client:
            screen = RegisterScreen(client, Navigator(Route.REGISTER))
            screen.handle_change("name", name)
            screen.handle_change("email", email)
            screen.handle_change("password", password)
            await screen.submit()
            return screen

    screen = asyncio.run(_register())
    if screen.navigator.current is not Route.LOGIN:
        click.echo(click.style(screen.error, fg="red"), err=True)
        sys.exit(1)
    click.echo("Account created. Log in with: taskdesk login")


@main.command()
@click.pass_context
def logout(ctx: click.Context) -> None:
    """Forget the stored session token."""

    async def _logout() -> None:
        async with _make_client(ctx) as client:
            screen = DashboardScreen(client, _session(ctx), Navigator(Route.DASHBOARD), ClickPrompter())
            screen.logout()

    asyncio.run(_logout())
    click.echo("Logged out.")


@main.group()
def tasks() -> None:
    """List, create, edit and delete tasks."""


@tasks.command("list")
@click.option("--no-color", is_flag=True, help="Disable styled output")
@click.pass_context
def list_tasks(ctx: click.Context, no_color: bool) -> None:
    """Show every task."""

    async def _noop(screen: DashboardScreen) -> None:
        return None

    screen, _ = _run_dashboard(ctx, _noop)
    if not screen.loaded:
        click.echo(LOAD_FAILED, err=True)
        sys.exit(1)
    click.echo(format_task_list(screen.tasks, color=not no_color))


@tasks.command("create")
@click.option("--title", required=True, help="Task title")
@click.option("--description", default="", help="Task description")
@click.option("--due", required=True, type=click.DateTime(formats=["%Y-%m-%d"]), help="Due date (YYYY-MM-DD)")
@click.option("--priority", type=click.Choice(PRIORITY_CHOICES), default=Priority.LOW.value, show_default=True)
@click.option("--assigned-to", default="", help="User the task is assigned to")
@click.pass_context
def create_task(
    ctx: click.Context,
    title: str,
    description: str,
    due: datetime,
    priority: str,
    assigned_to: str,
) -> None:
    """Create a task."""
    fields = {
        "title": title,
        "description": description,
        "dueDate": _iso_date(due),
        "priority": priority,
        "assignedTo": assigned_to,
    }

    async def _create(screen: DashboardScreen) -> bool:
        for name, value in fields.items():
            screen.handle_task_change(name, value)
        return await screen.create_task()

    screen, created = _run_dashboard(ctx, _create)
    if not created:
        sys.exit(1)
    click.echo("Task created.")
    click.echo(format_task_list(screen.tasks))


@tasks.command("edit")
@click.argument("task_id")
@click.option("--title", help="New title")
@click.option("--description", help="New description")
@click.option("--due", type=click.DateTime(formats=["%Y-%m-%d"]), help="New due date (YYYY-MM-DD)")
@click.option("--priority", type=click.Choice(PRIORITY_CHOICES), help="New priority")
@click.option("--status", help="New status")
@click.option("--assigned-to", help="New assignee")
@click.pass_context
def edit_task(
    ctx: click.Context,
    task_id: str,
    title: str | None,
    description: str | None,
    due: datetime | None,
    priority: str | None,
    status: str | None,
    assigned_to: str | None,
) -> None:
    """Edit a task; unspecified fields keep their current values."""
    changes: dict[str, Any] = {
        "title": title,
        "description": description,
        "dueDate": _iso_date(due),
        "priority": priority,
        "status": status,
        "assignedTo": assigned_to,
    }

    async def _edit(screen: DashboardScreen) -> bool | None:
        task = screen.find_task(task_id)
        if task is None:
            return None
        screen.start_edit(task)
        for name, value in changes.items():
            if value is not None:
                screen.handle_edit_change(name, value)
        return await screen.submit_edit()

    screen, updated = _run_dashboard(ctx, _edit)
    if not screen.loaded:
        click.echo(LOAD_FAILED, err=True)
        sys.exit(1)
    if updated is None:
        click.echo(
            format_error(ErrorCategory.VALIDATION, f"No task with id '{task_id}'", "Run: taskdesk tasks list"),
            err=True,
        )
        sys.exit(1)
    if not updated:
        click.echo("Update failed.", err=True)
        sys.exit(1)
    click.echo("Task updated.")
    click.echo(format_task_list(screen.tasks))


@tasks.command("delete")
@click.argument("task_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_task(ctx: click.Context, task_id: str, yes: bool) -> None:
    """Delete a task."""
    prompter = ClickPrompter(assume_yes=yes)

    async def _delete(screen: DashboardScreen) -> bool:
        return await screen.delete_task(task_id)

    _, deleted = _run_dashboard(ctx, _delete, prompter=prompter)
    if deleted:
        click.echo("Task deleted.")
        return
    if prompter.last_answer is False:
        click.echo("Cancelled.")
        return
    click.echo("Delete failed.", err=True)
    sys.exit(1)


@main.command("init-config")
@click.pass_context
def init_config(ctx: click.Context) -> None:
    """Create the global configuration file with defaults.

    The file is created with restrictive permissions (600).
    """
    config_path = Path(ctx.obj.get("config_path") or get_config_path())

    if config_path.exists():
        click.echo(f"Config file already exists: {config_path}")
        if not click.confirm("Overwrite?"):
            sys.exit(0)

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "wb") as f:
        tomli_w.dump(get_default_config(), f)

    # chmod may not be supported on Windows
    with contextlib.suppress(OSError):
        config_path.chmod(0o600)

    click.echo(f"Created config file: {config_path}")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Set api.base_url to your task API")
    click.echo("  2. Create an account: taskdesk register")
    click.echo("  3. Log in: taskdesk login")


if __name__ == "__main__":
    main()
