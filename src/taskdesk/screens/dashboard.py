"""Dashboard screen: task list, creation form and single-task edit form.

Consistency model: the local task list is never patched. Every successful
mutation calls ``refresh()``, which replaces the list with whatever the
server returns. There is no optimistic update and no merge.
"""

from typing import Any

from taskdesk.api import ApiError, TaskApiClient
from taskdesk.models import EditBuffer, EditState, Task, TaskDraft
from taskdesk.screens.base import Navigator, Prompter, Route
from taskdesk.session import SessionStore
from taskdesk.utils.logging import get_logger

logger = get_logger(__name__)

MISSING_ASSIGNEE = "Please assign the task to a user."
CREATE_FAILED = "Task creation failed. Please check console for more details."
CONFIRM_DELETE = "Are you sure you want to delete this task?"


class NotMountedError(RuntimeError):
    """Raised when a task operation runs before a session was found."""


class DashboardScreen:
    """Lists, creates, edits and deletes tasks for the current session.

    At most one task is in edit mode at a time: ``editing`` is either None
    or a single ``(task_id, buffer)`` pair.
    """

    def __init__(
        self,
        client: TaskApiClient,
        session: SessionStore,
        navigator: Navigator,
        prompter: Prompter,
    ) -> None:
        self.client = client
        self.session = session
        self.navigator = navigator
        self.prompter = prompter

        self.token: str | None = None
        self.tasks: list[Task] = []
        self.loaded = False
        self.draft = TaskDraft()
        self.editing: EditState | None = None

    # -- session -----------------------------------------------------------

    async def mount(self) -> bool:
        """Enter the dashboard.

        Without a persisted token this redirects to the login screen and
        issues no request.

        Returns:
            True if a session was found
        """
        self.token = self.session.load()
        if not self.token:
            logger.info("dashboard_no_session")
            self.navigator.push(Route.LOGIN)
            return False

        await self.refresh()
        return True

    def logout(self) -> None:
        self.session.clear()
        self.token = None
        self.tasks = []
        self.loaded = False
        self.editing = None
        self.navigator.push(Route.LOGIN)

    def _require_token(self) -> str:
        if not self.token:
            raise NotMountedError("Dashboard has no session; call mount() first")
        return self.token

    # -- list --------------------------------------------------------------

    async def refresh(self) -> bool:
        """Replace the local task list with the server's collection.

        Failures are logged only; the previous list stays in place.

        Returns:
            True if the list was fetched
        """
        token = self._require_token()
        try:
            tasks = await self.client.list_tasks(token)
        except ApiError as e:
            logger.error("tasks_fetch_failed", status=e.status_code, error=str(e))
            return False

        self.tasks = tasks
        self.loaded = True
        logger.debug("tasks_fetched", count=len(tasks))
        return True

    def find_task(self, task_id: str) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    # -- create ------------------------------------------------------------

    def handle_task_change(self, name: str, value: Any) -> None:
        self.draft.set_field(name, value)

    async def create_task(self) -> bool:
        """Submit the creation form.

        An empty assignee aborts with an alert before any request. Only an
        HTTP 201 resets the form and refreshes the list.

        Returns:
            True if the server reported the task as created
        """
        if not self.draft.assigned_to:
            self.prompter.alert(MISSING_ASSIGNEE)
            return False

        token = self._require_token()
        try:
            response = await self.client.create_task(token, self.draft)
        except ApiError as e:
            logger.error("task_create_failed", status=e.status_code, error=str(e))
            self.prompter.alert(CREATE_FAILED)
            return False

        if response.status_code != 201:
            logger.warning("task_create_unexpected_status", status=response.status_code)
            return False

        self.draft.reset()
        await self.refresh()
        return True

    # -- edit --------------------------------------------------------------

    def start_edit(self, task: Task) -> EditBuffer:
        """Put a task in edit mode, discarding any other in-progress edit."""
        if self.editing and self.editing.task_id != task.id:
            logger.debug("edit_discarded", task_id=self.editing.task_id)
        buffer = EditBuffer.from_task(task)
        self.editing = EditState(task.id, buffer)
        return buffer

    def handle_edit_change(self, name: str, value: Any) -> None:
        if self.editing is None:
            raise RuntimeError("No task is being edited")
        self.editing.buffer.set_field(name, value)

    def cancel_edit(self) -> None:
        self.editing = None

    async def submit_edit(self) -> bool:
        """Send the whole edit buffer as an update for the task being edited.

        On failure the edit stays open so it can be retried.

        Returns:
            True if the update was accepted
        """
        if self.editing is None:
            raise RuntimeError("No task is being edited")

        token = self._require_token()
        task_id, buffer = self.editing
        try:
            await self.client.update_task(token, task_id, buffer)
        except ApiError as e:
            logger.error("task_update_failed", task_id=task_id, status=e.status_code, error=str(e))
            return False

        self.editing = None
        await self.refresh()
        return True

    # -- delete ------------------------------------------------------------

    async def delete_task(self, task_id: str) -> bool:
        """Delete a task after interactive confirmation.

        Returns:
            True if the task was deleted
        """
        if not self.prompter.confirm(CONFIRM_DELETE):
            return False

        token = self._require_token()
        try:
            await self.client.delete_task(token, task_id)
        except ApiError as e:
            logger.error("task_delete_failed", task_id=task_id, status=e.status_code, error=str(e))
            return False

        await self.refresh()
        return True
