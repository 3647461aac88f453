"""HTTP client for the remote task API."""

import time
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from taskdesk.models import Credentials, EditBuffer, Registration, Task, TaskDraft
from taskdesk.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 10.0


class ApiError(Exception):
    """A failed call to the task API.

    Covers both transport failures (no status code) and non-2xx responses.
    ``server_message`` carries the optional human-readable ``msg`` field
    from the response body.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        server_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.server_message = server_message


def extract_server_message(response: httpx.Response) -> str | None:
    """Read the optional ``msg`` field from a JSON error body."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        msg = body.get("msg")
        if isinstance(msg, str) and msg:
            return msg
    return None


class TaskApiClient:
    """Client for the task API.

    Provides methods for:
    - Login and registration (no credentials attached)
    - Listing, creating, updating and deleting tasks (bearer token attached)

    No retries and no caching: each call maps to exactly one request.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize task API client.

        Args:
            base_url: API root, e.g. http://localhost:5000/api
            timeout: Request timeout in seconds
            transport: Optional transport override (used to serve an app in-process)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

        logger.debug("task_api_client_initialized", base_url=self.base_url)

    async def __aenter__(self) -> "TaskApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @staticmethod
    def _auth_headers(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    @staticmethod
    def _task_path(task_id: str) -> str:
        return f"/tasks/{quote(task_id, safe='')}"

    async def _request(
        self,
        method: str,
        path: str,
        token: str | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send one request and raise ApiError on any failure.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            token: Bearer token to attach (omitted for auth endpoints)
            json: Optional JSON body

        Returns:
            The successful (2xx) response
        """
        headers = self._auth_headers(token) if token is not None else None
        start_time = time.perf_counter()

        try:
            response = await self._client.request(method, path, json=json, headers=headers)
        except httpx.TransportError as e:
            logger.warning("task_api_transport_error", method=method, path=path, error=str(e))
            raise ApiError(f"{method} {path} failed: {e}") from e

        duration_ms = int((time.perf_counter() - start_time) * 1000)
        logger.debug(
            "task_api_response",
            method=method,
            path=path,
            status=response.status_code,
            duration_ms=duration_ms,
        )

        if response.is_error:
            server_message = extract_server_message(response)
            raise ApiError(
                f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
                server_message=server_message,
            )

        return response

    async def login(self, credentials: Credentials) -> str:
        """Exchange credentials for a session token.

        Returns:
            The bearer token

        Raises:
            ApiError: On failure, or when the response carries no token
        """
        response = await self._request("POST", "/auth/login", json=credentials.to_payload())
        try:
            body = response.json()
        except ValueError as e:
            raise ApiError("Login response is not JSON", status_code=response.status_code) from e

        token = body.get("token") if isinstance(body, dict) else None
        if not isinstance(token, str) or not token:
            raise ApiError("Login response carries no token", status_code=response.status_code)
        return token

    async def register(self, registration: Registration) -> None:
        """Create a new account."""
        await self._request("POST", "/auth/register", json=registration.to_payload())

    async def list_tasks(self, token: str) -> list[Task]:
        """Fetch the full task collection in server order.

        Records are read leniently; one without a usable ``_id`` is skipped
        and logged rather than failing the whole list.

        Raises:
            ApiError: On failure or when the body is not a JSON array
        """
        response = await self._request("GET", "/tasks", token=token)
        try:
            body = response.json()
        except ValueError as e:
            raise ApiError("Task list response is not JSON", status_code=response.status_code) from e

        if not isinstance(body, list):
            raise ApiError("Task list response is not an array", status_code=response.status_code)
        tasks: list[Task] = []
        for index, item in enumerate(body):
            try:
                tasks.append(Task.model_validate(item))
            except ValidationError as e:
                # records without an identifier cannot be shown or acted on
                logger.warning("task_record_skipped", index=index, errors=e.error_count())
        return tasks

    async def create_task(self, token: str, draft: TaskDraft) -> httpx.Response:
        """Submit a new task.

        Returns:
            The response; callers treat only HTTP 201 as created
        """
        return await self._request("POST", "/tasks", token=token, json=draft.to_payload())

    async def update_task(self, token: str, task_id: str, buffer: EditBuffer) -> None:
        """Overwrite a task's editable fields with the full edit buffer."""
        await self._request("PUT", self._task_path(task_id), token=token, json=buffer.to_payload())

    async def delete_task(self, token: str, task_id: str) -> None:
        """Delete a task."""
        await self._request("DELETE", self._task_path(task_id), token=token)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
