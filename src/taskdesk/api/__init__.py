"""Remote task API access."""

from taskdesk.api.client import ApiError, TaskApiClient, extract_server_message

__all__ = ["ApiError", "TaskApiClient", "extract_server_message"]
