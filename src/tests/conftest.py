"""Pytest fixtures for the taskdesk tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

from taskdesk.api import TaskApiClient
from taskdesk.config import Settings
from taskdesk.screens import Navigator
from taskdesk.session import SessionStore
from tests.fixtures import BASE_URL, FakeTaskApi, RecordingPrompter, TaskFactory


@pytest.fixture(autouse=True)
def reset_factories() -> None:
    """Restart factory id sequences for every test."""
    TaskFactory.reset()


@pytest.fixture
def session_path(tmp_path: Path) -> Path:
    return tmp_path / "state" / "session.json"


@pytest.fixture
def test_settings(session_path: Path) -> Settings:
    """Create test settings pointing at the fake API."""
    return Settings(
        api_base_url=BASE_URL,
        request_timeout_seconds=5.0,
        session_path=str(session_path),
        log_level="DEBUG",
        log_format="console",
    )


@pytest.fixture
def fake_api() -> FakeTaskApi:
    """Fake task API with one known user (token "T1")."""
    api = FakeTaskApi()
    api.add_user("Ada", "a@b.com", "x", token="T1")
    return api


@pytest.fixture
def transport(fake_api: FakeTaskApi) -> httpx.ASGITransport:
    return httpx.ASGITransport(app=fake_api.app)


@pytest_asyncio.fixture
async def api_client(transport: httpx.ASGITransport) -> AsyncGenerator[TaskApiClient, None]:
    """Real client wired to the in-process fake API."""
    client = TaskApiClient(base_url=BASE_URL, transport=transport)
    yield client
    await client.close()


@pytest.fixture
def session_store(session_path: Path) -> SessionStore:
    return SessionStore(session_path)


@pytest.fixture
def navigator() -> Navigator:
    return Navigator()


@pytest.fixture
def prompter() -> RecordingPrompter:
    return RecordingPrompter()
