"""Test fixtures: fake task API, recording prompter and data factories."""

from tests.fixtures.factories import TaskFactory
from tests.fixtures.fake_api import BASE_URL, FakeTaskApi, RecordedRequest
from tests.fixtures.prompter import RecordingPrompter

__all__ = [
    "BASE_URL",
    "FakeTaskApi",
    "RecordedRequest",
    "RecordingPrompter",
    "TaskFactory",
]
