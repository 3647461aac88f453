"""Screen controllers: login, registration and the task dashboard."""

from taskdesk.screens.auth import LoginScreen, RegisterScreen
from taskdesk.screens.base import Navigator, Prompter, Route
from taskdesk.screens.dashboard import DashboardScreen, NotMountedError

__all__ = [
    "DashboardScreen",
    "LoginScreen",
    "Navigator",
    "NotMountedError",
    "Prompter",
    "RegisterScreen",
    "Route",
]
