"""Navigation and dialog seams shared by the screens."""

from abc import ABC, abstractmethod
from enum import Enum

from taskdesk.utils.logging import get_logger

logger = get_logger(__name__)


class Route(str, Enum):
    """Screens the client can navigate to."""

    LOGIN = "login"
    REGISTER = "register"
    DASHBOARD = "dashboard"


class Navigator:
    """Records screen transitions.

    The command line inspects ``current`` after driving a screen to decide
    what to show next and which exit code to use.
    """

    def __init__(self, start: Route | None = None) -> None:
        self.history: list[Route] = [start] if start else []

    @property
    def current(self) -> Route | None:
        return self.history[-1] if self.history else None

    def push(self, route: Route) -> None:
        """Navigate to a screen."""
        logger.debug("navigate", route=route.value)
        self.history.append(route)


class Prompter(ABC):
    """Blocking user dialogs."""

    @abstractmethod
    def alert(self, message: str) -> None:
        """Show a message the user must acknowledge."""
        ...

    @abstractmethod
    def confirm(self, message: str) -> bool:
        """Ask a yes/no question.

        Returns:
            True if the user confirmed
        """
        ...
