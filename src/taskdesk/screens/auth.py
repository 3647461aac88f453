"""Login and registration screens."""

from typing import Any

from taskdesk.api import ApiError, TaskApiClient
from taskdesk.models import Credentials, Registration
from taskdesk.screens.base import Navigator, Route
from taskdesk.session import SessionStore
from taskdesk.utils.logging import get_logger

logger = get_logger(__name__)

LOGIN_FAILED = "Login failed"
REGISTRATION_FAILED = "Registration failed"
SESSION_SAVE_FAILED = "Logged in, but the session could not be saved"


class LoginScreen:
    """Exchanges credentials for a session token.

    On success the token is persisted and the dashboard is opened. On
    failure ``error`` holds the server's message, or a fixed fallback.
    """

    def __init__(
        self,
        client: TaskApiClient,
        session: SessionStore,
        navigator: Navigator,
    ) -> None:
        self.client = client
        self.session = session
        self.navigator = navigator
        self.form = Credentials()
        self.error = ""

    def handle_change(self, name: str, value: Any) -> None:
        self.form.set_field(name, value)

    async def submit(self) -> bool:
        """Log in with the current form values.

        Returns:
            True if a token was obtained and stored
        """
        try:
            token = await self.client.login(self.form)
        except ApiError as e:
            logger.info("login_failed", status=e.status_code, error=str(e))
            self.error = e.server_message or LOGIN_FAILED
            return False

        try:
            self.session.save(token)
        except OSError as e:
            logger.error("session_save_failed", path=str(self.session.path), error=str(e))
            self.error = SESSION_SAVE_FAILED
            return False

        logger.info("login_succeeded", email=self.form.email)
        self.navigator.push(Route.DASHBOARD)
        return True

    def go_to_register(self) -> None:
        self.navigator.push(Route.REGISTER)


class RegisterScreen:
    """Submits a new account, then sends the user to the login screen."""

    def __init__(self, client: TaskApiClient, navigator: Navigator) -> None:
        self.client = client
        self.navigator = navigator
        self.form = Registration()
        self.error = ""

    def handle_change(self, name: str, value: Any) -> None:
        self.form.set_field(name, value)

    async def submit(self) -> bool:
        """Register with the current form values.

        Returns:
            True if the account was created
        """
        try:
            await self.client.register(self.form)
        except ApiError as e:
            logger.info("registration_failed", status=e.status_code, error=str(e))
            self.error = e.server_message or REGISTRATION_FAILED
            return False

        logger.info("registration_succeeded", email=self.form.email)
        self.navigator.push(Route.LOGIN)
        return True

    def go_to_login(self) -> None:
        self.navigator.push(Route.LOGIN)
