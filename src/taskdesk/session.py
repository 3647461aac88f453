"""Persisted bearer-token session.

The token lives in a small JSON file under a fixed key, so a login in one
invocation is visible to the next. The store is an explicit object handed
to whichever screen needs it.
"""

import contextlib
import json
from pathlib import Path

from taskdesk.utils.logging import get_logger

logger = get_logger(__name__)

TOKEN_KEY = "token"


class SessionStore:
    """File-backed storage for the session token.

    Lifecycle: ``save`` at login, ``load`` at dashboard mount, ``clear`` at
    logout. No expiry metadata is kept.
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize session store.

        Args:
            path: JSON file holding the token (``~`` is expanded)
        """
        self.path = Path(path).expanduser()

    def load(self) -> str | None:
        """Read the persisted token.

        Returns:
            The token, or None when no session exists or the file is unreadable
        """
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("session_file_unreadable", path=str(self.path), error=str(e))
            return None
        token = data.get(TOKEN_KEY) if isinstance(data, dict) else None
        return token if isinstance(token, str) and token else None

    def save(self, token: str) -> None:
        """Persist a token, replacing any previous one.

        The file is restricted to owner read/write where the OS allows it.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({TOKEN_KEY: token}), encoding="utf-8")
        with contextlib.suppress(OSError):
            self.path.chmod(0o600)
        logger.debug("session_saved", path=str(self.path))

    def clear(self) -> None:
        """Destroy the persisted session."""
        self.path.unlink(missing_ok=True)
        logger.debug("session_cleared", path=str(self.path))
