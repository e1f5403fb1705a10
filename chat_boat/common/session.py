"""
Connection Session

Authentication state of the single admitted connection.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class SessionState(Enum):
    ANONYMOUS = auto()
    AUTHENTICATED = auto()


@dataclass
class Session:
    """
    Per-connection identity.

    A session starts anonymous when its connection is admitted and is
    discarded together with the connection.

    Attributes:
        username: Name of the logged in user, None while anonymous
    """
    username: Optional[str] = None

    @property
    def state(self) -> SessionState:
        if self.username is None:
            return SessionState.ANONYMOUS
        return SessionState.AUTHENTICATED

    @property
    def is_authenticated(self) -> bool:
        return self.username is not None

    def login(self, username: str):
        """Bind the session to a user. Only legal while anonymous."""
        if self.is_authenticated:
            raise RuntimeError(f"session already authenticated as {self.username}")
        self.username = username

    def logout(self) -> str:
        """Return the session to anonymous and give back the departing user."""
        if not self.is_authenticated:
            raise RuntimeError("session is not authenticated")
        username, self.username = self.username, None
        return username
