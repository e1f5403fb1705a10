"""
Credential Store

In-memory username -> password table backed by a plain text file.

File format, one record per line:
    (username, password)

The table is loaded once at startup, mutated in memory by account creation
and written back by persist(). Passwords are kept and compared in clear text.
"""

import logging
import os
import re
from typing import Dict, Optional

from .constants import (
    COMMAND_SEP, MESSAGE_MAX, MESSAGE_MIN, PASSWORD_MAX, PASSWORD_MIN,
    USERNAME_MAX, USERNAME_MIN,
)
from .errors import CredentialStoreError

_LINE_RE = re.compile(r"^\s*\(\s*([^,]+?)\s*,\s*([^)]+?)\s*\)\s*$")

# Characters that would break the file format or the wire format
_BAD_USERNAME_CHARS = re.compile(r"[\s,()" + COMMAND_SEP + r"]")
_BAD_PASSWORD_CHARS = re.compile(r"[\s)" + COMMAND_SEP + r"]")


def validate_username(username: str) -> Optional[str]:
    """Return a description of what is wrong with a username, or None."""
    if not USERNAME_MIN <= len(username) <= USERNAME_MAX:
        return f"user name must be {USERNAME_MIN}-{USERNAME_MAX} characters"
    if _BAD_USERNAME_CHARS.search(username):
        return "user name contains invalid characters"
    return None


def validate_password(password: str) -> Optional[str]:
    """Return a description of what is wrong with a password, or None."""
    if not PASSWORD_MIN <= len(password) <= PASSWORD_MAX:
        return f"password must be {PASSWORD_MIN}-{PASSWORD_MAX} characters"
    if _BAD_PASSWORD_CHARS.search(password):
        return "password contains invalid characters"
    return None


def validate_message(message: str) -> Optional[str]:
    """Return a description of what is wrong with a chat message, or None."""
    if not MESSAGE_MIN <= len(message) <= MESSAGE_MAX:
        return f"message must be {MESSAGE_MIN}-{MESSAGE_MAX} characters"
    if COMMAND_SEP in message:
        return "message contains invalid characters"
    return None


class CredentialStore:
    """
    Username -> password table.

    Use as a context manager so the table is persisted on every way out:

        with CredentialStore.load("users.txt") as store:
            ...

    Attributes:
        path: File the table is loaded from and persisted to
        users: The table itself
    """

    def __init__(self, path: str, users: Optional[Dict[str, str]] = None):
        self.path = path
        self.users: Dict[str, str] = dict(users or {})
        self._dirty = False

    @classmethod
    def load(cls, path: str, create_missing: bool = False) -> "CredentialStore":
        """
        Load the table from a users file.

        Args:
            path: Path to the users file
            create_missing: Start with an empty table if the file does not exist

        Raises:
            CredentialStoreError: If the file is missing, not a regular file,
                or contains a malformed or duplicate record
        """
        if not os.path.exists(path):
            if create_missing:
                logging.warning(f"No users database at {path}, starting empty")
                store = cls(path)
                store._dirty = True
                return store
            raise CredentialStoreError(f"no such users database file: {path}")
        if not os.path.isfile(path):
            raise CredentialStoreError(f"users database file is not a regular file: {path}")

        users: Dict[str, str] = {}
        with open(path, encoding='utf-8') as f:
            for line_no, line in enumerate(f, start=1):
                line = line.rstrip('\n')
                if not line.strip():
                    continue
                match = _LINE_RE.match(line)
                if not match:
                    raise CredentialStoreError(
                        f"invalid line in users database: {path}:{line_no}:{line}")
                username, password = match.groups()
                if username in users:
                    raise CredentialStoreError(
                        f"duplicate user in users database: {path}:{line_no}:{username}")
                users[username] = password

        logging.info(f"Loaded {len(users)} users from {path}")
        return cls(path, users)

    def __enter__(self) -> "CredentialStore":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.persist()

    def __contains__(self, username: str) -> bool:
        return username in self.users

    def __len__(self) -> int:
        return len(self.users)

    @property
    def dirty(self) -> bool:
        return self._dirty

    def lookup(self, username: str) -> Optional[str]:
        return self.users.get(username)

    def verify(self, username: str, password: str) -> bool:
        stored = self.users.get(username)
        return stored is not None and stored == password

    def insert(self, username: str, password: str) -> bool:
        """
        Add a user.

        Returns:
            bool: True if the user was added, False if the name is taken
        """
        if username in self.users:
            return False
        self.users[username] = password
        self._dirty = True
        logging.info(f"Created new account for user: {username}")
        return True

    def persist(self):
        """Write the table back to its file if it changed. Idempotent."""
        if not self._dirty:
            return

        with open(self.path, 'w', encoding='utf-8') as f:
            for username in sorted(self.users):
                f.write(f"({username}, {self.users[username]})\n")
        self._dirty = False
        logging.info(f"Saved {len(self.users)} users to {self.path}")
