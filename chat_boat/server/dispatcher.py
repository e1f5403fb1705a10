"""
Command Dispatcher

Maps decoded commands onto session transitions and credential store
operations and produces exactly one reply per command.
"""

import logging
from typing import List, Tuple

from ..common.credentials import (
    CredentialStore, validate_message, validate_password, validate_username,
)
from ..common.protocol import Command, Reply
from ..common.session import Session

E_LOGGED_IN = "must be logged in"
E_LOGGED_OUT = "must be logged out"


class CommandDispatcher:
    """
    Executes commands for the admitted connection.

    Attributes:
        store: Credential table shared by all sessions
        disconnect_on_logout: Whether a successful logout ends the connection
    """

    def __init__(self, store: CredentialStore, disconnect_on_logout: bool = True):
        self.store = store
        self.disconnect_on_logout = disconnect_on_logout

    def dispatch(self, parts: List[str], session: Session) -> Tuple[Reply, bool]:
        """
        Execute one command.

        Args:
            parts: Command name followed by its arguments
            session: Session of the connection the command came from

        Returns:
            Tuple of (reply, drop) where drop tells the caller to close the
            connection once the reply is sent
        """
        name, args = parts[0], parts[1:]

        try:
            command = Command(name)
        except ValueError:
            logging.debug(f"Unknown command: {name!r}")
            return Reply.failure(f"command not recognized: {name}"), False

        if len(args) != command.arg_count:
            return Reply.failure(
                f"expected {command.arg_count} arguments but got {len(args)}"), False

        logging.debug(f"Handling command: {command.value} for {session.username or 'anonymous'}")

        if command == Command.NEWUSER:
            return self.newuser(session, *args), False
        elif command == Command.LOGIN:
            return self.login(session, *args), False
        elif command == Command.LOGOUT:
            reply = self.logout(session)
            return reply, reply.ok and self.disconnect_on_logout
        else:
            return self.send(session, *args), False

    def newuser(self, session: Session, username: str, password: str) -> Reply:
        if session.is_authenticated:
            return Reply.failure(E_LOGGED_OUT)

        error = validate_username(username) or validate_password(password)
        if error:
            return Reply.failure(error)

        if not self.store.insert(username, password):
            return Reply.failure(f"user account already exists: {username}")
        return Reply.success(f"user account created: {username}")

    def login(self, session: Session, username: str, password: str) -> Reply:
        if session.is_authenticated:
            return Reply.failure("already logged in")

        if not self.store.verify(username, password):
            logging.info(f"Failed login attempt for user: {username}")
            return Reply.failure("incorrect username or password")

        session.login(username)
        logging.info(f"User logged in: {username}")
        return Reply.success(f"{username} joined")

    def logout(self, session: Session) -> Reply:
        if not session.is_authenticated:
            return Reply.failure(E_LOGGED_IN)

        username = session.logout()
        logging.info(f"User logged out: {username}")
        return Reply.success(f"{username} left")

    def send(self, session: Session, message: str) -> Reply:
        if not session.is_authenticated:
            return Reply.failure(E_LOGGED_IN)

        error = validate_message(message)
        if error:
            return Reply.failure(error)

        logging.info(f"Message from {session.username}: {message}")
        return Reply.success(f"{session.username}: {message}")
