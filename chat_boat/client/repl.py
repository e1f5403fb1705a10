"""
Chat Client REPL

Reads commands typed by the user, checks their syntax and sends them to the
server through a ChatClient. Like the server, the REPL is a polling loop: it
sleeps briefly, checks the stop event and only reads stdin when a line is
waiting, so an interrupt is noticed without blocking on input().
"""

import logging
import re
import select
import sys
import threading
from typing import Callable, Dict, Optional, TextIO

from ..common.constants import POLL_INTERVAL
from ..common.credentials import validate_message, validate_password, validate_username
from ..common.errors import ChatError, FrameEncodingError, TransportError
from ..common.protocol import Command, Reply
from .client import ChatClient

E_NOT_LOGGED_OUT = "Denied. Must be logged out."
E_NOT_LOGGED_IN = "Denied. Please login first."

HELP = """
Commands always available:

  help                 Print this help message.

Commands only available when not logged in:

  newuser USER PASS    Create a new user with the given credentials.
  login USER PASS      Login to the chat room with the given credentials.

Commands only available when logged in:

  logout               Logout of the chat room and quit Chat Boat.
  send MSG             Broadcast a message to everyone in the chat room.

"""

PROMPT = "< "
PROMPT_INFO = "> "
PROMPT_ERR = "! "

_CMD_RE = re.compile(r"^\s*(\S+) ?(.*)$")


class Repl:
    """
    Interactive front end of the chat client.

    Attributes:
        client: Connected ChatClient commands are sent through
        logged_in: Whether the last login succeeded and no logout followed
    """

    def __init__(self, client: ChatClient, stop_event: Optional[threading.Event] = None,
                 stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None,
                 poll_interval: float = POLL_INTERVAL):
        self.client = client
        self.stop_event = stop_event if stop_event is not None else threading.Event()
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.poll_interval = poll_interval
        self.logged_in = False
        self.commands: Dict[str, Callable[[str], bool]] = {
            "help": self.cmd_help,
            Command.NEWUSER.value: self.cmd_newuser,
            Command.LOGIN.value: self.cmd_login,
            Command.LOGOUT.value: self.cmd_logout,
            Command.SEND.value: self.cmd_send,
        }

    def print(self, text: str):
        self.stdout.write(text)
        self.stdout.flush()

    def print_info(self, text: str):
        self.print(f"{PROMPT_INFO}{text}\n")

    def print_err(self, text: str):
        self.print(f"{PROMPT_ERR}{text}\n")

    def main_loop(self):
        """Run the REPL until logout, end of input or the stop event."""
        did_prompt = False

        while not self.stop_event.wait(self.poll_interval):
            if not did_prompt:
                self.print(PROMPT)
                did_prompt = True

            try:
                readable, _, _ = select.select([self.stdin], [], [], 0)
            except InterruptedError:
                # only reached when a signal handler raises it
                continue
            if not readable:
                continue

            line = self.stdin.readline()
            did_prompt = False
            if not line:
                break
            if self.execute(line.rstrip('\n')):
                break

    def execute(self, line: str) -> bool:
        """
        Execute one input line.

        Returns:
            bool: True if the REPL should exit
        """
        match = _CMD_RE.match(line)
        if not match:
            return False
        name, args = match.groups()
        logging.debug(f"Input command: {name}")

        handler = self.commands.get(name)
        if handler is None:
            self.print_err(f"Error. Command not recognized: {name}")
            return False

        try:
            return handler(args)
        except (TransportError, FrameEncodingError) as e:
            self.print_err(f"Error. Connection to server lost: {e}")
            return True
        except ChatError as e:
            logging.info(f"Error while executing command: {e}")
            self.print_err(f"Error. {e}")
            return False

    def server_reply(self) -> Reply:
        """Receive and print the reply to the command just sent."""
        reply = self.client.receive_reply()
        if reply.ok:
            self.print_info(reply.text)
        else:
            self.print_err(reply.text)
        return reply

    def _credentials(self, name: str, args: str) -> Optional[tuple]:
        fields = args.split()
        if len(fields) != 2:
            self.print_err(f"Error. Syntax: {name} USER PASS")
            return None
        return fields[0], fields[1]

    def cmd_help(self, args: str) -> bool:
        self.print(HELP)
        return False

    def cmd_newuser(self, args: str) -> bool:
        """syntax: newuser USER PASS"""
        if self.logged_in:
            self.print_err(E_NOT_LOGGED_OUT)
            return False
        credentials = self._credentials(Command.NEWUSER.value, args)
        if credentials is None:
            return False

        username, password = credentials
        error = validate_username(username) or validate_password(password)
        if error:
            self.print_err(f"Error. {error.capitalize()}")
            return False

        self.client.send_command([Command.NEWUSER.value, username, password])
        self.server_reply()
        return False

    def cmd_login(self, args: str) -> bool:
        """syntax: login USER PASS"""
        if self.logged_in:
            self.print_err(E_NOT_LOGGED_OUT)
            return False
        credentials = self._credentials(Command.LOGIN.value, args)
        if credentials is None:
            return False

        self.client.send_command([Command.LOGIN.value, *credentials])
        if self.server_reply().ok:
            self.logged_in = True
        return False

    def cmd_logout(self, args: str) -> bool:
        """syntax: logout"""
        if not self.logged_in:
            self.print_err(E_NOT_LOGGED_IN)
            return False
        if args.strip():
            self.print_err("Error. Syntax: logout")
            return False

        self.client.send_command([Command.LOGOUT.value])
        if self.server_reply().ok:
            self.logged_in = False
            return True
        return False

    def cmd_send(self, args: str) -> bool:
        """syntax: send MSG..."""
        if not self.logged_in:
            self.print_err(E_NOT_LOGGED_IN)
            return False
        if not args.strip():
            self.print_err("Error. Syntax: send MSG...")
            return False

        error = validate_message(args)
        if error:
            self.print_err(f"Error. {error.capitalize()}")
            return False

        self.client.send_command([Command.SEND.value, args])
        self.server_reply()
        return False
