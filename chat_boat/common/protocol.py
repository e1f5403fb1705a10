"""
Chat Boat Wire Protocol

Defines the two message shapes carried by the framed transport.

Message Format:
1. Command (client -> server):
   NAME[SEP ARG]...    fields joined by the separator byte 0x02

2. Reply (server -> client):
   STATUS TEXT         STATUS is 0x06 (ok) or 0x15 (error)

Arguments are not escaped. Text containing the separator byte cannot be
sent as an argument.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import List, Sequence

from .constants import COMMAND_SEP, TERMINATOR
from .errors import EmptyCommand, EmptyReply, InvalidStatusByte


class Status(IntEnum):
    """Leading status byte of every reply"""
    OK = 0x06
    ERR = 0x15


class Command(str, Enum):
    """Commands understood by the server"""
    NEWUSER = "newuser"
    LOGIN = "login"
    LOGOUT = "logout"
    SEND = "send"

    @property
    def arg_count(self) -> int:
        """Number of arguments the command takes"""
        return _ARG_COUNTS[self]


_ARG_COUNTS = {
    Command.NEWUSER: 2,
    Command.LOGIN: 2,
    Command.LOGOUT: 0,
    Command.SEND: 1,
}


@dataclass(frozen=True)
class Reply:
    """
    Result of a command as seen by the client.

    Attributes:
        ok: Whether the command succeeded
        text: Human readable result or error description
    """
    ok: bool
    text: str

    @classmethod
    def success(cls, text: str) -> "Reply":
        return cls(True, text)

    @classmethod
    def failure(cls, text: str) -> "Reply":
        return cls(False, text)


def frame_size(message: str) -> int:
    """Size in bytes of a message on the wire, terminator included."""
    return len(message.encode('utf-8')) + len(TERMINATOR)


def encode_command(parts: Sequence[str]) -> str:
    """
    Encode a command and its arguments.

    Args:
        parts: Command name followed by its arguments

    Returns:
        The fields joined by the separator byte
    """
    assert parts, "a command needs at least a name"
    return COMMAND_SEP.join(parts)


def decode_command(message: str) -> List[str]:
    """
    Split a received command into its name and arguments.

    Raises:
        EmptyCommand: If the message holds no fields at all
    """
    if not message:
        raise EmptyCommand()
    return message.split(COMMAND_SEP)


def encode_reply(reply: Reply) -> str:
    status = Status.OK if reply.ok else Status.ERR
    return chr(status) + reply.text


def decode_reply(message: str) -> Reply:
    """
    Decode a received reply.

    Both failure modes mean the peer does not speak this protocol, so they
    are raised rather than mapped onto a default reply.

    Raises:
        EmptyReply: If the message is empty
        InvalidStatusByte: If the first byte is not a status flag
    """
    if not message:
        raise EmptyReply()

    first = message[0]
    if first == chr(Status.OK):
        return Reply.success(message[1:])
    if first == chr(Status.ERR):
        return Reply.failure(message[1:])
    raise InvalidStatusByte(first.encode('utf-8')[0])
