"""
Chat Error Types

Exceptions raised by the transport, the wire codec and the credential store.
Validation failures (bad arguments, wrong credentials, illegal session
transitions) are not exceptions; they travel back to the client as error
replies.
"""


class ChatError(Exception):
    """Base class for all chat errors."""


class TransportError(ChatError):
    """
    An I/O failure on a connection, including a peer that hung up.

    Always fatal to the connection it happened on.
    """


class Interrupted(ChatError):
    """A poll was interrupted by a signal. Retry on the next loop pass."""


class FrameEncodingError(ChatError, ValueError):
    """A frame is not valid UTF-8, lacks its terminator or embeds one."""


class MessageTooLarge(ChatError, ValueError):
    """
    An outgoing frame exceeds the maximum message size.

    Raised before anything is written to the connection.

    Attributes:
        size: Encoded size of the rejected frame, terminator included
        limit: The maximum frame size
    """

    def __init__(self, size: int, limit: int):
        super().__init__(f"message too long: {size} > {limit}")
        self.size = size
        self.limit = limit


class ProtocolViolation(ChatError, ValueError):
    """A peer sent something a conforming implementation never produces."""


class EmptyReply(ProtocolViolation):
    def __init__(self):
        super().__init__("empty reply")


class InvalidStatusByte(ProtocolViolation):
    """A reply started with a byte that is neither status flag."""

    def __init__(self, byte: int):
        super().__init__(f"invalid reply status byte: 0x{byte:02x}")
        self.byte = byte


class EmptyCommand(ProtocolViolation):
    def __init__(self):
        super().__init__("empty command")


class CredentialStoreError(ChatError):
    """The users database file is missing or malformed."""
