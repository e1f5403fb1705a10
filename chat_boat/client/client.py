"""
Chat Client

Command invoker for the client side: encodes commands, sends them over the
framed transport and waits for the single reply each command gets. Requests
are strictly sequential, never pipelined.
"""

import logging
from typing import Optional, Sequence

from ..common import protocol
from ..common.constants import CHAT_PORT, DEFAULT_HOST
from ..common.errors import TransportError
from ..common.transport import FramedTransport, connect


class ChatClient:
    """Client connection to a chat server"""

    def __init__(self, host: str = DEFAULT_HOST, port: int = CHAT_PORT):
        self.host = host
        self.port = port
        self.transport: Optional[FramedTransport] = None
        logging.debug(f"Initialized client for {host}:{port}")

    def __enter__(self) -> "ChatClient":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.disconnect()

    @property
    def connected(self) -> bool:
        return self.transport is not None

    def connect(self):
        """
        Connect to the chat server.

        Raises:
            TransportError: If the server cannot be reached
        """
        self.transport = connect(self.host, self.port)
        logging.info(f"Connected to server at {self.host}:{self.port}")

    def disconnect(self):
        """Close the connection. Safe to call when not connected."""
        transport, self.transport = self.transport, None
        if transport is not None:
            transport.close()

    def _transport(self) -> FramedTransport:
        if self.transport is None:
            raise TransportError("not connected to server")
        return self.transport

    def send_command(self, parts: Sequence[str]):
        """
        Send one command.

        Args:
            parts: Command name followed by its arguments

        Raises:
            MessageTooLarge: If the command does not fit in one frame
            TransportError: If sending fails
        """
        message = protocol.encode_command(parts)
        logging.debug(f"Sending command {parts[0]} with {len(parts) - 1} arguments")
        self._transport().send(message)

    def receive_reply(self) -> protocol.Reply:
        """
        Wait for the reply to the last command.

        Raises:
            TransportError: If receiving fails or the server hung up
            FrameEncodingError: If the reply frame is malformed
            ProtocolViolation: If the reply has no valid status byte
        """
        reply = protocol.decode_reply(self._transport().receive())
        logging.debug(f"Received reply: ok={reply.ok}, text={reply.text!r}")
        return reply

    def request(self, parts: Sequence[str]) -> protocol.Reply:
        """Send a command and return its reply."""
        self.send_command(parts)
        return self.receive_reply()
