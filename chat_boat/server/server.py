"""
Chat Server

Single-threaded polling loop that owns the listening endpoint and at most one
admitted connection. Each pass of the loop:

1. Stops if the stop event is set
2. Admits a pending connection when none is admitted
3. Services at most one command from the admitted connection
4. Sleeps for the poll interval

A second client stays in the listen backlog until the admitted connection
ends. Connection errors drop the connection but never stop the loop.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..common.constants import POLL_INTERVAL
from ..common.errors import (
    FrameEncodingError, Interrupted, MessageTooLarge, ProtocolViolation,
    TransportError,
)
from ..common.protocol import Reply, decode_command, encode_reply
from ..common.session import Session
from ..common.transport import FramedTransport, Listener
from .dispatcher import CommandDispatcher


@dataclass
class ActiveConnection:
    """The admitted connection and its session."""
    transport: FramedTransport
    session: Session = field(default_factory=Session)


class ChatServer:
    """
    Serves one connection at a time until asked to stop.

    Attributes:
        listener: Listening endpoint, owned by the server
        dispatcher: Executes decoded commands
        stop_event: Checked once per loop pass; set it to stop the server
        poll_interval: Seconds to sleep between passes
        connection: The admitted connection, if any
    """

    def __init__(self, listener: Listener, dispatcher: CommandDispatcher,
                 stop_event: Optional[threading.Event] = None,
                 poll_interval: float = POLL_INTERVAL):
        self.listener = listener
        self.dispatcher = dispatcher
        self.stop_event = stop_event if stop_event is not None else threading.Event()
        self.poll_interval = poll_interval
        self.connection: Optional[ActiveConnection] = None

    @property
    def server_address(self) -> Tuple[str, int]:
        return self.listener.address

    def __enter__(self) -> "ChatServer":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def serve_forever(self):
        """Run the polling loop until the stop event is set."""
        host, port = self.server_address
        logging.info(f"Chat server listening on {host}:{port}")

        try:
            while not self.stop_event.is_set():
                try:
                    if self.connection is None:
                        self._admit()
                    if self.connection is not None:
                        self._service()
                except Interrupted:
                    logging.debug("Poll interrupted, retrying")
                self.stop_event.wait(self.poll_interval)
        finally:
            self._drop("server shutting down")
        logging.info("Chat server stopped")

    def shutdown(self):
        """Ask the loop to stop at the start of its next pass."""
        self.stop_event.set()

    def close(self):
        self._drop("server closed")
        self.listener.close()

    def _admit(self):
        if not self.listener.poll_acceptable():
            return
        try:
            transport = self.listener.accept()
        except TransportError as e:
            logging.warning(f"Failed to admit connection: {e}")
            return
        self.connection = ActiveConnection(transport)
        logging.info(f"New client connection from {transport.peer}")

    def _drop(self, reason: str):
        connection, self.connection = self.connection, None
        if connection is None:
            return
        logging.info(f"Client connection from {connection.transport.peer} closed: {reason}")
        connection.transport.close()

    def _service(self):
        """Run one command/reply exchange if the client sent anything."""
        transport = self.connection.transport
        try:
            if not transport.poll_readable():
                return
            message = transport.receive()
        except (TransportError, FrameEncodingError) as e:
            self._drop(str(e))
            return

        try:
            parts = decode_command(message)
        except ProtocolViolation as e:
            logging.error(f"Protocol violation from {transport.peer} (should never happen): {e}")
            reply, drop = Reply.failure(str(e)), False
        else:
            reply, drop = self.dispatcher.dispatch(parts, self.connection.session)

        try:
            self._send_reply(transport, reply)
        except TransportError as e:
            self._drop(str(e))
            return

        if drop:
            self._drop("logged out")

    def _send_reply(self, transport: FramedTransport, reply: Reply):
        try:
            transport.send(encode_reply(reply))
        except MessageTooLarge as e:
            logging.warning(f"Reply to {transport.peer} rejected: {e}")
            transport.send(encode_reply(Reply.failure(str(e))))
