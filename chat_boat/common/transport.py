"""
Framed Transport

Turns a TCP stream into whole-message send/receive operations. Every frame is
UTF-8 text followed by a single NUL terminator and is at most MSG_MAX bytes
long, terminator included. The same transport class serves both the client
connection and connections accepted by the server.
"""

import logging
import select
import socket
from typing import Optional, Tuple

from .constants import LISTEN_BACKLOG, MSG_MAX, TERMINATOR
from .errors import FrameEncodingError, Interrupted, MessageTooLarge, TransportError
from .protocol import frame_size


def _poll(sock: socket.socket) -> bool:
    """Zero-timeout readability check on a socket."""
    # select() retries EINTR on its own (PEP 475) unless a signal handler
    # raises, so Interrupted only reaches callers from handlers that do.
    try:
        readable, _, _ = select.select([sock], [], [], 0)
    except InterruptedError as e:
        raise Interrupted(str(e)) from e
    except (OSError, ValueError) as e:
        raise TransportError(f"failed to poll: {e}") from e
    return bool(readable)


class FramedTransport:
    """
    A connected socket speaking NUL-terminated frames.

    The socket is owned by the transport and released exactly once, by
    close() or by leaving a with block.

    Attributes:
        max_bytes: Maximum frame size in bytes, terminator included
        peer: Address of the remote end, for logging
    """

    def __init__(self, sock: socket.socket, max_bytes: int = MSG_MAX):
        self._sock: Optional[socket.socket] = sock
        self.max_bytes = max_bytes
        try:
            self.peer = sock.getpeername()
        except OSError:
            self.peer = None

    def __enter__(self) -> "FramedTransport":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __repr__(self):
        return f"FramedTransport(peer={self.peer}, closed={self.closed})"

    @property
    def closed(self) -> bool:
        return self._sock is None

    def fileno(self) -> int:
        return self._socket().fileno()

    def _socket(self) -> socket.socket:
        if self._sock is None:
            raise TransportError("connection is closed")
        return self._sock

    def send(self, message: str):
        """
        Send one message as a single frame.

        Raises:
            FrameEncodingError: If the message embeds the terminator
            MessageTooLarge: If the frame would exceed max_bytes
            TransportError: If the write fails
        """
        if TERMINATOR.decode('ascii') in message:
            raise FrameEncodingError("message contains the frame terminator")

        size = frame_size(message)
        if size > self.max_bytes:
            raise MessageTooLarge(size, self.max_bytes)

        sock = self._socket()
        frame = message.encode('utf-8') + TERMINATOR
        try:
            sock.sendall(frame)
        except OSError as e:
            raise TransportError(f"failed to send: {e}") from e
        logging.debug(f"Sent {len(frame)} byte frame to {self.peer}")

    def receive(self, max_bytes: Optional[int] = None) -> str:
        """
        Receive one frame.

        Reads at most max_bytes bytes, the size of the largest frame send()
        accepts, terminator included. A read that fills max_bytes without a
        terminator is an oversized frame and is rejected. Anything after the
        first terminator is discarded.

        Raises:
            TransportError: If the read fails or the peer closed the connection
            FrameEncodingError: If no terminator was read or the text is not UTF-8
        """
        if max_bytes is None:
            max_bytes = self.max_bytes
        sock = self._socket()

        try:
            data = sock.recv(max_bytes)
        except OSError as e:
            raise TransportError(f"failed to receive: {e}") from e
        if not data:
            raise TransportError("connection closed by peer")

        end = data.find(TERMINATOR)
        if end < 0:
            raise FrameEncodingError(f"frame missing terminator ({len(data)} bytes read)")

        try:
            message = data[:end].decode('utf-8')
        except UnicodeDecodeError as e:
            raise FrameEncodingError(f"frame is not valid UTF-8: {e}") from e

        logging.debug(f"Received {end + 1} byte frame from {self.peer}")
        return message

    def poll_readable(self) -> bool:
        """
        Check without blocking whether a read would return data now.

        A peer that hung up also counts as readable; the following receive()
        reports it.

        Raises:
            Interrupted: If a signal interrupted the poll
            TransportError: On any other poll failure
        """
        return _poll(self._socket())

    def close(self):
        """Close the connection. Safe to call more than once."""
        sock, self._sock = self._sock, None
        if sock is None:
            return
        logging.debug(f"Closing connection to {self.peer}")
        try:
            sock.close()
        except OSError as e:
            logging.warning(f"Error closing connection to {self.peer}: {e}")


def connect(host: str, port: int, max_bytes: int = MSG_MAX) -> FramedTransport:
    """
    Open a client connection.

    Raises:
        TransportError: If the server cannot be reached
    """
    try:
        sock = socket.create_connection((host, port))
    except OSError as e:
        raise TransportError(f"failed to connect to {host}:{port}: {e}") from e
    return FramedTransport(sock, max_bytes)


class Listener:
    """
    The server's listening endpoint.

    Pending connections are only taken off the queue by accept(); anything not
    accepted waits in the listen backlog.
    """

    def __init__(self, host: str, port: int, backlog: int = LISTEN_BACKLOG,
                 max_bytes: int = MSG_MAX):
        self.max_bytes = max_bytes
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((host, port))
            sock.listen(backlog)
        except OSError as e:
            sock.close()
            raise TransportError(f"failed to listen on {host}:{port}: {e}") from e
        self._sock: Optional[socket.socket] = sock
        self.address: Tuple[str, int] = sock.getsockname()
        logging.debug(f"Listening on {self.address[0]}:{self.address[1]}")

    def __enter__(self) -> "Listener":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def _socket(self) -> socket.socket:
        if self._sock is None:
            raise TransportError("listener is closed")
        return self._sock

    def poll_acceptable(self) -> bool:
        """Check without blocking whether a connection is waiting."""
        return _poll(self._socket())

    def accept(self) -> FramedTransport:
        """
        Accept one pending connection.

        Raises:
            TransportError: If accepting fails
        """
        try:
            conn, address = self._socket().accept()
        except OSError as e:
            raise TransportError(f"failed to accept: {e}") from e
        conn.setblocking(True)
        logging.debug(f"Accepted connection from {address}")
        return FramedTransport(conn, self.max_bytes)

    def close(self):
        sock, self._sock = self._sock, None
        if sock is not None:
            sock.close()
