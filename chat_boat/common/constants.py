"""
Protocol Constants

Values shared by the client and the server. The maximum frame size is derived
from the largest reply the server can produce: a broadcast of the longest
message by the user with the longest name.
"""

# Network
DEFAULT_HOST = "localhost"
CHAT_PORT = 10087
LISTEN_BACKLOG = 1

# Seconds to sleep between polling passes when idle
POLL_INTERVAL = 0.025

# Framing
COMMAND_SEP = "\x02"
TERMINATOR = b"\x00"

# Account and message limits (characters)
USERNAME_MIN = 3
USERNAME_MAX = 32
PASSWORD_MIN = 4
PASSWORD_MAX = 8
MESSAGE_MIN = 1
MESSAGE_MAX = 256

# status byte + "<user>: <message>" + terminator
MSG_MAX = 1 + USERNAME_MAX + len(": ") + MESSAGE_MAX + len(TERMINATOR)
