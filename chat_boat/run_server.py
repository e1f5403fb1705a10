"""
Chat Server Runner

Starts the Chat Boat server.

Usage:
    python -m chat_boat.run_server [--host HOST] [--port PORT] [--users-db PATH]
                                   [--create-db] [--keep-open-on-logout] [--debug]

The users database is written back when the server stops, whether it stops
on Ctrl+C, SIGTERM or an error.
"""

import argparse
import logging
import sys
import threading

from chat_boat.common.banner import print_server_banner
from chat_boat.common.constants import CHAT_PORT, DEFAULT_HOST
from chat_boat.common.credentials import CredentialStore
from chat_boat.common.errors import ChatError
from chat_boat.common.signals import install_stop_handler
from chat_boat.common.transport import Listener
from chat_boat.server.dispatcher import CommandDispatcher
from chat_boat.server.server import ChatServer


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Chat Boat server")
    parser.add_argument("--host", default=DEFAULT_HOST, help="Server host")
    parser.add_argument("--port", type=int, default=CHAT_PORT, help="Server port")
    parser.add_argument("--users-db", default="users.txt", help="Path to the users database file")
    parser.add_argument(
        "--create-db",
        action="store_true",
        help="Start with no users if the users database file does not exist"
    )
    parser.add_argument(
        "--keep-open-on-logout",
        action="store_true",
        help="Keep the connection open after a client logs out"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point for the chat server"""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    stop_event = threading.Event()
    install_stop_handler(stop_event)

    try:
        with CredentialStore.load(args.users_db, create_missing=args.create_db) as store:
            dispatcher = CommandDispatcher(
                store,
                disconnect_on_logout=not args.keep_open_on_logout
            )
            with ChatServer(Listener(args.host, args.port), dispatcher, stop_event) as server:
                print_server_banner()
                server.serve_forever()
    except ChatError as e:
        logging.error(f"Error running server: {e}")
        sys.exit(1)
    except OSError as e:
        logging.error(f"Error saving users database: {e}")
        sys.exit(1)

    logging.info("Server shutdown complete")


if __name__ == "__main__":
    main()
