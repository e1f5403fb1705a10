"""
Chat Client Runner

Starts the interactive Chat Boat client.
"""

import argparse
import logging
import sys
import threading

from chat_boat.client.client import ChatClient
from chat_boat.client.repl import Repl
from chat_boat.common.banner import print_client_banner
from chat_boat.common.constants import CHAT_PORT, DEFAULT_HOST
from chat_boat.common.errors import TransportError
from chat_boat.common.signals import install_stop_handler


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Chat Boat client")
    parser.add_argument("--host", default=DEFAULT_HOST, help="Server host")
    parser.add_argument("--port", type=int, default=CHAT_PORT, help="Server port")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    stop_event = threading.Event()
    install_stop_handler(stop_event)

    print_client_banner()

    client = ChatClient(args.host, args.port)
    try:
        client.connect()
    except TransportError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        Repl(client, stop_event).main_loop()
    finally:
        client.disconnect()
    print("\nShutting down client...")


if __name__ == "__main__":
    main()
