"""
Signal Handling

Adapter between process signals and the stop event the client and server
loops poll. The loops only read the event; installing handlers is left to the
entry points.
"""

import logging
import signal
import threading
from typing import Iterable


def install_stop_handler(stop_event: threading.Event,
                         signums: Iterable[int] = (signal.SIGINT, signal.SIGTERM)):
    """
    Set stop_event when any of the given signals arrives.

    Must be called from the main thread.
    """
    def handler(sig, frame):
        logging.debug(f"Received signal {sig}, requesting stop")
        stop_event.set()

    for signum in signums:
        signal.signal(signum, handler)
