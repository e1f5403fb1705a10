"""
Tests for the stop signal adapter
"""

import os
import signal
import threading
import unittest

from ..signals import install_stop_handler


@unittest.skipUnless(hasattr(signal, "SIGUSR1"), "requires SIGUSR1")
class TestStopHandler(unittest.TestCase):

    def setUp(self):
        self.previous = signal.getsignal(signal.SIGUSR1)

    def tearDown(self):
        signal.signal(signal.SIGUSR1, self.previous)

    def test_signal_sets_event(self):
        """Test that the handler only flips the stop event"""
        stop_event = threading.Event()
        install_stop_handler(stop_event, [signal.SIGUSR1])
        self.assertFalse(stop_event.is_set())

        os.kill(os.getpid(), signal.SIGUSR1)
        self.assertTrue(stop_event.wait(1.0))


if __name__ == '__main__':
    unittest.main()
