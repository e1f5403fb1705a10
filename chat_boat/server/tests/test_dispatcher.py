"""
Command Dispatcher Unit Tests

Tests command validation and the session state machine without a network.
"""

import unittest

from ...common.credentials import CredentialStore
from ...common.protocol import Reply
from ...common.session import Session, SessionState
from ..dispatcher import CommandDispatcher


class TestCommandDispatcher(unittest.TestCase):
    """Test cases for CommandDispatcher"""

    def setUp(self):
        """Set up a dispatcher with one known user and a fresh session"""
        self.store = CredentialStore("unused.txt", {"alice": "x1y2"})
        self.dispatcher = CommandDispatcher(self.store)
        self.session = Session()

    def dispatch(self, *parts):
        return self.dispatcher.dispatch(list(parts), self.session)

    def login_alice(self):
        reply, drop = self.dispatch("login", "alice", "x1y2")
        self.assertEqual(reply, Reply.success("alice joined"))
        self.assertFalse(drop)

    def test_unknown_command(self):
        reply, drop = self.dispatch("shout", "hi")
        self.assertEqual(reply, Reply.failure("command not recognized: shout"))
        self.assertFalse(drop)

    def test_argument_count(self):
        """Test that every command checks its argument count"""
        test_cases = [
            (["newuser", "bob"], "expected 2 arguments but got 1"),
            (["login", "alice", "x1y2", "extra"], "expected 2 arguments but got 3"),
            (["logout", "now"], "expected 0 arguments but got 1"),
            (["send"], "expected 1 arguments but got 0"),
        ]

        for parts, text in test_cases:
            with self.subTest(parts=parts):
                reply, drop = self.dispatch(*parts)
                self.assertEqual(reply, Reply.failure(text))
                self.assertFalse(drop)
                self.assertEqual(self.session.state, SessionState.ANONYMOUS)

    def test_newuser(self):
        """Test account creation"""
        reply, drop = self.dispatch("newuser", "bob", "secret")
        self.assertEqual(reply, Reply.success("user account created: bob"))
        self.assertFalse(drop)
        self.assertEqual(self.store.lookup("bob"), "secret")
        self.assertEqual(self.session.state, SessionState.ANONYMOUS)

        reply, _ = self.dispatch("newuser", "bob", "other")
        self.assertEqual(reply, Reply.failure("user account already exists: bob"))
        self.assertEqual(self.store.lookup("bob"), "secret")

    def test_newuser_validation(self):
        """Test that bad names and passwords are refused"""
        reply, _ = self.dispatch("newuser", "bo", "secret")
        self.assertFalse(reply.ok)
        reply, _ = self.dispatch("newuser", "bob", "waytoolongpassword")
        self.assertFalse(reply.ok)
        self.assertNotIn("bob", self.store)

    def test_newuser_while_logged_in(self):
        self.login_alice()
        reply, _ = self.dispatch("newuser", "bob", "secret")
        self.assertEqual(reply, Reply.failure("must be logged out"))
        self.assertNotIn("bob", self.store)
        self.assertEqual(self.session.username, "alice")

    def test_login(self):
        """Test login success and the session it leaves behind"""
        self.login_alice()
        self.assertEqual(self.session.state, SessionState.AUTHENTICATED)
        self.assertEqual(self.session.username, "alice")

    def test_login_wrong_password(self):
        reply, _ = self.dispatch("login", "alice", "wrong")
        self.assertEqual(reply, Reply.failure("incorrect username or password"))
        self.assertEqual(self.session.state, SessionState.ANONYMOUS)

        reply, _ = self.dispatch("login", "nobody", "x1y2")
        self.assertEqual(reply, Reply.failure("incorrect username or password"))

    def test_login_twice(self):
        """Test that logging in again is refused whatever the credentials"""
        self.store.insert("bob", "secret")
        self.login_alice()

        for credentials in [("alice", "x1y2"), ("bob", "secret"), ("bob", "wrong")]:
            with self.subTest(credentials=credentials):
                reply, _ = self.dispatch("login", *credentials)
                self.assertEqual(reply, Reply.failure("already logged in"))
                self.assertEqual(self.session.username, "alice")

    def test_logout(self):
        """Test that logout answers, resets the session and ends the connection"""
        self.login_alice()
        reply, drop = self.dispatch("logout")
        self.assertEqual(reply, Reply.success("alice left"))
        self.assertTrue(drop)
        self.assertEqual(self.session.state, SessionState.ANONYMOUS)

    def test_logout_keep_open(self):
        """Test the mode that keeps the connection after logout"""
        self.dispatcher = CommandDispatcher(self.store, disconnect_on_logout=False)
        self.login_alice()
        reply, drop = self.dispatch("logout")
        self.assertTrue(reply.ok)
        self.assertFalse(drop)

    def test_logout_anonymous(self):
        reply, drop = self.dispatch("logout")
        self.assertEqual(reply, Reply.failure("must be logged in"))
        self.assertFalse(drop)

    def test_send(self):
        self.login_alice()
        reply, drop = self.dispatch("send", "hello room")
        self.assertEqual(reply, Reply.success("alice: hello room"))
        self.assertFalse(drop)

    def test_send_anonymous(self):
        reply, _ = self.dispatch("send", "hello room")
        self.assertEqual(reply, Reply.failure("must be logged in"))

    def test_send_too_long(self):
        self.login_alice()
        reply, _ = self.dispatch("send", "x" * 257)
        self.assertFalse(reply.ok)


if __name__ == '__main__':
    unittest.main()
