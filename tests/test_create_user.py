"""Tests for the create_user CLI (admin bootstrap)."""

import io
import unittest
from contextlib import contextmanager, redirect_stderr, redirect_stdout
from unittest.mock import patch

from app.scripts.create_user import main
from app.services.user_store import UserStore
from tests.util import temporary_db


class TestCreateUserCli(unittest.TestCase):
    def setUp(self) -> None:
        self._db_cm = temporary_db()
        self.session = self._db_cm.__enter__()

        @contextmanager
        def scope():
            yield self.session

        patcher = patch("app.scripts.create_user.session_scope", scope)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self) -> None:
        self._db_cm.__exit__(None, None, None)

    def _run(self, *argv: str) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_creates_admin(self) -> None:
        code, out, _ = self._run("root", "root@example.com", "s3cret", "--admin")
        self.assertEqual(code, 0)
        self.assertIn("USER, ADMIN", out)
        self.assertEqual(UserStore(self.session).find_by_username("root").roles, ["USER", "ADMIN"])

    def test_default_role_is_user(self) -> None:
        code, out, _ = self._run("alice", "alice@example.com", "pw123")
        self.assertEqual(code, 0)
        self.assertIn("roles USER.", out)

    def test_duplicate_username_fails(self) -> None:
        self._run("alice", "alice@example.com", "pw123")
        code, _, err = self._run("alice", "other@example.com", "pw123")
        self.assertEqual(code, 1)
        self.assertIn("Username is already taken", err)

    def test_invalid_email_fails(self) -> None:
        for email in ("not-an-email", "bob@", "@example.com", "bob@@example.com"):
            with self.subTest(email=email):
                code, _, err = self._run("bob", email, "pw123")
                self.assertEqual(code, 1)
                self.assertIn("Invalid email address", err)
        self.assertFalse(UserStore(self.session).exists_by_username("bob"))

    def test_email_stored_normalized(self) -> None:
        code, _, _ = self._run("carol", "carol@EXAMPLE.com", "pw123")
        self.assertEqual(code, 0)
        self.assertEqual(UserStore(self.session).find_by_username("carol").email, "carol@example.com")


if __name__ == "__main__":
    unittest.main()
