"""Unit tests for app.services.password_reset: issue, overwrite, expiry and clear."""

import unittest
from datetime import UTC, datetime, timedelta

from app.core.config import get_settings
from app.models import User
from app.services.password_reset import (
    clear_reset_token,
    find_user_by_reset_token,
    issue_reset_token,
)
from support import create_user, make_session_factory


class ResetLifecycleTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.session_factory = make_session_factory()
        self.user_id = create_user(self.session_factory, email="a@x.com")
        self.db = self.session_factory()
        self.user = self.db.get(User, self.user_id)
        self.settings = get_settings()

    def tearDown(self) -> None:
        self.db.close()


class TestIssueResetToken(ResetLifecycleTestCase):
    """issue_reset_token sets both fields; expiration is now + RESET_TOKEN_EXPIRE_MINUTES."""

    def test_sets_token_and_expiration(self) -> None:
        now = datetime.now(UTC)
        token = issue_reset_token(self.user, self.settings, now=now)
        self.assertEqual(self.user.reset_token, token)
        self.assertEqual(
            self.user.reset_token_expiration,
            now + timedelta(minutes=self.settings.RESET_TOKEN_EXPIRE_MINUTES),
        )

    def test_default_window_is_five_hours(self) -> None:
        self.assertEqual(self.settings.RESET_TOKEN_EXPIRE_MINUTES, 300)

    def test_reissue_overwrites_previous_token(self) -> None:
        first = issue_reset_token(self.user, self.settings)
        self.db.commit()
        second = issue_reset_token(self.user, self.settings)
        self.db.commit()
        self.assertNotEqual(first, second)
        self.assertIsNone(find_user_by_reset_token(self.db, first))
        found = find_user_by_reset_token(self.db, second)
        self.assertIsNotNone(found)
        self.assertEqual(found.id, self.user_id)


    def test_token_fits_column_for_any_email(self) -> None:
        column_length = User.reset_token.type.length
        for email in ("a" * 249 + "@x.com", "用" * 50 + "@example.com", "ü" * 243 + "@example.com"):
            with self.subTest(email=email[:12]):
                user_id = create_user(self.session_factory, email=email)
                user = self.db.get(User, user_id)
                token = issue_reset_token(user, self.settings)
                self.assertLessEqual(len(token), column_length)


class TestFindUserByResetToken(ResetLifecycleTestCase):
    """Lookup matches only a stored token whose persisted expiration is in the future."""

    def test_valid_token_found(self) -> None:
        token = issue_reset_token(self.user, self.settings)
        self.db.commit()
        self.assertEqual(find_user_by_reset_token(self.db, token).id, self.user_id)

    def test_expired_token_not_found(self) -> None:
        issued_at = datetime.now(UTC) - timedelta(hours=6)
        token = issue_reset_token(self.user, self.settings, now=issued_at)
        self.db.commit()
        self.assertIsNone(find_user_by_reset_token(self.db, token))

    def test_expiry_is_checked_against_given_now(self) -> None:
        now = datetime.now(UTC)
        token = issue_reset_token(self.user, self.settings, now=now)
        self.db.commit()
        later = now + timedelta(minutes=self.settings.RESET_TOKEN_EXPIRE_MINUTES, seconds=1)
        self.assertIsNone(find_user_by_reset_token(self.db, token, now=later))
        self.assertIsNotNone(find_user_by_reset_token(self.db, token, now=now))

    def test_unknown_or_empty_token_not_found(self) -> None:
        issue_reset_token(self.user, self.settings)
        self.db.commit()
        self.assertIsNone(find_user_by_reset_token(self.db, "not-a-token"))
        self.assertIsNone(find_user_by_reset_token(self.db, ""))


class TestClearResetToken(ResetLifecycleTestCase):
    def test_clears_both_fields(self) -> None:
        token = issue_reset_token(self.user, self.settings)
        self.db.commit()
        clear_reset_token(self.user)
        self.db.commit()
        self.db.refresh(self.user)
        self.assertIsNone(self.user.reset_token)
        self.assertIsNone(self.user.reset_token_expiration)
        self.assertIsNone(find_user_by_reset_token(self.db, token))


if __name__ == "__main__":
    unittest.main()
