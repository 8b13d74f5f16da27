"""Unit tests for app.core.security: bcrypt hashing, access tokens and reset tokens."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt

from app.core.config import get_settings
from app.core.security import (
    create_access_token,
    create_reset_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestPasswordHashing(unittest.TestCase):
    """hash_password never returns the plaintext; verify_password accepts only the hashed password."""

    def test_hash_is_not_plaintext(self) -> None:
        hashed = hash_password("P1-secret")
        self.assertNotEqual(hashed, "P1-secret")
        self.assertTrue(hashed.startswith("$2"))

    def test_hash_is_salted(self) -> None:
        self.assertNotEqual(hash_password("same"), hash_password("same"))

    def test_verify_matches_hashed_password(self) -> None:
        hashed = hash_password("P1-secret")
        self.assertTrue(verify_password("P1-secret", hashed))
        self.assertFalse(verify_password("P2-secret", hashed))

    def test_verify_malformed_hash_is_false(self) -> None:
        self.assertFalse(verify_password("anything", "not-a-bcrypt-hash"))
        self.assertFalse(verify_password("anything", None))  # type: ignore[arg-type]


class TestAccessToken(unittest.TestCase):
    """create_access_token / decode_access_token round trip, expiry and tampering."""

    def test_round_trip_carries_subject_and_role(self) -> None:
        token = create_access_token(sub=42, role="admin")
        payload = decode_access_token(token)
        self.assertEqual(payload["sub"], "42")
        self.assertEqual(payload["role"], "admin")

    def test_default_lifetime_is_configured_minutes(self) -> None:
        payload = decode_access_token(create_access_token(sub=1, role="user"))
        lifetime = payload["exp"] - payload["iat"]
        self.assertEqual(lifetime, get_settings().JWT_EXPIRE_MINUTES * 60)

    def test_expired_token_fails(self) -> None:
        token = create_access_token(sub=1, role="user", expires_delta=timedelta(seconds=-1))
        with self.assertRaises(jwt.ExpiredSignatureError):
            decode_access_token(token)

    def test_tampered_token_fails(self) -> None:
        token = create_access_token(sub=1, role="user")
        header, payload, signature = token.split(".")
        forged = jwt.encode({"sub": "1", "role": "admin"}, "other-secret", algorithm="HS256")
        tampered = ".".join([header, forged.split(".")[1], signature])
        with self.assertRaises(jwt.PyJWTError):
            decode_access_token(tampered)

    def test_token_signed_with_other_secret_fails(self) -> None:
        token = jwt.encode(
            {"sub": "1", "role": "admin", "exp": datetime.now(UTC) + timedelta(hours=1)},
            "not-the-configured-secret",
            algorithm="HS256",
        )
        with self.assertRaises(jwt.InvalidSignatureError):
            decode_access_token(token)


class TestResetToken(unittest.TestCase):
    """create_reset_token signs the user id and the persisted expiration."""

    def test_embeds_subject_and_expiration(self) -> None:
        expires_at = datetime.now(UTC).replace(microsecond=0) + timedelta(hours=5)
        token = create_reset_token(7, expires_at)
        payload = decode_access_token(token)
        self.assertEqual(payload["sub"], "7")
        self.assertNotIn("email", payload)
        self.assertEqual(payload["exp"], int(expires_at.timestamp()))

    def test_tokens_issued_together_differ(self) -> None:
        expires_at = datetime.now(UTC) + timedelta(hours=5)
        self.assertNotEqual(
            create_reset_token(7, expires_at),
            create_reset_token(7, expires_at),
        )


if __name__ == "__main__":
    unittest.main()
