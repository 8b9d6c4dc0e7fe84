import api_case  # noqa: F401  (test settings)

import unittest

from utils.security import create_session_token, hash_password, read_session_token, verify_password


class PasswordHashTests(unittest.TestCase):
    def test_hash_and_verify(self):
        stored = hash_password("Secret#123")
        self.assertTrue(stored.startswith("pbkdf2_sha256$"))
        self.assertTrue(verify_password("Secret#123", stored))
        self.assertFalse(verify_password("secret#123", stored))

    def test_salted(self):
        self.assertNotEqual(hash_password("Secret#123"), hash_password("Secret#123"))

    def test_malformed_hash(self):
        self.assertFalse(verify_password("anything", "not-a-hash"))
        self.assertFalse(verify_password("anything", "md5$1$00$00"))
        self.assertFalse(verify_password("anything", "pbkdf2_sha256$1000$not-hex$00"))
        self.assertFalse(verify_password("anything", "pbkdf2_sha256$many$00ff$00"))
        self.assertFalse(verify_password("anything", "pbkdf2_sha256$0$00ff$00"))


class SessionTokenTests(unittest.TestCase):
    def test_round_trip(self):
        self.assertEqual(read_session_token(create_session_token(42)), 42)

    def test_tampered_user_id(self):
        _, expires, signature = create_session_token(42).split(".")
        self.assertIsNone(read_session_token(f"43.{expires}.{signature}"))

    def test_expired(self):
        self.assertIsNone(read_session_token(create_session_token(42, ttl_minutes=-1)))

    def test_garbage(self):
        self.assertIsNone(read_session_token("garbage"))
        self.assertIsNone(read_session_token(""))


if __name__ == "__main__":
    unittest.main()
