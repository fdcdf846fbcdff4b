import unittest
from datetime import timedelta
from uuid import uuid4

from jose import jwt

from app.core.config import settings
from app.core.security import (
    create_access_token,
    hash_password,
    resolve_token_subject,
    verify_password,
)


class TestPasswords(unittest.TestCase):
    def test_hash_round_trip(self) -> None:
        hashed = hash_password("secret123")
        self.assertNotEqual(hashed, "secret123")
        self.assertTrue(verify_password("secret123", hashed))
        self.assertFalse(verify_password("secret124", hashed))


class TestAccessTokens(unittest.TestCase):
    def test_subject_resolves(self) -> None:
        user_id = uuid4()
        self.assertEqual(resolve_token_subject(create_access_token(user_id)), user_id)

    def test_expired_token(self) -> None:
        token = create_access_token(uuid4(), expires_delta=timedelta(minutes=-5))
        self.assertIsNone(resolve_token_subject(token))

    def test_wrong_signature(self) -> None:
        token = jwt.encode({"sub": str(uuid4())}, "other-secret", algorithm=settings.ALGORITHM)
        self.assertIsNone(resolve_token_subject(token))

    def test_non_uuid_subject(self) -> None:
        token = jwt.encode({"sub": "42"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
        self.assertIsNone(resolve_token_subject(token))

    def test_missing_subject(self) -> None:
        token = jwt.encode({"foo": "bar"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
        self.assertIsNone(resolve_token_subject(token))
