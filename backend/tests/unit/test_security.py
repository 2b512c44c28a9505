"""
Unit tests for password hashing and API tokens.
"""

from datetime import timedelta

import pytest

from scheduler.core.security import (
    create_access_token,
    create_user_token,
    generate_hash,
    get_user_from_token,
    hash_password,
    verify_password,
)


@pytest.mark.unit
@pytest.mark.security
class TestPasswords:
    def test_hash_embeds_salt(self):
        first = hash_password("correct horse")
        second = hash_password("correct horse")

        assert first != second
        assert verify_password("correct horse", first)
        assert verify_password("correct horse", second)

    def test_wrong_password(self):
        assert not verify_password("wrong", hash_password("correct horse"))

    def test_unusable_hash(self):
        assert not verify_password("anything", "not-a-bcrypt-hash")
        assert not verify_password("anything", None)
        assert not verify_password("", hash_password("x" * 8))


@pytest.mark.unit
@pytest.mark.security
class TestTokens:
    def test_user_token_round_trip(self):
        token = create_user_token(3, "admin", "admin")

        assert get_user_from_token(token) == {
            "user_id": 3,
            "username": "admin",
            "role": "admin",
        }

    def test_expired_token(self):
        token = create_access_token(
            {"sub": "3", "username": "admin", "role": "admin"},
            expires_delta=timedelta(seconds=-1),
        )
        assert get_user_from_token(token) is None

    def test_garbage_token(self):
        assert get_user_from_token("not.a.token") is None

    def test_generate_hash(self):
        assert generate_hash() != generate_hash()
        assert len(generate_hash()) >= 16
