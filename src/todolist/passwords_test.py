"""
Unit tests for password hashing.

Run with: pytest src/todolist/passwords_test.py -v
"""

import pytest

from todolist.passwords import check_password, hash_password


class TestHashPassword:
    def test_hash_is_not_plaintext(self):
        hashed = hash_password("secret", rounds=4)

        assert hashed != "secret"
        assert hashed.startswith("$2")

    def test_salted(self):
        assert hash_password("secret", rounds=4) != hash_password("secret", rounds=4)


class TestCheckPassword:
    @pytest.fixture
    def hashed(self):
        return hash_password("secret", rounds=4)

    def test_match(self, hashed):
        assert check_password("secret", hashed) is True

    @pytest.mark.parametrize("attempt", ["wrongpass", "", "Secret"])
    def test_mismatch(self, hashed, attempt):
        assert check_password(attempt, hashed) is False

    def test_malformed_hash(self):
        assert check_password("secret", "not-a-bcrypt-hash") is False
