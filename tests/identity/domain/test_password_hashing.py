"""Tests for bcrypt password hashing."""

from identity.security import hash_password, verify_password


class TestPasswordHashing:
    def test_hash_is_not_the_password(self):
        hashed = hash_password("correct horse")
        assert hashed != "correct horse"
        assert hashed.startswith("$2")

    def test_verify_matching_password(self):
        assert verify_password("correct horse", hash_password("correct horse"))

    def test_verify_wrong_password(self):
        assert not verify_password("wrong horse", hash_password("correct horse"))

    def test_verify_against_missing_hash(self):
        assert not verify_password("anything", None)
