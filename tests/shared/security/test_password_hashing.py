"""Tests for the password hash and verify pairs."""

import pytest

from src.shared.security.password import (
    ARGON2_HASH_METHODS,
    DEFAULT_HASH_METHODS,
    PBKDF2_HASH_METHODS,
    PBKDF2_ROUNDS,
    argon2_hash,
    argon2_verify,
    hash_methods_for,
    pbkdf2_hash,
    pbkdf2_hash_methods,
    pbkdf2_verify,
)


class TestPbkdf2:
    """Tests for the default PBKDF2-SHA512 pair."""

    def test_default_pair_is_pbkdf2(self):
        assert DEFAULT_HASH_METHODS == PBKDF2_HASH_METHODS

    def test_hash_format_carries_rounds(self):
        password_hash = pbkdf2_hash("secret123")

        assert password_hash.startswith(f"$pbkdf2-sha512${PBKDF2_ROUNDS}$")

    def test_hash_verifies_only_original_password(self):
        password_hash = pbkdf2_hash("secret123")

        assert pbkdf2_verify("secret123", password_hash)
        assert not pbkdf2_verify("secret124", password_hash)
        assert not pbkdf2_verify("", password_hash)

    def test_hashes_are_salted(self):
        assert pbkdf2_hash("secret123") != pbkdf2_hash("secret123")

    def test_malformed_hash_does_not_verify(self):
        assert not pbkdf2_verify("secret123", "not-a-hash")

    def test_custom_rounds_verify_with_default_verifier(self):
        hash_method, verify_method = pbkdf2_hash_methods(rounds=1_000)

        password_hash = hash_method("secret123")

        assert password_hash.startswith("$pbkdf2-sha512$1000$")
        assert verify_method("secret123", password_hash)
        assert pbkdf2_verify("secret123", password_hash)


class TestArgon2:
    """Tests for the Argon2 pair."""

    def test_hash_verifies_only_original_password(self):
        password_hash = argon2_hash("secret123")

        assert password_hash.startswith("$argon2")
        assert argon2_verify("secret123", password_hash)
        assert not argon2_verify("secret124", password_hash)

    def test_pbkdf2_hash_is_not_accepted(self):
        assert not argon2_verify("secret123", pbkdf2_hash("secret123"))


class TestHashMethodResolution:
    """Tests for hash_methods_for()"""

    def test_resolves_pbkdf2(self):
        assert hash_methods_for("pbkdf2_sha512") == PBKDF2_HASH_METHODS

    def test_resolves_argon2(self):
        assert hash_methods_for("argon2") == ARGON2_HASH_METHODS

    def test_unknown_algorithm_raises(self):
        with pytest.raises(ValueError, match="Unsupported password hash algorithm"):
            hash_methods_for("md5")
