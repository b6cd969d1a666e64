"""Tests for the argon2 password hasher."""

from userbase.core.security import PasswordHasher, get_password_hasher
from userbase.core.settings import get_settings


def test_hash_is_salted(hasher: PasswordHasher):
    first = hasher.hash("Abcdef123!")
    second = hasher.hash("Abcdef123!")

    assert first != second
    assert first.startswith("$argon2")
    assert "Abcdef123!" not in first


def test_verify(hasher: PasswordHasher):
    digest = hasher.hash("Abcdef123!")

    assert hasher.verify("Abcdef123!", digest) is True
    assert hasher.verify("abcdef123!", digest) is False


def test_verify_malformed_digest_is_false(hasher: PasswordHasher):
    assert hasher.verify("Abcdef123!", "not-a-digest") is False
    assert hasher.verify("Abcdef123!", "") is False


def test_get_password_hasher_uses_settings():
    settings = get_settings()
    get_password_hasher.cache_clear()

    digest = get_password_hasher().hash("Abcdef123!")

    assert f"t={settings.password_hash_time_cost}" in digest
    assert f"m={settings.password_hash_memory_cost}" in digest
    assert get_password_hasher() is get_password_hasher()
