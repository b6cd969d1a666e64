"""Password digest primitive.

One-way, salted, cost-parameterized hashing backed by argon2.
"""

from functools import lru_cache
from typing import Protocol

from argon2 import PasswordHasher as Argon2Hasher
from argon2 import exceptions as argon_exc

from userbase.core.settings import get_settings


class PasswordHasherProtocol(Protocol):
    """Hash and compare plaintext passwords."""

    def hash(self, plain: str) -> str: ...

    def verify(self, plain: str, digest: str) -> bool: ...


class PasswordHasher:
    """Argon2 password hasher with configurable cost."""

    def __init__(self, time_cost: int = 3, memory_cost: int = 65536):
        self._hasher = Argon2Hasher(time_cost=time_cost, memory_cost=memory_cost)

    def hash(self, plain: str) -> str:
        return self._hasher.hash(plain)

    def verify(self, plain: str, digest: str) -> bool:
        """Return True if plain matches digest; malformed digests never match."""
        try:
            return self._hasher.verify(digest, plain)
        except (
            argon_exc.VerifyMismatchError,
            argon_exc.VerificationError,
            argon_exc.InvalidHashError,
        ):
            return False


@lru_cache
def get_password_hasher() -> PasswordHasher:
    """Get cached hasher configured from settings."""
    settings = get_settings()
    return PasswordHasher(
        time_cost=settings.password_hash_time_cost,
        memory_cost=settings.password_hash_memory_cost,
    )
