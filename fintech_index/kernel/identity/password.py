"""
Password hashing utilities using bcrypt.
"""

import asyncio
import secrets
from typing import Optional

import bcrypt

from fintech_index.config import get_settings


class PasswordHasher:
    """Salted bcrypt hashing with a configurable work factor."""

    def __init__(self, rounds: Optional[int] = None):
        self.rounds = rounds or get_settings().bcrypt_rounds
        self._dummy_hash: Optional[str] = None

    @staticmethod
    def _encode(password: str) -> bytes:
        # bcrypt only looks at the first 72 bytes
        return password.encode("utf-8")[:72]

    def hash(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(self._encode(password), salt).decode("utf-8")

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        A malformed stored hash counts as a mismatch.
        """
        try:
            return bcrypt.checkpw(
                self._encode(plain_password),
                hashed_password.encode("utf-8"),
            )
        except ValueError:
            return False

    def needs_rehash(self, hashed_password: str) -> bool:
        """True when the stored hash used a different work factor."""
        # Format: $2b$RR$<salt+hash>
        parts = hashed_password.split("$")
        if len(parts) < 3 or not parts[2].isdigit():
            return True
        return int(parts[2]) != self.rounds

    @property
    def dummy_hash(self) -> str:
        """Hash of a random secret, made on first use at this work factor."""
        if self._dummy_hash is None:
            self._dummy_hash = self.hash(secrets.token_urlsafe(16))
        return self._dummy_hash


_hasher: Optional[PasswordHasher] = None


def get_password_hasher() -> PasswordHasher:
    """Get or create the default hasher."""
    global _hasher
    if _hasher is None:
        _hasher = PasswordHasher()
    return _hasher


# Convenience functions
def hash_password(password: str) -> str:
    """Hash a password."""
    return get_password_hasher().hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password."""
    return get_password_hasher().verify(plain_password, hashed_password)


async def hash_password_async(password: str) -> str:
    """Hash off the event loop; bcrypt is deliberately slow."""
    return await asyncio.to_thread(hash_password, password)


async def verify_password_async(plain_password: str, hashed_password: str) -> bool:
    """Verify off the event loop."""
    return await asyncio.to_thread(verify_password, plain_password, hashed_password)


def _verify_dummy(plain_password: str) -> None:
    hasher = get_password_hasher()
    hasher.verify(plain_password, hasher.dummy_hash)


async def verify_dummy_async(plain_password: str) -> None:
    """Spend one bcrypt check when there is no stored hash to compare with."""
    await asyncio.to_thread(_verify_dummy, plain_password)
