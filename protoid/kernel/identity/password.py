"""
Password hashing utilities using bcrypt.

Hashing runs in a worker thread so callers on the event loop are not
blocked for the duration of the key stretch.
"""

import asyncio
import hashlib
from typing import Optional

import bcrypt

from protoid.config import get_settings


class PasswordHasher:
    """Salted one-way hashing with constant-time verification."""

    def __init__(self, rounds: Optional[int] = None):
        self.rounds = rounds if rounds is not None else get_settings().bcrypt_rounds

    @staticmethod
    def _prepare_password(password: str) -> bytes:
        """
        Digest a password to a fixed-length bcrypt input.

        bcrypt only reads the first 72 bytes of its input, so longer
        plaintexts sharing a prefix would collide. The hex SHA-256 digest
        is 64 bytes and depends on every byte of the password.
        """
        return hashlib.sha256(password.encode('utf-8')).hexdigest().encode('ascii')

    def hash_sync(self, plaintext: str, rounds: Optional[int] = None) -> str:
        """
        Hash a plaintext with a fresh salt.

        Args:
            plaintext: Value to hash
            rounds: Cost factor override

        Returns:
            bcrypt hash string
        """
        salt = bcrypt.gensalt(rounds=rounds if rounds is not None else self.rounds)
        hashed = bcrypt.hashpw(self._prepare_password(plaintext), salt)
        return hashed.decode('utf-8')

    def compare_sync(self, plaintext: str, hashed: Optional[str]) -> bool:
        """
        Verify a plaintext against a stored hash.

        Returns False for a missing or malformed hash.
        """
        if not hashed:
            return False
        try:
            return bcrypt.checkpw(
                self._prepare_password(plaintext),
                hashed.encode('utf-8'),
            )
        except ValueError:
            # bcrypt rejects hashes with an invalid salt
            return False

    async def hash(self, plaintext: str, rounds: Optional[int] = None) -> str:
        """Hash off the event loop."""
        return await asyncio.to_thread(self.hash_sync, plaintext, rounds)

    async def compare(self, plaintext: str, hashed: Optional[str]) -> bool:
        """Compare off the event loop."""
        return await asyncio.to_thread(self.compare_sync, plaintext, hashed)
