"""Password hashing with bcrypt.

Hashes use a fixed work factor (10 by default). Verification fails closed: a
malformed or foreign stored hash yields ``False`` instead of raising.
"""

from __future__ import annotations

import bcrypt

DEFAULT_ROUNDS = 10

# bcrypt only reads the first 72 bytes of a password
_MAX_PASSWORD_BYTES = 72


def _encode(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:_MAX_PASSWORD_BYTES]


class PasswordService:
    """One-way hashing and verification of user passwords."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self.rounds = rounds

    def hash_password(self, plaintext: str) -> str:
        """Hash a plaintext password with a fresh salt."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_encode(plaintext), salt).decode("ascii")

    def verify_password(self, plaintext: str, password_hash: str | None) -> bool:
        """Check a plaintext password against a stored hash."""
        if not password_hash:
            return False
        try:
            return bcrypt.checkpw(_encode(plaintext), password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            return False
