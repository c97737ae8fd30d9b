"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.
"""

from __future__ import annotations

import bcrypt

DEFAULT_ROUNDS = 10


class PasswordHasher:
    """One-way password transform with a fixed bcrypt cost."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self.rounds = rounds
        # Used to spend the same bcrypt time when the account does not exist.
        self._dummy_digest = self.hash("dummy-password-for-timing")

    def hash(self, password: str) -> str:
        """Hash a password with bcrypt (auto-salted)."""
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self.rounds)).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        """Constant-time comparison against a bcrypt hash."""
        try:
            return bcrypt.checkpw(password.encode(), password_hash.encode())
        except (ValueError, TypeError):
            return False

    def burn(self, password: str) -> None:
        """Run one verification against a throwaway digest."""
        self.verify(password, self._dummy_digest)
