"""
Credential checks and token issuance.
"""

from __future__ import annotations

import logging

from auth.jwt import TokenCodec, build_claims
from auth.password import PasswordHasher
from database.models import User
from exceptions import UnauthorizedError
from services.directory import UserDirectory

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    def __init__(self, directory: UserDirectory, hasher: PasswordHasher, codec: TokenCodec):
        self._directory = directory
        self._hasher = hasher
        self._codec = codec

    @property
    def token_ttl(self) -> int:
        return self._codec.expiry_seconds

    async def validate_credentials(self, email: str, password: str) -> User:
        """
        Return the user owning ``email`` if ``password`` matches.

        Unknown email and wrong password fail identically, and both paths
        run one bcrypt check.
        """
        user = await self._directory.get_by_email(email)
        if user is None:
            self._hasher.burn(password)
            logger.info("Login failed: unknown email %s", email)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if not self._hasher.verify(password, user.password_hash):
            logger.info("Login failed: bad password for user %s", user.id)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        return user

    def issue_token(self, user: User) -> str:
        return self._codec.sign(build_claims(user))

    async def login(self, email: str, password: str) -> str:
        user = await self.validate_credentials(email, password)
        token = self.issue_token(user)
        logger.info("Login: %s (id=%s)", user.email, user.id)
        return token
