"""
Bearer-token guard for protected routes.

Every protected request goes through the same four steps:

  1. extract  — ``Authorization: Bearer <token>`` must be present
  2. verify   — signature and expiry via :class:`TokenCodec`
  3. resolve  — the claimed email must still map to the user the token
                was issued to (same id) with a matching ``token_version``
  4. attach   — done by the FastAPI dependency, which puts the user on
                ``request.state.user``

Any failure is an ``UnauthorizedError``. Nothing is remembered between
requests; there is no session table and no revocation list.
"""

from __future__ import annotations

import logging
from typing import Optional

from auth.jwt import SessionClaims, TokenCodec, TokenError, TokenExpiredError
from database.models import User
from exceptions import UnauthorizedError
from services.directory import UserDirectory

logger = logging.getLogger(__name__)


def extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise UnauthorizedError("Missing Bearer token")
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise UnauthorizedError("Missing Bearer token")
    return token


class AuthGuard:
    def __init__(self, codec: TokenCodec, directory: UserDirectory):
        self._codec = codec
        self._directory = directory

    def verify(self, token: str) -> SessionClaims:
        try:
            return self._codec.verify(token)
        except TokenExpiredError:
            logger.debug("Rejected expired token")
            raise UnauthorizedError("Token expired")
        except TokenError as exc:
            logger.debug("Rejected invalid token: %s", exc)
            raise UnauthorizedError("Invalid token")

    async def resolve(self, authorization: Optional[str]) -> User:
        """Run extract → verify → resolve and return the caller."""
        claims = self.verify(extract_bearer_token(authorization))

        user = await self._directory.get_by_email(claims.email)
        if user is None:
            logger.info("Token for unknown email %s rejected", claims.email)
            raise UnauthorizedError("Invalid token")
        if str(user.id) != claims.sub:
            # the email now belongs to a different account
            logger.info("Token for user %s presented for user %s rejected", claims.sub, user.id)
            raise UnauthorizedError("Invalid token")
        if (user.token_version or 0) != claims.ver:
            logger.info("Stale token for user %s rejected", user.id)
            raise UnauthorizedError("Token revoked")
        return user
