"""
JWT token creation and verification.

Tokens are HS256-signed JWTs (``PyJWT``) carrying the caller's identity,
the account's ``token_version`` and an expiry. The secret is process-wide
configuration (``config.jwt_secret``, env var ``JWT_SECRET``).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

import jwt
from pydantic import BaseModel, ValidationError

_REQUIRED_CLAIMS = ["exp", "iat", "sub"]


class TokenError(Exception):
    """Base error for tokens that cannot be trusted."""


class TokenExpiredError(TokenError):
    """Token signature is fine but ``exp`` has passed."""


class TokenInvalidError(TokenError):
    """Token is malformed, tampered with or missing claims."""


class SessionClaims(BaseModel):
    """Decoded JWT payload."""
    sub: str  # user id
    email: str
    ver: int = 0  # token_version at issuance
    iat: int
    exp: int


def build_claims(user: Any) -> Dict[str, Any]:
    """Identity claims for ``user``; ``iat``/``exp`` are added when signing."""
    return {
        "sub": str(user.id),
        "email": user.email,
        "ver": user.token_version or 0,
    }


class TokenCodec:
    """Sign / verify pair over a shared secret."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expiry_seconds: int = 86400,
    ):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.expiry_seconds = expiry_seconds

    def sign(self, claims: Dict[str, Any], ttl_seconds: Optional[int] = None) -> str:
        """Return a signed token for ``claims`` that expires after the TTL."""
        ttl = self.expiry_seconds if ttl_seconds is None else ttl_seconds
        issued_at = int(datetime.now(timezone.utc).timestamp())
        payload = dict(claims)
        payload["iat"] = issued_at
        payload["exp"] = issued_at + ttl
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> SessionClaims:
        """
        Check signature and expiry and return the claims.

        Raises ``TokenExpiredError`` or ``TokenInvalidError``.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError("token expired") from exc
        except jwt.PyJWTError as exc:
            raise TokenInvalidError(str(exc)) from exc

        try:
            return SessionClaims(**payload)
        except ValidationError as exc:
            raise TokenInvalidError("malformed claims") from exc
