"""
Explicit wiring of the user directory's collaborators.

Process-wide pieces (hasher, token codec, session factory) are built once
from :class:`Settings`; the per-request chain
``UserStore -> UserDirectory -> AuthService / AuthGuard`` is built on top
of the request's ``AsyncSession``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from auth.guard import AuthGuard
from auth.jwt import TokenCodec
from auth.password import PasswordHasher
from config.settings import Settings
from database.session import build_engine, build_session_factory
from database.user_store import UserStore
from services.auth_service import AuthService
from services.directory import UserDirectory


@dataclass
class ServiceContainer:
    settings: Settings
    hasher: PasswordHasher
    codec: TokenCodec
    session_factory: async_sessionmaker[AsyncSession]
    engine: Optional[AsyncEngine] = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    ) -> "ServiceContainer":
        engine = None
        if session_factory is None:
            engine = build_engine(settings.database_url, echo=settings.debug)
            session_factory = build_session_factory(engine)
        return cls(
            settings=settings,
            hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
            codec=TokenCodec(
                settings.jwt_secret,
                algorithm=settings.jwt_algorithm,
                expiry_seconds=settings.jwt_expiry_seconds,
            ),
            session_factory=session_factory,
            engine=engine,
        )

    def directory(self, session: AsyncSession) -> UserDirectory:
        return UserDirectory(UserStore(session), self.hasher)

    def auth_service(self, session: AsyncSession) -> AuthService:
        return AuthService(self.directory(session), self.hasher, self.codec)

    def guard(self, session: AsyncSession) -> AuthGuard:
        return AuthGuard(self.codec, self.directory(session))
