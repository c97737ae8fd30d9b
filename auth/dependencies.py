"""
FastAPI dependencies for authentication.

Provides ``db_session`` and ``get_current_user``, which runs the
:class:`AuthGuard` ahead of every protected route and attaches the
resolved caller to ``request.state.user``.
"""

from __future__ import annotations

from typing import AsyncGenerator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import User
from services.auth_service import AuthService
from services.container import ServiceContainer
from services.directory import UserDirectory


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


async def db_session(
    container: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield one DB session per request, rolling back on any escaping error."""
    async with container.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_directory(
    container: ServiceContainer = Depends(get_container),
    session: AsyncSession = Depends(db_session),
) -> UserDirectory:
    return container.directory(session)


def get_auth_service(
    container: ServiceContainer = Depends(get_container),
    session: AsyncSession = Depends(db_session),
) -> AuthService:
    return container.auth_service(session)


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None, alias="Authorization"),
    container: ServiceContainer = Depends(get_container),
    session: AsyncSession = Depends(db_session),
) -> User:
    """
    Verify the Bearer token and return the authenticated ``User``.

    Raises ``UnauthorizedError`` (mapped to 401) on any failure.
    """
    user = await container.guard(session).resolve(authorization)
    request.state.user = user
    return user
