"""
User store — create / find / update / delete rows of the ``users`` table.

Each write is committed on its own; nothing here spans more than one
statement, so concurrent updates to the same row are last-write-wins.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import User
from exceptions import ConflictError

logger = logging.getLogger(__name__)


class UserStore:
    """Persistence interface for :class:`User` rows bound to one session."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(self, email: str, password_hash: str) -> User:
        user = User(email=email, password_hash=password_hash, token_version=0)
        self._session.add(user)
        await self._commit(email)
        await self._session.refresh(user)
        return user

    async def get_by_id(self, user_id: int) -> Optional[User]:
        return await self._session.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self._session.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> List[User]:
        result = await self._session.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    async def save(self, user: User) -> User:
        """Persist pending attribute changes on an already loaded row."""
        await self._commit(user.email)
        await self._session.refresh(user)
        return user

    async def delete(self, user: User) -> None:
        await self._session.delete(user)
        await self._commit(user.email)

    async def _commit(self, email: Optional[str]) -> None:
        try:
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            logger.info("Unique constraint violated for email %s", email)
            raise ConflictError(email=email) from exc
        except Exception:
            await self._session.rollback()
            raise
