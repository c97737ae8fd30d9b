"""
User directory — registration, lookup, update and removal of accounts.

This is the only layer with business rules about users; it owns when a
password gets hashed and which fields an update may touch.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from auth.password import PasswordHasher
from database.models import User
from database.user_store import UserStore
from exceptions import ConflictError, InternalError, NotFoundError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"email", "password"})


class UserDirectory:
    def __init__(self, store: UserStore, hasher: PasswordHasher):
        self._store = store
        self._hasher = hasher

    async def register(self, email: str, password: str) -> User:
        """
        Create an account. The digest is computed before anything is
        persisted; a taken email raises ``ConflictError`` whether it is
        caught here or by the unique index.
        """
        if await self._store.get_by_email(email) is not None:
            raise ConflictError(email=email)

        user = await self._store.create(email, self._hasher.hash(password))
        logger.info("Registered user %s (id=%s)", user.email, user.id)
        return user

    async def list_all(self) -> List[User]:
        return await self._store.list_all()

    async def get_by_id(self, user_id: int) -> User:
        user = await self._store.get_by_id(user_id)
        if user is None:
            raise NotFoundError(user_id)
        return user

    async def get_by_email(self, email: str) -> Optional[User]:
        """Return the user or ``None``; absence is not an error here."""
        return await self._store.get_by_email(email)

    async def update(self, user_id: int, fields: Dict[str, Any]) -> User:
        """
        Merge ``fields`` over the stored user.

        A key being present is what counts, so ``{"email": ""}`` overwrites
        while a missing key leaves the column alone. A new password is
        re-hashed and bumps ``token_version`` so older tokens stop working.
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

        user = await self.get_by_id(user_id)

        if "password" in fields:
            user.password_hash = self._hasher.hash(fields["password"])
            user.token_version = (user.token_version or 0) + 1
        if "email" in fields:
            user.email = fields["email"]

        user = await self._store.save(user)
        logger.info("Updated user %s (fields: %s)", user.id, ", ".join(sorted(fields)) or "none")
        return user

    async def delete(self, user_id: int) -> None:
        """Remove the account; a missing id is ``NotFoundError``, not a no-op."""
        user = await self.get_by_id(user_id)
        try:
            await self._store.delete(user)
        except (SQLAlchemyError, ConflictError) as exc:
            logger.exception("Failed to delete user %s", user_id)
            raise InternalError("Failed to delete user") from exc
        logger.info("Deleted user %s", user_id)
