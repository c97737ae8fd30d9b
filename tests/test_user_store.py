"""
Tests for the SQLAlchemy user store.
"""

import pytest

from database.user_store import UserStore
from exceptions import ConflictError


class TestUserStore:
    @pytest.mark.asyncio
    async def test_create_assigns_id(self, store):
        user = await store.create("a@x.com", "digest")
        assert user.id is not None
        assert user.token_version == 0
        assert user.created_at is not None

    @pytest.mark.asyncio
    async def test_lookup_by_id_and_email(self, store):
        user = await store.create("a@x.com", "digest")
        assert (await store.get_by_id(user.id)).email == "a@x.com"
        assert (await store.get_by_email("a@x.com")).id == user.id
        assert await store.get_by_id(user.id + 100) is None
        assert await store.get_by_email("nobody@x.com") is None

    @pytest.mark.asyncio
    async def test_unique_violation_becomes_conflict(self, store):
        await store.create("a@x.com", "digest")
        with pytest.raises(ConflictError):
            await store.create("a@x.com", "other")
        # session is usable again after the rollback
        assert len(await store.list_all()) == 1

    @pytest.mark.asyncio
    async def test_list_all_ordered_by_id(self, store):
        for email in ("c@x.com", "a@x.com", "b@x.com"):
            await store.create(email, "digest")
        users = await store.list_all()
        assert [u.email for u in users] == ["c@x.com", "a@x.com", "b@x.com"]
        assert [u.id for u in users] == sorted(u.id for u in users)

    @pytest.mark.asyncio
    async def test_save_persists_changes(self, store, session_factory):
        user = await store.create("a@x.com", "digest")
        user.email = "b@x.com"
        await store.save(user)
        async with session_factory() as other:
            reloaded = await UserStore(other).get_by_id(user.id)
        assert reloaded.email == "b@x.com"

    @pytest.mark.asyncio
    async def test_delete(self, store):
        user = await store.create("a@x.com", "digest")
        await store.delete(user)
        assert await store.get_by_id(user.id) is None

    @pytest.mark.asyncio
    async def test_ids_not_reused_after_delete(self, store):
        first = await store.create("a@x.com", "digest")
        await store.delete(first)
        second = await store.create("b@x.com", "digest")
        assert second.id > first.id
