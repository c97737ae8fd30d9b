"""
Tests for the bearer-token guard.
"""

import pytest

from auth.guard import extract_bearer_token
from auth.jwt import TokenCodec, build_claims
from exceptions import UnauthorizedError


class TestExtract:
    def test_bearer_header(self):
        assert extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"

    def test_scheme_is_case_insensitive(self):
        assert extract_bearer_token("bearer abc") == "abc"

    @pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer   ", "Basic abc", "abc"])
    def test_missing_or_malformed(self, header):
        with pytest.raises(UnauthorizedError):
            extract_bearer_token(header)


class TestResolve:
    @pytest.mark.asyncio
    async def test_fresh_token_resolves_user(self, directory, auth_service, guard):
        user = await directory.register("a@x.com", "secret1")
        token = auth_service.issue_token(user)
        resolved = await guard.resolve(f"Bearer {token}")
        assert resolved.id == user.id

    @pytest.mark.asyncio
    async def test_expired_token(self, directory, guard, codec):
        user = await directory.register("a@x.com", "secret1")
        token = codec.sign(build_claims(user), ttl_seconds=-1)
        with pytest.raises(UnauthorizedError, match="expired"):
            await guard.resolve(f"Bearer {token}")

    @pytest.mark.asyncio
    async def test_foreign_signature(self, directory, guard):
        user = await directory.register("a@x.com", "secret1")
        token = TokenCodec("someone-elses-secret-key-32-bytes!").sign(build_claims(user))
        with pytest.raises(UnauthorizedError):
            await guard.resolve(f"Bearer {token}")

    @pytest.mark.asyncio
    async def test_deleted_user(self, directory, auth_service, guard):
        user = await directory.register("a@x.com", "secret1")
        token = auth_service.issue_token(user)
        await directory.delete(user.id)
        with pytest.raises(UnauthorizedError):
            await guard.resolve(f"Bearer {token}")

    @pytest.mark.asyncio
    async def test_password_change_revokes_token(self, directory, auth_service, guard):
        user = await directory.register("a@x.com", "old")
        old_token = auth_service.issue_token(user)
        user = await directory.update(user.id, {"password": "new"})
        with pytest.raises(UnauthorizedError, match="revoked"):
            await guard.resolve(f"Bearer {old_token}")

        new_token = auth_service.issue_token(user)
        assert (await guard.resolve(f"Bearer {new_token}")).id == user.id

    @pytest.mark.asyncio
    async def test_email_change_invalidates_token(self, directory, auth_service, guard):
        user = await directory.register("a@x.com", "secret1")
        token = auth_service.issue_token(user)
        await directory.update(user.id, {"email": "b@x.com"})
        with pytest.raises(UnauthorizedError):
            await guard.resolve(f"Bearer {token}")

    @pytest.mark.asyncio
    async def test_reregistered_email_does_not_inherit_deleted_users_token(
        self, directory, auth_service, guard,
    ):
        user = await directory.register("a@x.com", "secret1")
        token = auth_service.issue_token(user)
        await directory.delete(user.id)
        await directory.register("a@x.com", "secret2")
        with pytest.raises(UnauthorizedError):
            await guard.resolve(f"Bearer {token}")

    @pytest.mark.asyncio
    async def test_old_email_taken_by_new_user_rejects_old_token(
        self, directory, auth_service, guard,
    ):
        first = await directory.register("a@x.com", "secret1")
        token = auth_service.issue_token(first)
        await directory.update(first.id, {"email": "z@x.com"})
        second = await directory.register("a@x.com", "secret2")
        assert second.id != first.id
        with pytest.raises(UnauthorizedError):
            await guard.resolve(f"Bearer {token}")
