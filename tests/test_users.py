"""Tests for user accounts: admin listing, profile edits and activation."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from growth_catalyst.auth.dependencies import get_current_user
from growth_catalyst.core.config import settings
from growth_catalyst.core.errors import ForbiddenError, InvalidArgumentError, NotFoundError
from growth_catalyst.models.enums import UserRole
from growth_catalyst.modules.users import service
from growth_catalyst.modules.users.schemas import UserUpdate
from tests.conftest import ADMIN, FOUNDER, FOUNDER_ID, INVESTOR, INVESTOR_ID, viewer

pytestmark = pytest.mark.anyio


class TestListUsers:
    async def test_filters_by_role_and_search(self, db: AsyncSession, seed_users):
        _, total = await service.list_users(db)
        assert total == 5

        items, total = await service.list_users(db, role=UserRole.INVESTOR)
        assert total == 2
        assert {u.role for u in items} == {UserRole.INVESTOR}

        items, total = await service.list_users(db, search="ANGEL")
        assert total == 1
        assert items[0].email == "angel@example.com"

    async def test_paginates(self, db: AsyncSession, seed_users):
        items, total = await service.list_users(db, page=2, limit=2)
        assert total == 5
        assert len(items) == 2


class TestProfile:
    async def test_self_read_and_update(self, db: AsyncSession, seed_users):
        user = await service.get_user(db, viewer(FOUNDER), FOUNDER_ID)
        assert user.email == "founder@example.com"

        updated = await service.update_user(
            db, viewer(FOUNDER), FOUNDER_ID, UserUpdate(first_name="Frida", phone="+49 30 1234")
        )
        assert updated.first_name == "Frida"
        assert updated.last_name == "Tester"
        assert updated.phone == "+49 30 1234"

        cleared = await service.update_user(db, viewer(FOUNDER), FOUNDER_ID, UserUpdate(phone=None))
        assert cleared.phone is None

    async def test_other_users_are_forbidden(self, db: AsyncSession, seed_users):
        with pytest.raises(ForbiddenError):
            await service.get_user(db, viewer(INVESTOR), FOUNDER_ID)
        with pytest.raises(ForbiddenError):
            await service.update_user(
                db, viewer(INVESTOR), FOUNDER_ID, UserUpdate(first_name="Mallory")
            )

    async def test_admin_reads_any_and_missing_is_404(self, db: AsyncSession, seed_users):
        user = await service.get_user(db, viewer(ADMIN), INVESTOR_ID)
        assert user.role is UserRole.INVESTOR

        with pytest.raises(NotFoundError):
            await service.get_user(db, viewer(ADMIN), uuid.uuid4())

    async def test_empty_update_rejected(self, db: AsyncSession, seed_users):
        with pytest.raises(InvalidArgumentError):
            await service.update_user(db, viewer(FOUNDER), FOUNDER_ID, UserUpdate())


class TestActivation:
    async def test_deactivated_user_cannot_authenticate(self, db: AsyncSession, seed_users):
        token = jwt.encode(
            {"sub": str(FOUNDER_ID), "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            settings.SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )
        creds = HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)

        user = await service.set_user_active(db, viewer(ADMIN), FOUNDER_ID, False)
        assert user.is_active is False
        with pytest.raises(HTTPException) as exc:
            await get_current_user(creds, db)
        assert exc.value.status_code == 401

        await service.set_user_active(db, viewer(ADMIN), FOUNDER_ID, True)
        current = await get_current_user(creds, db)
        assert current.user_id == FOUNDER_ID

    async def test_unknown_user(self, db: AsyncSession, seed_users):
        with pytest.raises(NotFoundError):
            await service.set_user_active(db, viewer(ADMIN), uuid.uuid4(), False)


# ── API tests ────────────────────────────────────────────────────────────────


async def test_admin_lists_users_over_http(client, login):
    resp = await client.get("/v1/users", params={"role": "founder", "limit": 1})
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 2
    assert body["pages"] == 2
    assert len(body["items"]) == 1

    login(FOUNDER)
    resp = await client.get("/v1/users")
    assert resp.status_code == 403


async def test_deactivate_and_activate_over_http(client, login):
    resp = await client.patch(f"/v1/users/{INVESTOR_ID}/deactivate")
    assert resp.status_code == 200
    assert resp.json()["is_active"] is False

    resp = await client.patch(f"/v1/users/{INVESTOR_ID}/activate")
    assert resp.json()["is_active"] is True

    login(INVESTOR)
    resp = await client.patch(f"/v1/users/{FOUNDER_ID}/deactivate")
    assert resp.status_code == 403


async def test_self_update_over_http(client, login):
    login(FOUNDER)
    resp = await client.put(f"/v1/users/{FOUNDER_ID}", json={"last_name": "Okafor"})
    assert resp.status_code == 200
    assert resp.json()["last_name"] == "Okafor"

    resp = await client.get(f"/v1/users/{INVESTOR_ID}")
    assert resp.status_code == 403
