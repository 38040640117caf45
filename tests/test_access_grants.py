"""Tests for the startup access-grant workflow."""

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from growth_catalyst.core.errors import (
    ConflictError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
)
from growth_catalyst.models.enums import AccessRequestStatus
from growth_catalyst.modules.access_grants import service
from tests.conftest import (
    ADMIN,
    ADMIN_ID,
    FOUNDER,
    FOUNDER_ID,
    INVESTOR,
    INVESTOR_ID,
    OTHER_FOUNDER,
    OTHER_INVESTOR,
    OTHER_INVESTOR_ID,
    make_startup,
    viewer,
)

pytestmark = pytest.mark.anyio


# ── Service tests ────────────────────────────────────────────────────────────


class TestRequestAccess:
    async def test_opens_pending_grant(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID, is_public=False)

        grant = await service.request_access(db, startup.id, INVESTOR_ID)

        assert grant.status is AccessRequestStatus.PENDING
        assert grant.investor_id == INVESTOR_ID
        assert grant.reviewed_at is None

    async def test_public_startup_needs_no_request(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID, is_public=True)
        with pytest.raises(InvalidStateError):
            await service.request_access(db, startup.id, INVESTOR_ID)

    async def test_unknown_startup(self, db: AsyncSession, seed_users):
        with pytest.raises(NotFoundError):
            await service.request_access(db, uuid.uuid4(), INVESTOR_ID)

    async def test_second_request_conflicts(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID, is_public=False)
        await service.request_access(db, startup.id, INVESTOR_ID)

        with pytest.raises(ConflictError):
            await service.request_access(db, startup.id, INVESTOR_ID)

    async def test_denied_grant_still_blocks_new_request(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID, is_public=False)
        grant = await service.request_access(db, startup.id, INVESTOR_ID)
        await service.review_access(db, startup.id, grant.id, "denied", ADMIN_ID)

        with pytest.raises(ConflictError):
            await service.request_access(db, startup.id, INVESTOR_ID)


class TestReviewAccess:
    async def test_approve_records_reviewer(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID, is_public=False)
        grant = await service.request_access(db, startup.id, INVESTOR_ID)

        reviewed = await service.review_access(
            db, startup.id, grant.id, "approved", ADMIN_ID, notes="Strong fit"
        )

        assert reviewed.status is AccessRequestStatus.APPROVED
        assert reviewed.reviewed_by == ADMIN_ID
        assert reviewed.reviewed_at is not None
        assert reviewed.notes == "Strong fit"

    async def test_pending_is_not_a_decision(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID, is_public=False)
        grant = await service.request_access(db, startup.id, INVESTOR_ID)

        with pytest.raises(InvalidArgumentError):
            await service.review_access(db, startup.id, grant.id, "pending", ADMIN_ID)
        with pytest.raises(InvalidArgumentError):
            await service.review_access(db, startup.id, grant.id, "maybe", ADMIN_ID)

    async def test_grant_must_belong_to_startup(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID, is_public=False)
        other = await make_startup(db, FOUNDER_ID, company_name="Other Co", is_public=False)
        grant = await service.request_access(db, startup.id, INVESTOR_ID)

        with pytest.raises(NotFoundError):
            await service.review_access(db, other.id, grant.id, "approved", ADMIN_ID)

    async def test_re_review_overwrites(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID, is_public=False)
        grant = await service.request_access(db, startup.id, INVESTOR_ID)
        await service.review_access(db, startup.id, grant.id, "approved", ADMIN_ID)

        revoked = await service.review_access(db, startup.id, grant.id, "denied", ADMIN_ID)

        assert revoked.status is AccessRequestStatus.DENIED
        assert not await service.can_view(db, viewer(INVESTOR), startup)


class TestCanView:
    async def test_visibility_rules(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID, is_public=False)

        assert await service.can_view(db, viewer(ADMIN), startup)
        assert await service.can_view(db, viewer(FOUNDER), startup)
        assert not await service.can_view(db, viewer(OTHER_FOUNDER), startup)
        assert not await service.can_view(db, viewer(INVESTOR), startup)

    async def test_pending_grant_does_not_reveal(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID, is_public=False)
        await service.request_access(db, startup.id, INVESTOR_ID)

        assert not await service.can_view(db, viewer(INVESTOR), startup)

    async def test_approved_grant_is_per_investor(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID, is_public=False)
        grant = await service.request_access(db, startup.id, INVESTOR_ID)
        await service.review_access(db, startup.id, grant.id, "approved", ADMIN_ID)

        assert await service.can_view(db, viewer(INVESTOR), startup)
        assert not await service.can_view(db, viewer(OTHER_INVESTOR), startup)

    async def test_public_startup_visible_to_all(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID, is_public=True)
        assert await service.can_view(db, viewer(OTHER_FOUNDER), startup)


class TestListAccessRequests:
    async def test_filters_by_status(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID, is_public=False)
        first = await service.request_access(db, startup.id, INVESTOR_ID)
        await service.request_access(db, startup.id, OTHER_INVESTOR_ID)
        await service.review_access(db, startup.id, first.id, "approved", ADMIN_ID)

        pending, total = await service.list_access_requests(
            db, startup.id, status=AccessRequestStatus.PENDING
        )

        assert total == 1
        assert pending[0].investor_id == OTHER_INVESTOR_ID


# ── API tests ────────────────────────────────────────────────────────────────


async def test_request_and_approve_over_http(client, login, db: AsyncSession):
    startup = await make_startup(db, FOUNDER_ID, is_public=False)

    login(INVESTOR)
    resp = await client.get(f"/v1/startups/{startup.id}")
    assert resp.status_code == 403
    assert resp.json()["error"] == "access_denied"

    resp = await client.post(f"/v1/startups/{startup.id}/request-access")
    assert resp.status_code == 201
    request_id = resp.json()["id"]
    assert resp.json()["status"] == "pending"

    resp = await client.post(f"/v1/startups/{startup.id}/request-access")
    assert resp.status_code == 409

    login(ADMIN)
    resp = await client.get(f"/v1/startups/{startup.id}/access-requests")
    assert resp.status_code == 200
    assert resp.json()["total"] == 1

    resp = await client.patch(
        f"/v1/startups/{startup.id}/access-requests/{request_id}",
        json={"status": "approved"},
    )
    assert resp.status_code == 200
    assert resp.json()["reviewed_by"] == str(ADMIN_ID)

    login(INVESTOR)
    resp = await client.get(f"/v1/startups/{startup.id}")
    assert resp.status_code == 200
    assert resp.json()["has_access"] is True
    assert resp.json()["access_status"] == "approved"


async def test_founder_cannot_request_access(client, login, db: AsyncSession):
    startup = await make_startup(db, FOUNDER_ID, is_public=False)
    login(OTHER_FOUNDER)

    resp = await client.post(f"/v1/startups/{startup.id}/request-access")

    assert resp.status_code == 403


async def test_investor_cannot_review(client, login, db: AsyncSession):
    startup = await make_startup(db, FOUNDER_ID, is_public=False)
    grant = await service.request_access(db, startup.id, INVESTOR_ID)
    login(INVESTOR)

    resp = await client.patch(
        f"/v1/startups/{startup.id}/access-requests/{grant.id}",
        json={"status": "approved"},
    )

    assert resp.status_code == 403


async def test_invalid_decision_is_400(client, db: AsyncSession):
    startup = await make_startup(db, FOUNDER_ID, is_public=False)
    grant = await service.request_access(db, startup.id, INVESTOR_ID)

    resp = await client.patch(
        f"/v1/startups/{startup.id}/access-requests/{grant.id}",
        json={"status": "pending"},
    )

    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_argument"
