"""Tests for startup profiles: creation, visibility-scoped listing, updates."""

import uuid
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from growth_catalyst.core.errors import (
    AccessDeniedError,
    ConflictError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
)
from growth_catalyst.models.enums import StartupStage
from growth_catalyst.models.startups import StartupTeamMember
from growth_catalyst.modules.access_grants import service as grants
from growth_catalyst.modules.startups import service
from growth_catalyst.modules.startups.schemas import StartupCreate, StartupUpdate, TeamMemberBody
from tests.conftest import (
    ADMIN,
    ADMIN_ID,
    FOUNDER,
    FOUNDER_ID,
    INVESTOR,
    INVESTOR_ID,
    OTHER_FOUNDER,
    OTHER_FOUNDER_ID,
    make_startup,
    viewer,
)

pytestmark = pytest.mark.anyio


def _create_body(**overrides) -> StartupCreate:
    data = {
        "company_name": "Tidepool Robotics",
        "tagline": "Autonomous hull cleaning",
        "description": "Tidepool builds underwater robots that clean ship hulls and cut fuel use.",
        "industry": "Maritime",
        "stage": "early_traction",
        "founded_year": 2020,
        "team_size": 14,
        "location": "Rotterdam, Netherlands",
        "funding_raised": "500000",
    }
    data.update(overrides)
    return StartupCreate(**data)


# ── Schema validation ────────────────────────────────────────────────────────


class TestStartupCreateSchema:
    def test_future_founded_year_rejected(self):
        with pytest.raises(ValidationError):
            _create_body(founded_year=date.today().year + 1)

    def test_founded_year_floor(self):
        with pytest.raises(ValidationError):
            _create_body(founded_year=1899)

    def test_short_description_rejected(self):
        with pytest.raises(ValidationError):
            _create_body(description="Too short")

    def test_negative_funding_rejected(self):
        with pytest.raises(ValidationError):
            _create_body(funding_raised="-1")


# ── Service tests ────────────────────────────────────────────────────────────


class TestCreateStartup:
    async def test_new_profile_is_private_and_owned(self, db: AsyncSession, seed_users):
        startup = await service.create_startup(db, viewer(FOUNDER), _create_body())

        assert startup.user_id == FOUNDER_ID
        assert startup.is_public is False
        assert startup.stage is StartupStage.EARLY_TRACTION
        assert startup.funding_raised == Decimal("500000")

    async def test_founder_limited_to_one_profile(self, db: AsyncSession, seed_users):
        await service.create_startup(db, viewer(FOUNDER), _create_body())
        with pytest.raises(ConflictError):
            await service.create_startup(db, viewer(FOUNDER), _create_body(company_name="Again"))

    async def test_admin_may_create_several(self, db: AsyncSession, seed_users):
        await service.create_startup(db, viewer(ADMIN), _create_body())
        second = await service.create_startup(db, viewer(ADMIN), _create_body(company_name="Two"))
        assert second.user_id == ADMIN_ID


class TestGetStartup:
    async def test_private_startup_hidden_from_stranger(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID, is_public=False)
        with pytest.raises(AccessDeniedError):
            await service.get_startup(db, viewer(OTHER_FOUNDER), startup.id)

    async def test_unknown_startup(self, db: AsyncSession, seed_users):
        with pytest.raises(NotFoundError):
            await service.get_startup(db, viewer(ADMIN), uuid.uuid4())

    async def test_pending_grant_reported_on_public_startup(
        self, db: AsyncSession, seed_users
    ):
        startup = await make_startup(db, FOUNDER_ID, is_public=False)
        await grants.request_access(db, startup.id, INVESTOR_ID)
        startup.is_public = True
        await db.flush()

        detail = await service.get_startup(db, viewer(INVESTOR), startup.id)

        assert detail.has_access is False
        assert detail.access_status == "pending"

    async def test_has_access_reflects_grant_only(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID, is_public=False)

        own = await service.get_startup(db, viewer(FOUNDER), startup.id)
        admin = await service.get_startup(db, viewer(ADMIN), startup.id)

        assert own.has_access is False
        assert own.access_status is None
        assert admin.has_access is False

        grant = await grants.request_access(db, startup.id, INVESTOR_ID)
        await grants.review_access(db, startup.id, grant.id, "approved", ADMIN_ID)
        granted = await service.get_startup(db, viewer(INVESTOR), startup.id)
        assert granted.has_access is True
        assert granted.access_status == "approved"


class TestListStartups:
    async def test_founder_sees_only_own(self, db: AsyncSession, seed_users):
        await make_startup(db, FOUNDER_ID, company_name="Mine")
        await make_startup(db, OTHER_FOUNDER_ID, company_name="Theirs")

        items, total = await service.list_startups(db, viewer(FOUNDER))

        assert total == 1
        assert items[0].company_name == "Mine"

    async def test_investor_sees_public_and_granted(self, db: AsyncSession, seed_users):
        await make_startup(db, FOUNDER_ID, company_name="Open", is_public=True)
        hidden = await make_startup(db, FOUNDER_ID, company_name="Hidden", is_public=False)
        granted = await make_startup(db, OTHER_FOUNDER_ID, company_name="Granted", is_public=False)
        grant = await grants.request_access(db, granted.id, INVESTOR_ID)
        await grants.review_access(db, granted.id, grant.id, "approved", ADMIN_ID)

        items, total = await service.list_startups(db, viewer(INVESTOR))

        names = {s.company_name for s in items}
        assert total == 2
        assert names == {"Open", "Granted"}
        assert hidden.id not in {s.id for s in items}
        flags = {s.company_name: s.has_access for s in items}
        assert flags == {"Open": False, "Granted": True}

    async def test_admin_sees_everything(self, db: AsyncSession, seed_users):
        await make_startup(db, FOUNDER_ID, is_public=True)
        await make_startup(db, OTHER_FOUNDER_ID, is_public=False)

        _, total = await service.list_startups(db, viewer(ADMIN))

        assert total == 2

    async def test_substring_filters_are_case_insensitive_literals(
        self, db: AsyncSession, seed_users
    ):
        await make_startup(db, FOUNDER_ID, company_name="Fin 100% Co", industry="FinTech")
        await make_startup(db, FOUNDER_ID, company_name="Fin 1000 Co", industry="HealthTech")

        items, _ = await service.list_startups(db, viewer(ADMIN), search="100%")
        assert [s.company_name for s in items] == ["Fin 100% Co"]

        items, _ = await service.list_startups(db, viewer(ADMIN), industry="fintech")
        assert [s.industry for s in items] == ["FinTech"]

    async def test_funding_range_and_stage(self, db: AsyncSession, seed_users):
        await make_startup(db, FOUNDER_ID, company_name="Small", funding_raised=Decimal("1000"))
        await make_startup(
            db,
            FOUNDER_ID,
            company_name="Big",
            funding_raised=Decimal("5000000"),
            stage=StartupStage.GROWTH,
        )

        items, _ = await service.list_startups(
            db, viewer(ADMIN), min_funding=Decimal("10000"), max_funding=Decimal("9000000")
        )
        assert [s.company_name for s in items] == ["Big"]

        items, _ = await service.list_startups(db, viewer(ADMIN), stage=StartupStage.MVP)
        assert [s.company_name for s in items] == ["Small"]

    async def test_sorting_and_pagination(self, db: AsyncSession, seed_users):
        for name, score in [("A", 10.0), ("B", 90.0), ("C", 50.0)]:
            await make_startup(db, FOUNDER_ID, company_name=name, investability_score=score)

        items, total = await service.list_startups(
            db, viewer(ADMIN), sort_by="investability_score", sort_order="desc", limit=2
        )
        assert total == 3
        assert [s.company_name for s in items] == ["B", "C"]

        items, _ = await service.list_startups(
            db, viewer(ADMIN), sort_by="company_name", sort_order="asc", page=2, limit=2
        )
        assert [s.company_name for s in items] == ["C"]

    async def test_unknown_sort_field_falls_back(self, db: AsyncSession, seed_users):
        await make_startup(db, FOUNDER_ID)
        _, total = await service.list_startups(db, viewer(ADMIN), sort_by="password")
        assert total == 1


class TestUpdateStartup:
    async def test_owner_partial_update(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID, is_public=False)

        updated = await service.update_startup(
            db, viewer(FOUNDER), startup.id, StartupUpdate(is_public=True, team_size=20)
        )

        assert updated.is_public is True
        assert updated.team_size == 20
        assert updated.company_name == "Solar Grid Labs"

    async def test_nullable_field_can_be_cleared(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID, website="https://solargrid.example")

        updated = await service.update_startup(
            db, viewer(FOUNDER), startup.id, StartupUpdate(website=None)
        )

        assert updated.website is None

    async def test_null_on_required_field_ignored(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID)

        updated = await service.update_startup(
            db, viewer(FOUNDER), startup.id, StartupUpdate(company_name=None, team_size=3)
        )

        assert updated.company_name == "Solar Grid Labs"
        assert updated.team_size == 3

    async def test_empty_update_rejected(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID)
        with pytest.raises(InvalidArgumentError):
            await service.update_startup(db, viewer(FOUNDER), startup.id, StartupUpdate())

    async def test_non_owner_forbidden(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID)
        with pytest.raises(ForbiddenError):
            await service.update_startup(
                db, viewer(OTHER_FOUNDER), startup.id, StartupUpdate(team_size=2)
            )

    async def test_admin_may_update_any(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID)
        updated = await service.update_startup(
            db, viewer(ADMIN), startup.id, StartupUpdate(team_size=9)
        )
        assert updated.team_size == 9


class TestDeleteStartup:
    async def test_owner_deletes(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID)
        await service.delete_startup(db, viewer(FOUNDER), startup.id)

        with pytest.raises(NotFoundError):
            await service.get_startup(db, viewer(ADMIN), startup.id)

    async def test_investor_cannot_delete(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID)
        with pytest.raises(ForbiddenError):
            await service.delete_startup(db, viewer(INVESTOR), startup.id)


class TestTeamMembers:
    async def test_members_listed_oldest_first(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID)
        early = datetime(2026, 1, 1, tzinfo=timezone.utc)
        db.add_all(
            [
                StartupTeamMember(
                    startup_id=startup.id, name="Second Hire", title="CTO",
                    created_at=early + timedelta(days=1),
                ),
                StartupTeamMember(
                    startup_id=startup.id, name="First Hire", title="CEO", created_at=early
                ),
            ]
        )
        await db.flush()

        detail = await service.get_startup(db, viewer(INVESTOR), startup.id)

        assert [m.name for m in detail.team_members] == ["First Hire", "Second Hire"]

    async def test_owner_adds_updates_and_removes(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID)
        member = await service.add_team_member(
            db,
            viewer(FOUNDER),
            startup.id,
            TeamMemberBody(name="Lena Hart", title="CEO", email="lena@example.com"),
        )
        assert member.email == "lena@example.com"

        updated = await service.update_team_member(
            db, viewer(FOUNDER), startup.id, member.id, TeamMemberBody(name="Lena Hart", title="CTO")
        )
        assert updated.title == "CTO"
        assert updated.email is None

        await service.remove_team_member(db, viewer(ADMIN), startup.id, member.id)
        assert await service.list_team_members(db, startup.id) == []

    async def test_non_owner_forbidden(self, db: AsyncSession, seed_users):
        startup = await make_startup(db, FOUNDER_ID)
        with pytest.raises(ForbiddenError):
            await service.add_team_member(
                db, viewer(OTHER_FOUNDER), startup.id, TeamMemberBody(name="Eve", title="CFO")
            )

    async def test_member_of_other_startup_not_found(self, db: AsyncSession, seed_users):
        mine = await make_startup(db, FOUNDER_ID)
        theirs = await make_startup(db, OTHER_FOUNDER_ID, company_name="Other Co")
        member = await service.add_team_member(
            db, viewer(OTHER_FOUNDER), theirs.id, TeamMemberBody(name="Omar Diaz", title="COO")
        )

        with pytest.raises(NotFoundError, match="Team member not found"):
            await service.update_team_member(
                db, viewer(FOUNDER), mine.id, member.id, TeamMemberBody(name="Omar", title="CEO")
            )
        with pytest.raises(NotFoundError, match="Team member not found"):
            await service.remove_team_member(db, viewer(FOUNDER), mine.id, member.id)

    def test_body_validation(self):
        with pytest.raises(ValidationError):
            TeamMemberBody(name="A", title="CEO")
        with pytest.raises(ValidationError):
            TeamMemberBody(name="Lena Hart", title="CEO", email="not-an-email")
        with pytest.raises(ValidationError):
            TeamMemberBody(name="Lena Hart", title="CEO", linkedin="linkedin.com/in/lena")


# ── API tests ────────────────────────────────────────────────────────────────


async def test_create_startup_over_http(client, login):
    login(FOUNDER)
    payload = _create_body().model_dump(mode="json")

    resp = await client.post("/v1/startups", json=payload)

    assert resp.status_code == 201
    body = resp.json()
    assert body["user_id"] == str(FOUNDER_ID)
    assert body["is_public"] is False
    assert body["stage"] == "early_traction"

    resp = await client.post("/v1/startups", json=payload)
    assert resp.status_code == 409
    assert resp.json()["error"] == "conflict"


async def test_investor_cannot_create_startup(client, login):
    login(INVESTOR)
    resp = await client.post("/v1/startups", json=_create_body().model_dump(mode="json"))
    assert resp.status_code == 403


async def test_create_validation_error_is_422(client, login):
    login(FOUNDER)
    payload = _create_body().model_dump(mode="json")
    payload["team_size"] = 0

    resp = await client.post("/v1/startups", json=payload)

    assert resp.status_code == 422


async def test_list_pagination_envelope(client, db: AsyncSession):
    for i in range(3):
        await make_startup(db, FOUNDER_ID, company_name=f"Startup {i}")

    resp = await client.get("/v1/startups", params={"limit": 2, "page": 1})

    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 3
    assert body["pages"] == 2
    assert body["limit"] == 2
    assert len(body["items"]) == 2


async def test_update_and_delete_over_http(client, login, db: AsyncSession):
    startup = await make_startup(db, FOUNDER_ID)
    login(FOUNDER)

    resp = await client.put(f"/v1/startups/{startup.id}", json={"tagline": None})
    assert resp.status_code == 200
    assert resp.json()["tagline"] is None

    resp = await client.put(f"/v1/startups/{startup.id}", json={})
    assert resp.status_code == 400

    login(OTHER_FOUNDER)
    resp = await client.delete(f"/v1/startups/{startup.id}")
    assert resp.status_code == 403

    login(FOUNDER)
    resp = await client.delete(f"/v1/startups/{startup.id}")
    assert resp.status_code == 204


async def test_team_members_over_http(client, login, db: AsyncSession):
    startup = await make_startup(db, FOUNDER_ID, is_public=False)
    login(FOUNDER)

    resp = await client.post(
        f"/v1/startups/{startup.id}/team-members",
        json={"name": "Lena Hart", "title": "CEO", "linkedin": "https://linkedin.com/in/lena"},
    )
    assert resp.status_code == 201
    member_id = resp.json()["id"]

    resp = await client.get(f"/v1/startups/{startup.id}")
    assert [m["id"] for m in resp.json()["team_members"]] == [member_id]

    resp = await client.put(
        f"/v1/startups/{startup.id}/team-members/{member_id}",
        json={"name": "Lena Hart", "title": "Chief Executive"},
    )
    assert resp.status_code == 200
    assert resp.json()["linkedin"] is None

    login(OTHER_FOUNDER)
    resp = await client.delete(f"/v1/startups/{startup.id}/team-members/{member_id}")
    assert resp.status_code == 403

    login(FOUNDER)
    resp = await client.delete(f"/v1/startups/{startup.id}/team-members/{member_id}")
    assert resp.status_code == 204
