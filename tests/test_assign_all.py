"""회사 전체 일괄 배정 API 테스트.

Assign-all API tests — per-user independent writes, partial failure,
role exclusion policy.
"""

import uuid

from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from app.config import settings
from app.models.shift import ShiftAssignment
from app.repositories.shift_assignment_repository import shift_assignment_repository
from tests.conftest import auth_header, make_user

URL = "/api/v1/admin/shift-templates"

MORNING = {
    "title": "Morning",
    "startTime": "2024-01-01T09:00:00Z",
    "endTime": "2024-01-01T17:00:00Z",
}


async def assigned_user_ids(db) -> set[str]:
    rows = (await db.execute(select(ShiftAssignment.user_id))).scalars().all()
    return {str(r) for r in rows}


class TestAssignAll:
    """일괄 배정."""

    async def test_assigns_every_active_user(self, client: AsyncClient, db, company, roles, admin_user):
        staff = [await make_user(db, company, roles["user"], f"Staff {i}") for i in range(3)]
        inactive = await make_user(db, company, roles["user"], "Former Staff")
        inactive.is_active = False
        await db.commit()

        headers = auth_header(admin_user)
        expected = {str(admin_user.id), *(str(u.id) for u in staff)}
        inactive_id = str(inactive.id)

        template_id = (await client.post(URL, json=MORNING, headers=headers)).json()["data"]["id"]
        res = await client.post(f"{URL}/{template_id}/assign-all", json={"recurrence": "weekdays"}, headers=headers)
        assert res.status_code == 200
        data = res.json()["data"]
        assert data["recurrence"] == "weekdays"
        assert {a["userId"] for a in data["succeeded"]} == expected
        assert data["failed"] == []
        assert data["skipped"] == []
        assert inactive_id not in await assigned_user_ids(db)

    async def test_rerun_updates_recurrence(self, client: AsyncClient, db, admin_user, staff_user):
        headers = auth_header(admin_user)
        template_id = (await client.post(URL, json=MORNING, headers=headers)).json()["data"]["id"]
        await client.post(f"{URL}/{template_id}/assign-all", json={"recurrence": "weekdays"}, headers=headers)
        res = await client.post(f"{URL}/{template_id}/assign-all", json={"recurrence": "all"}, headers=headers)

        assert res.status_code == 200
        rows = (await db.execute(select(ShiftAssignment.recurrence))).scalars().all()
        assert sorted(rows) == ["all", "all"]

    async def test_partial_failure_keeps_other_assignments(
        self, client: AsyncClient, db, company, roles, admin_user, monkeypatch
    ):
        """5명 중 1명 저장 실패 — 4명은 저장, 1명은 실패로 보고."""
        users = [await make_user(db, company, roles["user"], f"Staff {i}") for i in range(4)]
        user_ids = [str(admin_user.id), *(str(u.id) for u in users)]
        failing_id = user_ids[2]
        headers = auth_header(admin_user)

        template_id = (await client.post(URL, json=MORNING, headers=headers)).json()["data"]["id"]

        original_upsert = shift_assignment_repository.upsert

        async def flaky_upsert(session, shift_template_id, user_id, recurrence, assigned_by):
            if str(user_id) == failing_id:
                raise OperationalError("INSERT INTO shift_assignments", {}, Exception("disk I/O error"))
            return await original_upsert(session, shift_template_id, user_id, recurrence, assigned_by)

        monkeypatch.setattr(shift_assignment_repository, "upsert", flaky_upsert)

        res = await client.post(f"{URL}/{template_id}/assign-all", json={"recurrence": "weekdays"}, headers=headers)
        assert res.status_code == 200
        data = res.json()["data"]
        assert len(data["succeeded"]) == 4
        assert data["failed"] == [{"userId": failing_id, "reason": "Storage rejected the assignment"}]

        persisted = await assigned_user_ids(db)
        assert persisted == set(user_ids) - {failing_id}

    async def test_request_excluded_roles_are_skipped(self, client: AsyncClient, db, admin_user, supervisor_user, staff_user):
        headers = auth_header(admin_user)
        admin_id, supervisor_id, staff_id = str(admin_user.id), str(supervisor_user.id), str(staff_user.id)

        template_id = (await client.post(URL, json=MORNING, headers=headers)).json()["data"]["id"]
        res = await client.post(f"{URL}/{template_id}/assign-all",
                                json={"recurrence": "all", "excludeRoles": ["admin", "supervisor"]},
                                headers=headers)
        data = res.json()["data"]
        assert [a["userId"] for a in data["succeeded"]] == [staff_id]
        assert set(data["skipped"]) == {admin_id, supervisor_id}
        assert await assigned_user_ids(db) == {staff_id}

    async def test_configured_excluded_roles(self, client: AsyncClient, admin_user, staff_user, monkeypatch):
        monkeypatch.setattr(settings, "ASSIGN_ALL_EXCLUDED_ROLES", ["admin"])
        headers = auth_header(admin_user)
        staff_id = str(staff_user.id)

        template_id = (await client.post(URL, json=MORNING, headers=headers)).json()["data"]["id"]
        res = await client.post(f"{URL}/{template_id}/assign-all", json={"recurrence": "all"}, headers=headers)
        assert [a["userId"] for a in res.json()["data"]["succeeded"]] == [staff_id]

    async def test_invalid_recurrence_writes_nothing(self, client: AsyncClient, db, admin_user, staff_user):
        headers = auth_header(admin_user)
        template_id = (await client.post(URL, json=MORNING, headers=headers)).json()["data"]["id"]
        res = await client.post(f"{URL}/{template_id}/assign-all", json={"recurrence": "biweekly"}, headers=headers)
        assert res.status_code == 400
        assert await assigned_user_ids(db) == set()

    async def test_requires_admin(self, client: AsyncClient, admin_user, supervisor_user):
        template_id = (await client.post(URL, json=MORNING, headers=auth_header(admin_user))).json()["data"]["id"]
        res = await client.post(f"{URL}/{template_id}/assign-all", json={"recurrence": "all"},
                                headers=auth_header(supervisor_user))
        assert res.status_code == 403

    async def test_unknown_template(self, client: AsyncClient, db, admin_user, staff_user):
        res = await client.post(f"{URL}/{uuid.uuid4()}/assign-all", json={"recurrence": "all"},
                                headers=auth_header(admin_user))
        assert res.status_code == 404
        assert res.json()["detail"] == "Shift template not found"
        assert await assigned_user_ids(db) == set()

    async def test_other_company_template(self, client: AsyncClient, db, admin_user, staff_user, other_admin):
        """다른 회사 템플릿은 없는 템플릿과 동일하게 404."""
        template_id = (await client.post(URL, json=MORNING, headers=auth_header(other_admin))).json()["data"]["id"]
        res = await client.post(f"{URL}/{template_id}/assign-all", json={"recurrence": "all"},
                                headers=auth_header(admin_user))
        assert res.status_code == 404
        assert res.json()["detail"] == "Shift template not found"
        assert await assigned_user_ids(db) == set()
