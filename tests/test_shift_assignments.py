"""근무 배정 API 테스트.

Shift assignment API tests — idempotent assignment, validation, tenant
scoping, removal and concurrent duplicate prevention.
"""

import asyncio
import uuid

from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from app.models.shift import ShiftAssignment
from app.repositories.shift_assignment_repository import shift_assignment_repository
from app.services.shift_assignment_service import shift_assignment_service
from tests.conftest import auth_header, make_user

URL = "/api/v1/admin/shift-templates"

MORNING = {
    "title": "Morning",
    "startTime": "2024-01-01T22:00:00Z",
    "endTime": "2024-01-02T06:00:00Z",
}


async def create_template(client: AsyncClient, user) -> str:
    res = await client.post(URL, json=MORNING, headers=auth_header(user))
    return res.json()["data"]["id"]


async def count_assignments(db) -> int:
    return (await db.execute(select(func.count()).select_from(ShiftAssignment))).scalar_one()


class TestAssign:
    """단일 직원 배정."""

    async def test_assign_then_reassign_is_idempotent(self, client: AsyncClient, db, admin_user, staff_user):
        """첫 배정 201, 재배정 200 — 행은 하나, 반복 규칙만 갱신."""
        template_id = await create_template(client, admin_user)

        first = await client.post(f"{URL}/{template_id}/assign",
                                  json={"userId": str(staff_user.id), "recurrence": "weekdays"},
                                  headers=auth_header(admin_user))
        assert first.status_code == 201
        assert first.json()["data"]["recurrence"] == "weekdays"
        assert first.json()["data"]["assignedBy"] == str(admin_user.id)

        second = await client.post(f"{URL}/{template_id}/assign",
                                   json={"userId": str(staff_user.id), "recurrence": "weekends"},
                                   headers=auth_header(admin_user))
        assert second.status_code == 200
        assert second.json()["data"]["recurrence"] == "weekends"
        assert second.json()["data"]["id"] == first.json()["data"]["id"]

        assert await count_assignments(db) == 1

    async def test_supervisor_can_assign(self, client: AsyncClient, admin_user, supervisor_user, staff_user):
        template_id = await create_template(client, admin_user)
        res = await client.post(f"{URL}/{template_id}/assign",
                                json={"userId": str(staff_user.id), "recurrence": "all"},
                                headers=auth_header(supervisor_user))
        assert res.status_code == 201

    async def test_unknown_recurrence(self, client: AsyncClient, db, admin_user, staff_user):
        template_id = await create_template(client, admin_user)
        res = await client.post(f"{URL}/{template_id}/assign",
                                json={"userId": str(staff_user.id), "recurrence": "daily"},
                                headers=auth_header(admin_user))
        assert res.status_code == 400
        assert "weekdays" in res.json()["detail"]
        assert await count_assignments(db) == 0

    async def test_unknown_template(self, client: AsyncClient, admin_user, staff_user):
        res = await client.post(f"{URL}/{uuid.uuid4()}/assign",
                                json={"userId": str(staff_user.id), "recurrence": "all"},
                                headers=auth_header(admin_user))
        assert res.status_code == 404

    async def test_user_from_other_company(self, client: AsyncClient, admin_user, other_admin):
        template_id = await create_template(client, admin_user)
        res = await client.post(f"{URL}/{template_id}/assign",
                                json={"userId": str(other_admin.id), "recurrence": "all"},
                                headers=auth_header(admin_user))
        assert res.status_code == 404
        assert res.json()["detail"] == "User not found"

    async def test_template_from_other_company(self, client: AsyncClient, admin_user, other_admin, staff_user):
        template_id = await create_template(client, other_admin)
        res = await client.post(f"{URL}/{template_id}/assign",
                                json={"userId": str(staff_user.id), "recurrence": "all"},
                                headers=auth_header(admin_user))
        assert res.status_code == 404
        assert res.json()["detail"] == "Shift template not found"

    async def test_storage_conflict_is_409(self, client: AsyncClient, db, admin_user, staff_user, monkeypatch):
        """저장소 무결성 충돌은 409, 이후 요청은 정상 처리."""
        headers = auth_header(admin_user)
        staff_id = str(staff_user.id)
        template_id = await create_template(client, admin_user)

        original_upsert = shift_assignment_repository.upsert
        calls: list[str] = []

        async def conflicting_upsert(session, shift_template_id, user_id, recurrence, assigned_by):
            calls.append(str(user_id))
            if len(calls) == 1:
                raise IntegrityError("INSERT INTO shift_assignments", {}, Exception("UNIQUE constraint failed"))
            return await original_upsert(session, shift_template_id, user_id, recurrence, assigned_by)

        monkeypatch.setattr(shift_assignment_repository, "upsert", conflicting_upsert)

        res = await client.post(f"{URL}/{template_id}/assign",
                                json={"userId": staff_id, "recurrence": "weekdays"}, headers=headers)
        assert res.status_code == 409
        assert await count_assignments(db) == 0

        # 롤백 후에도 세션 사용 가능: The same session serves the next request
        res = await client.post(f"{URL}/{template_id}/assign",
                                json={"userId": staff_id, "recurrence": "weekdays"}, headers=headers)
        assert res.status_code == 201
        assert res.json()["data"]["userId"] == staff_id
        assert await count_assignments(db) == 1


class TestAssignmentsListAndRemove:
    """배정 목록 조회 및 해제."""

    async def test_list_assignments(self, client: AsyncClient, admin_user, staff_user, supervisor_user):
        template_id = await create_template(client, admin_user)
        for user, rule in ((staff_user, "weekdays"), (supervisor_user, "weekends")):
            await client.post(f"{URL}/{template_id}/assign",
                              json={"userId": str(user.id), "recurrence": rule},
                              headers=auth_header(admin_user))

        res = await client.get(f"{URL}/{template_id}/assignments", headers=auth_header(admin_user))
        assert res.status_code == 200
        assert res.json()["data"] == [
            {"id": str(staff_user.id), "fullName": "Test Staff", "recurrence": "weekdays"},
            {"id": str(supervisor_user.id), "fullName": "Test Supervisor", "recurrence": "weekends"},
        ]

    async def test_remove_assignment(self, client: AsyncClient, db, admin_user, staff_user):
        template_id = await create_template(client, admin_user)
        await client.post(f"{URL}/{template_id}/assign",
                          json={"userId": str(staff_user.id), "recurrence": "all"},
                          headers=auth_header(admin_user))

        res = await client.delete(f"{URL}/{template_id}/assignments/{staff_user.id}",
                                  headers=auth_header(admin_user))
        assert res.status_code == 200
        assert await count_assignments(db) == 0

        # 두 번째 해제는 404: Removing again is a 404
        res = await client.delete(f"{URL}/{template_id}/assignments/{staff_user.id}",
                                  headers=auth_header(admin_user))
        assert res.status_code == 404
        assert res.json()["detail"] == "Assignment not found"

    async def test_remove_unknown_user(self, client: AsyncClient, admin_user):
        template_id = await create_template(client, admin_user)
        res = await client.delete(f"{URL}/{template_id}/assignments/{uuid.uuid4()}",
                                  headers=auth_header(admin_user))
        assert res.status_code == 404

    async def test_remove_on_other_company_template(self, client: AsyncClient, db, admin_user, other_admin):
        """다른 회사 템플릿의 배정은 해제 불가 — 404, 배정 유지."""
        template_id = await create_template(client, other_admin)
        await client.post(f"{URL}/{template_id}/assign",
                          json={"userId": str(other_admin.id), "recurrence": "all"},
                          headers=auth_header(other_admin))

        res = await client.delete(f"{URL}/{template_id}/assignments/{other_admin.id}",
                                  headers=auth_header(admin_user))
        assert res.status_code == 404
        assert res.json()["detail"] == "Shift template not found"
        assert await count_assignments(db) == 1

        res = await client.get(f"{URL}/{template_id}/assignments", headers=auth_header(other_admin))
        assert [u["id"] for u in res.json()["data"]] == [str(other_admin.id)]


class TestMorningScenario:
    """자정을 넘는 Morning 템플릿 — 생성, 평일 배정, 조회."""

    async def test_create_assign_read(self, client: AsyncClient, admin_user, staff_user):
        template_id = await create_template(client, admin_user)
        res = await client.post(f"{URL}/{template_id}/assign",
                                json={"userId": str(staff_user.id), "recurrence": "weekdays"},
                                headers=auth_header(admin_user))
        assert res.status_code == 201

        res = await client.get(f"{URL}/{template_id}", headers=auth_header(admin_user))
        data = res.json()["data"]
        assert data["totalHours"] == 8.0
        assert data["assignedUsers"] == [
            {"id": str(staff_user.id), "fullName": "Test Staff", "recurrence": "weekdays"}
        ]


class TestConcurrentAssign:
    """동시 배정 — 동일 조합은 한 행만 남음."""

    async def test_two_simultaneous_assigns_leave_one_row(
        self, client: AsyncClient, db, session_factory, company, roles, admin_user
    ):
        template_id = uuid.UUID(await create_template(client, admin_user))
        worker = await make_user(db, company, roles["user"], "Concurrent Worker")
        company_id, worker_id, admin_id = company.id, worker.id, admin_user.id

        async def assign(rule: str) -> bool:
            async with session_factory() as session:
                _, created = await shift_assignment_service.assign(
                    session, company_id, template_id, worker_id, rule, admin_id
                )
                await session.commit()
                return created

        results = await asyncio.gather(assign("weekdays"), assign("weekends"))

        assert sorted(results) == [False, True]
        assert await count_assignments(db) == 1
