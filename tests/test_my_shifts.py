"""앱 내 근무 API 테스트.

My shifts API tests — the acting employee's templates filtered by date.
2024-01-05 is a Friday, 2024-01-06 a Saturday.
"""

from datetime import date

from httpx import AsyncClient

from tests.conftest import auth_header

ADMIN_URL = "/api/v1/admin/shift-templates"
MY_URL = "/api/v1/app/my/shifts"


async def setup_shifts(client: AsyncClient, admin, staff) -> None:
    """평일 Morning(22:00Z→06:00Z), 주말 Weekend Day(09:00Z→17:00Z) 배정."""
    headers = auth_header(admin)
    for title, start, end, rule in (
        ("Morning", "2024-01-01T22:00:00Z", "2024-01-02T06:00:00Z", "weekdays"),
        ("Weekend Day", "2024-01-06T09:00:00Z", "2024-01-06T17:00:00Z", "weekends"),
    ):
        res = await client.post(ADMIN_URL, json={"title": title, "startTime": start, "endTime": end}, headers=headers)
        template_id = res.json()["data"]["id"]
        await client.post(f"{ADMIN_URL}/{template_id}/assign",
                          json={"userId": str(staff.id), "recurrence": rule}, headers=headers)


class TestMyShifts:
    """내 근무 조회."""

    async def test_lists_all_assignments(self, client: AsyncClient, admin_user, staff_user):
        await setup_shifts(client, admin_user, staff_user)
        res = await client.get(MY_URL, headers=auth_header(staff_user))
        assert res.status_code == 200
        data = res.json()["data"]
        assert [(s["shiftTemplate"]["title"], s["recurrence"]) for s in data] == [
            ("Morning", "weekdays"),
            ("Weekend Day", "weekends"),
        ]
        assert data[0]["shiftTemplate"]["totalHours"] == 8.0

    async def test_filter_by_weekday(self, client: AsyncClient, admin_user, staff_user):
        await setup_shifts(client, admin_user, staff_user)
        res = await client.get(MY_URL, params={"on": "2024-01-05"}, headers=auth_header(staff_user))
        assert [s["shiftTemplate"]["title"] for s in res.json()["data"]] == ["Morning"]

    async def test_filter_by_weekend(self, client: AsyncClient, admin_user, staff_user):
        await setup_shifts(client, admin_user, staff_user)
        res = await client.get(MY_URL, params={"on": "2024-01-06"}, headers=auth_header(staff_user))
        assert [s["shiftTemplate"]["title"] for s in res.json()["data"]] == ["Weekend Day"]

    async def test_today_uses_local_date(self, client: AsyncClient, admin_user, staff_user, monkeypatch):
        calls: list[str | None] = []

        def fake_local_today(tz_name=None, now=None):
            calls.append(tz_name)
            return date(2024, 1, 6)

        monkeypatch.setattr("app.api.app.my_shifts.local_today", fake_local_today)
        await setup_shifts(client, admin_user, staff_user)

        res = await client.get(MY_URL, params={"today": "true", "tz": "Asia/Seoul"}, headers=auth_header(staff_user))
        assert [s["shiftTemplate"]["title"] for s in res.json()["data"]] == ["Weekend Day"]
        assert calls == ["Asia/Seoul"]

    async def test_today_with_unknown_timezone(self, client: AsyncClient, staff_user):
        res = await client.get(MY_URL, params={"today": "true", "tz": "Atlantis/Capital"},
                               headers=auth_header(staff_user))
        assert res.status_code == 400

    async def test_invalid_date(self, client: AsyncClient, staff_user):
        res = await client.get(MY_URL, params={"on": "not-a-date"}, headers=auth_header(staff_user))
        assert res.status_code == 400

    async def test_no_assignments(self, client: AsyncClient, staff_user):
        res = await client.get(MY_URL, headers=auth_header(staff_user))
        assert res.status_code == 200
        assert res.json() == {"message": "OK", "data": []}

    async def test_other_company_user_sees_nothing(self, client: AsyncClient, admin_user, staff_user, other_admin):
        await setup_shifts(client, admin_user, staff_user)
        res = await client.get(MY_URL, headers=auth_header(other_admin))
        assert res.json()["data"] == []
