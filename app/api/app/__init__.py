"""앱 API 라우터 패키지 — 직원용 엔드포인트 통합.

App API Router package — Aggregates the employee-facing endpoints into a
single router for inclusion in the FastAPI application.

Included routers:
    - my_shifts: 내 근무 (My assigned shift templates)
"""

from fastapi import APIRouter

from app.api.app.my_shifts import router as my_shifts_router

app_router: APIRouter = APIRouter()

# 내 근무: /my/shifts (My shifts, optionally filtered by date)
app_router.include_router(my_shifts_router, prefix="/my", tags=["My Shifts"])
