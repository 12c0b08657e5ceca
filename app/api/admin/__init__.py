"""관리자 API 라우터 패키지 — 관리자 엔드포인트 통합.

Admin API Router package — Aggregates the admin-facing endpoints into a
single router for inclusion in the FastAPI application.

Included routers:
    - shift_templates: 근무 템플릿 및 배정 관리 (Shift templates and assignments)
"""

from fastapi import APIRouter

from app.api.admin.shift_templates import router as shift_templates_router

admin_router: APIRouter = APIRouter()

# 근무 템플릿: /shift-templates 하위 (Shift templates, assignments nested below)
admin_router.include_router(shift_templates_router, prefix="/shift-templates", tags=["Shift Templates"])
