"""근무 템플릿 / 근무 배정 Pydantic 스키마.

Shift template and shift assignment request/response schemas.
startTime/endTime are ISO-8601; values without an offset are read in the
request's ``timezone`` (or the server default) and stored as UTC.
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from app.schemas.common import CamelModel


# === 근무 템플릿 (Shift Template) 요청 스키마 ===

class ShiftTemplateCreate(CamelModel):
    """근무 템플릿 생성 요청 스키마.

    Attributes:
        title: 템플릿 제목 (Display title, required)
        start_time: 시작 시각 ISO-8601 (Start time)
        end_time: 종료 시각 ISO-8601 (End time; earlier than start = overnight)
        timezone: 오프셋 없는 값 해석용 IANA 시간대 (Zone for offset-less values)
    """

    title: str
    start_time: datetime
    end_time: datetime
    timezone: str | None = None


class ShiftTemplateUpdate(CamelModel):
    """근무 템플릿 수정 요청 스키마 (부분 업데이트).

    Partial update; omitted fields keep their stored value.
    """

    title: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    timezone: str | None = None


# === 근무 배정 (Shift Assignment) 요청 스키마 ===

class AssignShiftRequest(CamelModel):
    """단일 직원 배정 요청 — recurrence는 서비스에서 검증 (validated by the service)."""

    user_id: UUID
    recurrence: str


class AssignAllRequest(CamelModel):
    """회사 전체 직원 배정 요청.

    Attributes:
        recurrence: 반복 규칙 (Recurrence tag)
        exclude_roles: 제외할 역할 이름, None이면 서버 설정 사용
                       (Role names to skip; None falls back to server policy)
    """

    recurrence: str
    exclude_roles: list[str] | None = None


# === 응답 스키마 ===

class AssignedUserResponse(CamelModel):
    """템플릿에 배정된 직원 — A user attached to a template with its recurrence."""

    id: str
    full_name: str
    recurrence: str


class ShiftTemplateResponse(CamelModel):
    """근무 템플릿 응답 스키마 — 계산된 총 근무 시간 포함.

    Attributes:
        total_hours: 근무 시간, 자정 넘김 반영 (Duration in hours, overnight aware)
        assigned_users: 배정된 직원 목록 (Assigned users with recurrence)
    """

    id: str
    company_id: str
    title: str
    start_time: datetime
    end_time: datetime
    total_hours: float
    assigned_users: list[AssignedUserResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class ShiftAssignmentResponse(CamelModel):
    """근무 배정 응답 스키마 — Authoritative assignment row."""

    id: str
    shift_template_id: str
    user_id: str
    assigned_by: str | None = None
    recurrence: str
    created_at: datetime
    updated_at: datetime


class BulkAssignFailure(CamelModel):
    user_id: str
    reason: str


class BulkAssignResult(CamelModel):
    """일괄 배정 결과 — 직원별 성공/실패/제외 내역.

    Per-user outcome of assign-all. Successful pairs stay committed even
    when others fail.
    """

    recurrence: str
    succeeded: list[ShiftAssignmentResponse] = Field(default_factory=list)
    failed: list[BulkAssignFailure] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)


class MyShiftTemplate(CamelModel):
    id: str
    title: str
    start_time: datetime
    end_time: datetime
    total_hours: float


class MyShiftResponse(CamelModel):
    """내 근무 — A template assigned to the acting user, with its recurrence."""

    shift_template: MyShiftTemplate
    recurrence: str
