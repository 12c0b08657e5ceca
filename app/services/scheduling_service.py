"""근무 스케줄링 서비스 — 근무 템플릿 CRUD 및 배정 오케스트레이션.

Scheduling Service — Orchestrates shift template CRUD and assignments.
Normalizes client wall-clock times to UTC before storage, shapes responses
with computed total hours and assigned users, and applies the template
delete policy.
"""

from datetime import date, datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.shift import ShiftAssignment, ShiftTemplate
from app.models.user import User
from app.repositories.shift_template_repository import shift_template_repository
from app.schemas.shift_template import (
    AssignedUserResponse,
    BulkAssignResult,
    MyShiftResponse,
    MyShiftTemplate,
    ShiftAssignmentResponse,
    ShiftTemplateCreate,
    ShiftTemplateResponse,
    ShiftTemplateUpdate,
)
from app.services.shift_assignment_service import shift_assignment_service
from app.utils.duration import total_hours
from app.utils.exceptions import BadRequestError, DuplicateError, NotFoundError
from app.utils.recurrence import applicable
from app.utils.time_normalizer import ensure_utc, to_utc

# shift_templates.title 컬럼 길이 (Column length of shift_templates.title)
TITLE_MAX_LENGTH: int = 255

class SchedulingService:
    """근무 템플릿과 배정 흐름을 처리하는 서비스.

    Service handling shift template and assignment flows for the admin and
    employee surfaces.
    """

    def _normalize(self, value: datetime, tz_name: str | None) -> datetime:
        try:
            return to_utc(value, tz_name)
        except ValueError as exc:
            raise BadRequestError(str(exc)) from None

    def _clean_title(self, title: str) -> str:
        cleaned: str = title.strip()
        if not cleaned:
            raise BadRequestError("title must not be empty")
        if len(cleaned) > TITLE_MAX_LENGTH:
            raise BadRequestError(f"title must be at most {TITLE_MAX_LENGTH} characters")
        return cleaned

    def to_template_response(self, template: ShiftTemplate) -> ShiftTemplateResponse:
        """근무 템플릿 모델을 응답 스키마로 변환합니다.

        Convert a ShiftTemplate (assignments and users loaded) into its
        response, including total hours and assigned users.

        Args:
            template: 근무 템플릿 모델 (ShiftTemplate with assignments loaded)

        Returns:
            ShiftTemplateResponse: 근무 템플릿 응답 (Template response)
        """
        assigned: list[AssignedUserResponse] = [
            AssignedUserResponse(
                id=str(a.user_id),
                full_name=a.user.full_name if a.user is not None else "",
                recurrence=a.recurrence,
            )
            for a in template.assignments
        ]
        return ShiftTemplateResponse(
            id=str(template.id),
            company_id=str(template.company_id),
            title=template.title,
            start_time=ensure_utc(template.start_time),
            end_time=ensure_utc(template.end_time),
            total_hours=total_hours(template.start_time, template.end_time),
            assigned_users=assigned,
            created_at=ensure_utc(template.created_at),
            updated_at=ensure_utc(template.updated_at),
        )

    async def list_templates(
        self,
        db: AsyncSession,
        company_id: UUID,
    ) -> list[ShiftTemplateResponse]:
        """회사의 근무 템플릿 목록을 조회합니다.

        List every template of the company, oldest first.
        """
        templates: list[ShiftTemplate] = await shift_template_repository.list_by_company(
            db, company_id
        )
        return [self.to_template_response(t) for t in templates]

    async def get_template(
        self,
        db: AsyncSession,
        company_id: UUID,
        template_id: UUID,
    ) -> ShiftTemplateResponse:
        """근무 템플릿 상세를 조회합니다.

        Raises:
            NotFoundError: 템플릿이 없거나 다른 회사 소유 (Absent or owned elsewhere)
        """
        template: ShiftTemplate | None = await shift_template_repository.get_for_company(
            db, company_id, template_id
        )
        if template is None:
            raise NotFoundError("Shift template not found")
        return self.to_template_response(template)

    async def create_template(
        self,
        db: AsyncSession,
        company_id: UUID,
        data: ShiftTemplateCreate,
    ) -> ShiftTemplateResponse:
        """새 근무 템플릿을 생성합니다.

        Create a template. Offset-less start/end values are read in
        ``data.timezone`` (or the default zone) and stored as UTC.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            company_id: 소유 회사 UUID (Owning company UUID)
            data: 템플릿 생성 데이터 (Template creation data)

        Returns:
            ShiftTemplateResponse: 생성된 템플릿 (Created template)

        Raises:
            BadRequestError: 빈 제목 또는 알 수 없는 시간대 (Empty title or unknown zone)
        """
        title: str = self._clean_title(data.title)
        start_time: datetime = self._normalize(data.start_time, data.timezone)
        end_time: datetime = self._normalize(data.end_time, data.timezone)

        template: ShiftTemplate = await shift_template_repository.create_for_company(
            db, company_id, title, start_time, end_time
        )
        return self.to_template_response(template)

    async def update_template(
        self,
        db: AsyncSession,
        company_id: UUID,
        template_id: UUID,
        data: ShiftTemplateUpdate,
    ) -> ShiftTemplateResponse:
        """근무 템플릿을 부분 수정합니다.

        Apply a partial update. Omitted fields keep their stored value.

        Raises:
            BadRequestError: 빈 제목 또는 알 수 없는 시간대 (Empty title or unknown zone)
            NotFoundError: 템플릿이 없거나 다른 회사 소유 (Absent or owned elsewhere)
        """
        patch: dict = {}
        if data.title is not None:
            patch["title"] = self._clean_title(data.title)
        if data.start_time is not None:
            patch["start_time"] = self._normalize(data.start_time, data.timezone)
        if data.end_time is not None:
            patch["end_time"] = self._normalize(data.end_time, data.timezone)

        template: ShiftTemplate | None = await shift_template_repository.update_for_company(
            db, company_id, template_id, patch
        )
        if template is None:
            raise NotFoundError("Shift template not found")
        return self.to_template_response(template)

    async def delete_template(
        self,
        db: AsyncSession,
        company_id: UUID,
        template_id: UUID,
    ) -> None:
        """근무 템플릿을 삭제합니다.

        Delete a template. Under the ``cascade`` policy its assignments go
        with it; under ``restrict`` a template that still has assignments
        is kept and DuplicateError (409) is raised.

        Raises:
            NotFoundError: 템플릿이 없거나 다른 회사 소유 (Absent or owned elsewhere)
            DuplicateError: restrict 정책에서 배정이 남아 있을 때 (Assignments remain under restrict)
        """
        template: ShiftTemplate | None = await shift_template_repository.get_for_company(
            db, company_id, template_id
        )
        if template is None:
            raise NotFoundError("Shift template not found")
        if settings.TEMPLATE_DELETE_POLICY == "restrict" and template.assignments:
            raise DuplicateError("Shift template still has assignments")

        await shift_template_repository.delete_for_company(db, company_id, template_id, loaded=template)

    async def assign(
        self,
        db: AsyncSession,
        company_id: UUID,
        template_id: UUID,
        user_id: UUID,
        recurrence: str,
        assigned_by: UUID | None,
    ) -> tuple[ShiftAssignmentResponse, bool]:
        """직원 배정 — Assign one user; returns (authoritative row, created)."""
        assignment, created = await shift_assignment_service.assign(
            db, company_id, template_id, user_id, recurrence, assigned_by
        )
        return shift_assignment_service.to_response(assignment), created

    async def assign_all(
        self,
        db: AsyncSession,
        company_id: UUID,
        template_id: UUID,
        recurrence: str,
        assigned_by: UUID | None,
        exclude_roles: list[str] | None = None,
    ) -> BulkAssignResult:
        return await shift_assignment_service.assign_all(
            db, company_id, template_id, recurrence, assigned_by, exclude_roles
        )

    async def list_assigned_users(
        self,
        db: AsyncSession,
        company_id: UUID,
        template_id: UUID,
    ) -> list[AssignedUserResponse]:
        pairs = await shift_assignment_service.list_assigned_users(db, company_id, template_id)
        return [
            AssignedUserResponse(id=str(user.id), full_name=user.full_name, recurrence=rule.value)
            for user, rule in pairs
        ]

    async def remove_assignment(
        self,
        db: AsyncSession,
        company_id: UUID,
        template_id: UUID,
        user_id: UUID,
    ) -> None:
        await shift_assignment_service.remove(db, company_id, template_id, user_id)

    async def my_shifts(
        self,
        db: AsyncSession,
        user: User,
        on: date | None = None,
    ) -> list[MyShiftResponse]:
        """내 근무 목록을 조회합니다.

        List the acting user's assigned templates. When ``on`` (a calendar
        date in the user's zone) is given, only assignments whose recurrence
        applies that day are returned.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user: 요청 직원 (Acting user)
            on: 필터 날짜, None이면 전체 (Filter date; None returns all)

        Returns:
            list[MyShiftResponse]: 배정된 근무 목록 (Assigned shifts)
        """
        assignments: list[ShiftAssignment] = await shift_assignment_service.list_for_user(db, user)
        if on is not None:
            assignments = applicable(((a, a.recurrence) for a in assignments), on)

        result: list[MyShiftResponse] = []
        for a in assignments:
            template: ShiftTemplate = a.shift_template
            result.append(
                MyShiftResponse(
                    shift_template=MyShiftTemplate(
                        id=str(template.id),
                        title=template.title,
                        start_time=ensure_utc(template.start_time),
                        end_time=ensure_utc(template.end_time),
                        total_hours=total_hours(template.start_time, template.end_time),
                    ),
                    recurrence=a.recurrence,
                )
            )
        return result


scheduling_service: SchedulingService = SchedulingService()
