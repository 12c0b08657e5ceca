"""근무 배정 서비스 — 직원 ↔ 근무 템플릿 배정 비즈니스 로직.

Shift Assignment Service — Business logic for binding users to shift templates.
Enforces one assignment per (template, user), idempotent recurrence updates,
tenant-scoped lookups, and per-user independent bulk assignment.
"""

import logging
from collections.abc import Iterable
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.shift import ShiftAssignment, ShiftTemplate
from app.models.user import User
from app.repositories.shift_assignment_repository import shift_assignment_repository
from app.repositories.shift_template_repository import shift_template_repository
from app.repositories.user_repository import user_repository
from app.schemas.shift_template import (
    BulkAssignFailure,
    BulkAssignResult,
    ShiftAssignmentResponse,
)
from app.utils.exceptions import BadRequestError, DuplicateError, NotFoundError
from app.utils.recurrence import Recurrence, parse_recurrence
from app.utils.time_normalizer import ensure_utc

logger = logging.getLogger(__name__)


class ShiftAssignmentService:
    """근무 배정 서비스.

    Shift assignment service. Validation (recurrence, template, user) always
    runs before any write.
    """

    def _parse_recurrence(self, value: Recurrence | str) -> Recurrence:
        try:
            return parse_recurrence(value)
        except ValueError as exc:
            raise BadRequestError(str(exc)) from None

    async def _get_template(
        self, db: AsyncSession, company_id: UUID, template_id: UUID
    ) -> ShiftTemplate:
        template: ShiftTemplate | None = await shift_template_repository.get_by_id(
            db, template_id, company_id
        )
        if template is None:
            raise NotFoundError("Shift template not found")
        return template

    async def _get_user(
        self, db: AsyncSession, company_id: UUID, user_id: UUID
    ) -> User:
        user: User | None = await user_repository.get_by_id(db, user_id, company_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def to_response(self, assignment: ShiftAssignment) -> ShiftAssignmentResponse:
        return ShiftAssignmentResponse(
            id=str(assignment.id),
            shift_template_id=str(assignment.shift_template_id),
            user_id=str(assignment.user_id),
            assigned_by=str(assignment.assigned_by) if assignment.assigned_by else None,
            recurrence=assignment.recurrence,
            created_at=ensure_utc(assignment.created_at),
            updated_at=ensure_utc(assignment.updated_at),
        )

    async def assign(
        self,
        db: AsyncSession,
        company_id: UUID,
        template_id: UUID,
        user_id: UUID,
        recurrence: Recurrence | str,
        assigned_by: UUID | None,
    ) -> tuple[ShiftAssignment, bool]:
        """직원에게 근무 템플릿을 배정합니다 (멱등).

        Assign a template to a user. A second call for the same pair
        updates the recurrence of the existing row instead of adding one.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            company_id: 요청자 회사 UUID (Acting company UUID)
            template_id: 템플릿 UUID (Template UUID)
            user_id: 배정 대상 직원 UUID (Target user UUID)
            recurrence: 반복 규칙 (Recurrence tag)
            assigned_by: 배정 수행자 UUID (Acting user UUID)

        Returns:
            tuple[ShiftAssignment, bool]: (배정, 신규 생성 여부)
                                          (Assignment, whether it was newly created)

        Raises:
            BadRequestError: 알 수 없는 반복 규칙 (Unknown recurrence)
            NotFoundError: 템플릿/직원이 없거나 다른 회사 소유 (Template/user absent or foreign)
            DuplicateError: upsert로 해결되지 않은 저장소 충돌 (Unresolved storage conflict)
        """
        rule: Recurrence = self._parse_recurrence(recurrence)
        await self._get_template(db, company_id, template_id)
        await self._get_user(db, company_id, user_id)

        try:
            return await shift_assignment_repository.upsert(
                db, template_id, user_id, rule, assigned_by
            )
        except IntegrityError:
            await db.rollback()
            raise DuplicateError("Assignment conflicts with a concurrent change")

    async def assign_all(
        self,
        db: AsyncSession,
        company_id: UUID,
        template_id: UUID,
        recurrence: Recurrence | str,
        assigned_by: UUID | None,
        exclude_roles: Iterable[str] | None = None,
    ) -> BulkAssignResult:
        """회사의 모든 활성 직원에게 템플릿을 배정합니다.

        Assign a template to every active user of the company. Each user is
        an independent idempotent upsert committed on its own: a failure is
        rolled back alone and reported, earlier successes stay committed,
        and later users are still attempted. Cancellation stops further
        writes without undoing committed ones.

        Args:
            exclude_roles: 제외할 역할 이름, None이면 ASSIGN_ALL_EXCLUDED_ROLES 사용
                           (Role names to skip; None uses the server policy)

        Returns:
            BulkAssignResult: 직원별 성공/실패/제외 결과 (Per-user outcome)
        """
        rule: Recurrence = self._parse_recurrence(recurrence)
        await self._get_template(db, company_id, template_id)

        excluded: set[str] = set(
            exclude_roles if exclude_roles is not None else settings.ASSIGN_ALL_EXCLUDED_ROLES
        )
        users: list[User] = await user_repository.get_by_company(db, company_id)

        # 롤백 시 ORM 객체가 만료되므로 원시 값만 보관: Keep plain ids; a rollback expires ORM objects
        targets: list[UUID] = []
        result = BulkAssignResult(recurrence=rule.value)
        for user in users:
            if user.role is not None and user.role.name in excluded:
                result.skipped.append(str(user.id))
            else:
                targets.append(user.id)

        for user_id in targets:
            try:
                assignment, _ = await shift_assignment_repository.upsert(
                    db, template_id, user_id, rule, assigned_by
                )
                response: ShiftAssignmentResponse = self.to_response(assignment)
                await db.commit()
            except SQLAlchemyError as exc:
                await db.rollback()
                logger.warning(
                    "assign-all: write rejected template=%s user=%s error=%s",
                    template_id, user_id, type(exc).__name__,
                )
                result.failed.append(
                    BulkAssignFailure(user_id=str(user_id), reason="Storage rejected the assignment")
                )
                continue
            result.succeeded.append(response)

        return result

    async def remove(
        self,
        db: AsyncSession,
        company_id: UUID,
        template_id: UUID,
        user_id: UUID,
    ) -> None:
        """직원의 템플릿 배정을 해제합니다.

        Remove a user's assignment to a template.

        Raises:
            NotFoundError: 템플릿, 직원 또는 배정이 없을 때 (Template, user or assignment absent)
        """
        await self._get_template(db, company_id, template_id)
        await self._get_user(db, company_id, user_id)

        assignment: ShiftAssignment | None = await shift_assignment_repository.get_pair(
            db, template_id, user_id
        )
        if assignment is None:
            raise NotFoundError("Assignment not found")
        await shift_assignment_repository.delete(db, assignment.id)

    async def list_assigned_users(
        self,
        db: AsyncSession,
        company_id: UUID,
        template_id: UUID,
    ) -> list[tuple[User, Recurrence]]:
        """템플릿에 배정된 직원과 반복 규칙 목록을 조회합니다.

        List (user, recurrence) pairs for a template,
        oldest assignment first.
        """
        await self._get_template(db, company_id, template_id)
        assignments = await shift_assignment_repository.list_by_template(db, template_id)
        return [(a.user, Recurrence(a.recurrence)) for a in assignments]

    async def list_for_user(
        self,
        db: AsyncSession,
        user: User,
    ) -> list[ShiftAssignment]:
        """직원 본인의 배정 목록 — The user's own assignments within their company."""
        assignments = await shift_assignment_repository.list_by_user(db, user.id)
        return [
            a for a in assignments
            if a.shift_template is not None and a.shift_template.company_id == user.company_id
        ]


shift_assignment_service: ShiftAssignmentService = ShiftAssignmentService()
