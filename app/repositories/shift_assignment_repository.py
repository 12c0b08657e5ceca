"""근무 배정 레포지토리 — 근무 배정 관련 DB 쿼리 담당.

Shift Assignment Repository — Handles all shift-assignment database queries.
The (shift_template_id, user_id) uniqueness is owned by the storage engine;
writes go through a single INSERT ... ON CONFLICT DO UPDATE statement.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Callable
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.shift import ShiftAssignment
from app.repositories.base import BaseRepository
from app.utils.recurrence import Recurrence

# 방언별 upsert 지원 INSERT 생성자: Dialect-specific INSERT constructs supporting ON CONFLICT
_UPSERT_INSERTS: dict[str, Callable[..., Any]] = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class ShiftAssignmentRepository(BaseRepository[ShiftAssignment]):
    """근무 배정 레포지토리.

    Shift assignment repository with atomic upsert and pair lookups.

    Extends:
        BaseRepository[ShiftAssignment]
    """

    def __init__(self) -> None:
        super().__init__(ShiftAssignment)

    async def upsert(
        self,
        db: AsyncSession,
        shift_template_id: UUID,
        user_id: UUID,
        recurrence: Recurrence,
        assigned_by: UUID | None,
    ) -> tuple[ShiftAssignment, bool]:
        """배정을 생성하거나 기존 배정의 반복 규칙을 갱신합니다.

        Insert the (template, user) assignment or, when the pair already
        exists, update its recurrence in place. One statement, so two
        concurrent calls can never leave two rows behind. assigned_by is
        kept from the first insert.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            shift_template_id: 템플릿 UUID (Template UUID)
            user_id: 직원 UUID (User UUID)
            recurrence: 반복 규칙 (Recurrence rule)
            assigned_by: 배정 수행자 UUID (Acting user UUID)

        Returns:
            tuple[ShiftAssignment, bool]: (배정, 신규 생성 여부)
                                          (Authoritative row, whether it was created)
        """
        dialect: str = db.get_bind().dialect.name
        insert_fn = _UPSERT_INSERTS.get(dialect)
        if insert_fn is None:
            raise NotImplementedError(f"Upsert is not supported on dialect '{dialect}'")

        now: datetime = datetime.now(timezone.utc)
        new_id: uuid.UUID = uuid.uuid4()
        stmt = insert_fn(ShiftAssignment).values(
            id=new_id,
            shift_template_id=shift_template_id,
            user_id=user_id,
            assigned_by=assigned_by,
            recurrence=recurrence.value,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["shift_template_id", "user_id"],
            set_={
                "recurrence": stmt.excluded.recurrence,
                "updated_at": stmt.excluded.updated_at,
            },
        ).returning(ShiftAssignment)

        result = await db.scalars(stmt, execution_options={"populate_existing": True})
        assignment: ShiftAssignment = result.one()
        return assignment, assignment.id == new_id

    async def get_pair(
        self,
        db: AsyncSession,
        shift_template_id: UUID,
        user_id: UUID,
    ) -> ShiftAssignment | None:
        """템플릿+직원 조합의 배정을 조회합니다 — Look up the pair's assignment."""
        query: Select = select(ShiftAssignment).where(
            ShiftAssignment.shift_template_id == shift_template_id,
            ShiftAssignment.user_id == user_id,
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def list_by_template(
        self,
        db: AsyncSession,
        shift_template_id: UUID,
    ) -> list[ShiftAssignment]:
        """템플릿에 배정된 직원 목록을 배정 순서로 조회합니다.

        Retrieve a template's assignments with users loaded, oldest first.
        """
        query: Select = (
            select(ShiftAssignment)
            .options(selectinload(ShiftAssignment.user))
            .where(ShiftAssignment.shift_template_id == shift_template_id)
            .order_by(ShiftAssignment.created_at, ShiftAssignment.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def list_by_user(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> list[ShiftAssignment]:
        """직원의 모든 배정을 템플릿과 함께 조회합니다.

        Retrieve every assignment of a user with its template loaded.
        """
        query: Select = (
            select(ShiftAssignment)
            .options(selectinload(ShiftAssignment.shift_template))
            .where(ShiftAssignment.user_id == user_id)
            .order_by(ShiftAssignment.created_at, ShiftAssignment.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())


# 싱글턴 인스턴스: Singleton instance
shift_assignment_repository: ShiftAssignmentRepository = ShiftAssignmentRepository()
