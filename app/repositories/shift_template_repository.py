"""근무 템플릿 레포지토리 — 회사 범위 근무 템플릿 CRUD 쿼리.

Shift Template Repository — Company-scoped CRUD queries for shift_templates.
A template owned by another company is indistinguishable from a missing one:
both come back as None/False.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.shift import ShiftAssignment, ShiftTemplate
from app.repositories.base import BaseRepository


class ShiftTemplateRepository(BaseRepository[ShiftTemplate]):
    """근무 템플릿 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the shift_templates table.
    Reads eager-load assignments and their users so response shaping never
    triggers lazy loads on the async session.
    """

    def __init__(self) -> None:
        super().__init__(ShiftTemplate)

    def _with_assignments(self, query: Select) -> Select:
        return query.options(
            selectinload(ShiftTemplate.assignments).selectinload(ShiftAssignment.user)
        ).execution_options(populate_existing=True)

    async def get_for_company(
        self,
        db: AsyncSession,
        company_id: UUID,
        template_id: UUID,
    ) -> ShiftTemplate | None:
        """회사 소유 템플릿을 배정 정보와 함께 조회합니다.

        Retrieve a template owned by the company, with assignments loaded.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            company_id: 회사 UUID (Company UUID)
            template_id: 템플릿 UUID (Template UUID)

        Returns:
            ShiftTemplate | None: 템플릿 또는 None — 없거나 다른 회사 소유
                                  (Template, or None when absent or owned elsewhere)
        """
        query: Select = self._with_assignments(
            select(ShiftTemplate).where(
                ShiftTemplate.id == template_id,
                ShiftTemplate.company_id == company_id,
            )
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def list_by_company(
        self,
        db: AsyncSession,
        company_id: UUID,
    ) -> list[ShiftTemplate]:
        """회사의 모든 템플릿을 생성 순서로 조회합니다.

        Retrieve all templates of a company ordered by creation, then id,
        so the order is stable across calls.
        """
        query: Select = self._with_assignments(
            select(ShiftTemplate)
            .where(ShiftTemplate.company_id == company_id)
            .order_by(ShiftTemplate.created_at, ShiftTemplate.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def create_for_company(
        self,
        db: AsyncSession,
        company_id: UUID,
        title: str,
        start_time: datetime,
        end_time: datetime,
    ) -> ShiftTemplate:
        """템플릿을 생성합니다 — Insert a template owned by ``company_id``."""
        template: ShiftTemplate = await self.create(
            db,
            {
                "company_id": company_id,
                "title": title,
                "start_time": start_time,
                "end_time": end_time,
            },
        )
        # 새 템플릿은 배정이 없음: Brand-new template, load the empty collection
        return await self.get_for_company(db, company_id, template.id)  # type: ignore[return-value]

    async def update_for_company(
        self,
        db: AsyncSession,
        company_id: UUID,
        template_id: UUID,
        patch: dict,
    ) -> ShiftTemplate | None:
        """회사 범위로 템플릿을 부분 수정합니다.

        Apply a partial update to a company-owned template. Only title,
        start_time and end_time are writable.
        """
        allowed: dict = {k: v for k, v in patch.items() if k in ("title", "start_time", "end_time")}
        updated: ShiftTemplate | None = await self.update(db, template_id, allowed, company_id)
        if updated is None:
            return None
        return await self.get_for_company(db, company_id, template_id)

    async def delete_for_company(
        self,
        db: AsyncSession,
        company_id: UUID,
        template_id: UUID,
        loaded: ShiftTemplate | None = None,
    ) -> bool:
        """템플릿과 그 배정을 함께 삭제합니다.

        Delete a company-owned template. Assignments are loaded first so the
        ORM cascade removes them even on engines without FK enforcement.
        A template already fetched through ``get_for_company`` can be passed
        as ``loaded`` to skip the second lookup.
        """
        template: ShiftTemplate | None = loaded
        if template is None or template.id != template_id or template.company_id != company_id:
            template = await self.get_for_company(db, company_id, template_id)
        if template is None:
            return False
        await db.delete(template)
        await db.flush()
        return True


# 싱글턴 인스턴스: Singleton instance
shift_template_repository: ShiftTemplateRepository = ShiftTemplateRepository()
