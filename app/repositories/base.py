"""기본 CRUD 레포지토리 — 회사 범위 공통 쿼리.

Base CRUD Repository — Shared company-scoped queries for domain repositories.
Lookups return None/False when a row is missing or belongs to another
company; deciding what that means is left to the service layer.

Usage:
    class ShiftTemplateRepository(BaseRepository[ShiftTemplate]):
        def __init__(self) -> None:
            super().__init__(ShiftTemplate)
"""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base

ModelType = TypeVar("ModelType", bound=Base)

# 업데이트로 변경할 수 없는 컬럼 (Columns an update never rewrites)
_IMMUTABLE_FIELDS: frozenset[str] = frozenset({"id", "company_id"})


class BaseRepository(Generic[ModelType]):
    """제네릭 CRUD 레포지토리.

    Generic repository. When ``company_id`` is passed and the model has a
    company_id column, the tenant filter is part of the SQL WHERE clause.
    """

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    def _scoped(self, query: Select, company_id: UUID | None) -> Select:
        if company_id is not None and hasattr(self.model, "company_id"):
            query = query.where(self.model.company_id == company_id)
        return query

    async def get_by_id(
        self,
        db: AsyncSession,
        record_id: UUID,
        company_id: UUID | None = None,
    ) -> ModelType | None:
        """ID로 조회 — Fetch one row by id, optionally within a company."""
        query: Select = self._scoped(select(self.model).where(self.model.id == record_id), company_id)
        return (await db.execute(query)).scalar_one_or_none()

    async def create(self, db: AsyncSession, values: dict[str, Any]) -> ModelType:
        """행 추가 후 flush — Insert a row and flush so defaults are populated."""
        row: ModelType = self.model(**values)
        db.add(row)
        await db.flush()
        await db.refresh(row)
        return row

    async def update(
        self,
        db: AsyncSession,
        record_id: UUID,
        values: dict[str, Any],
        company_id: UUID | None = None,
    ) -> ModelType | None:
        """부분 수정.

        Apply ``values`` to a row found within the company scope. Unknown
        attributes are ignored and id/company_id are never rewritten.

        Returns:
            ModelType | None: 수정된 행, 범위 밖이면 None (Updated row, None when out of scope)
        """
        row: ModelType | None = await self.get_by_id(db, record_id, company_id)
        if row is None:
            return None

        for field, value in values.items():
            if field not in _IMMUTABLE_FIELDS and hasattr(row, field):
                setattr(row, field, value)

        await db.flush()
        await db.refresh(row)
        return row

    async def delete(
        self,
        db: AsyncSession,
        record_id: UUID,
        company_id: UUID | None = None,
    ) -> bool:
        row: ModelType | None = await self.get_by_id(db, record_id, company_id)
        if row is None:
            return False
        await db.delete(row)
        await db.flush()
        return True
