"""사용자 레포지토리 — 회사 범위 사용자 조회 쿼리.

User Repository — Company-scoped lookups for users.
Users are owned by the identity collaborator; this repository only reads them.
"""

from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.user import User
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_with_role(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> User | None:
        """인증용 — 역할이 로드된 사용자를 조회합니다.

        Retrieve a user with the role eagerly loaded (authentication path).
        """
        query: Select = (
            select(User)
            .options(selectinload(User.role))
            .where(User.id == user_id)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_company(
        self,
        db: AsyncSession,
        company_id: UUID,
        is_active: bool | None = True,
    ) -> list[User]:
        """회사에 속한 사용자 목록을 조회합니다.

        Retrieve users belonging to a company, oldest first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            company_id: 회사 UUID (Company UUID)
            is_active: 활성 상태 필터, None이면 미적용 (Active filter; None skips it)

        Returns:
            list[User]: 역할이 로드된 사용자 목록 (Users with role loaded)
        """
        query: Select = (
            select(User)
            .options(selectinload(User.role))
            .where(User.company_id == company_id)
        )
        if is_active is not None:
            query = query.where(User.is_active == is_active)

        query = query.order_by(User.created_at, User.id)
        result = await db.execute(query)
        return list(result.scalars().all())


# 싱글턴 인스턴스: Singleton instance
user_repository: UserRepository = UserRepository()
