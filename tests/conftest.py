"""테스트 인프라 — 임시 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — Temporary SQLite database, session, and httpx client
fixtures. Each test gets its own database file so separate sessions can
run concurrently against it. Fixture rows are committed so that a rollback
inside a request never removes them.
"""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.database import Base, get_db
from app.main import app
from app.models import *  # noqa: F401,F403: register all models with metadata
from app.models.company import Company
from app.models.user import Role, User
from app.utils.jwt import create_access_token


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진 — 테스트마다 새 DB 파일과 스키마를 생성합니다."""
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """독립 세션 팩토리 — For tests that need several concurrent sessions."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def _add(db: AsyncSession, obj):
    db.add(obj)
    await db.commit()
    await db.refresh(obj)
    return obj


async def make_roles(db: AsyncSession, company: Company) -> dict[str, Role]:
    result: dict[str, Role] = {}
    for name, level in [("superadmin", 1), ("admin", 2), ("supervisor", 3), ("user", 4)]:
        result[name] = await _add(db, Role(company_id=company.id, name=name, level=level))
    return result


async def make_user(db: AsyncSession, company: Company, role: Role, full_name: str) -> User:
    return await _add(db, User(company_id=company.id, role_id=role.id, full_name=full_name))


@pytest_asyncio.fixture
async def company(db: AsyncSession) -> Company:
    """테스트 회사를 생성합니다."""
    return await _add(db, Company(name="Test Corp"))


@pytest_asyncio.fixture
async def roles(db: AsyncSession, company: Company) -> dict[str, Role]:
    """기본 4개 역할을 생성합니다."""
    return await make_roles(db, company)


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession, company: Company, roles) -> User:
    return await make_user(db, company, roles["admin"], "Test Admin")


@pytest_asyncio.fixture
async def supervisor_user(db: AsyncSession, company: Company, roles) -> User:
    return await make_user(db, company, roles["supervisor"], "Test Supervisor")


@pytest_asyncio.fixture
async def staff_user(db: AsyncSession, company: Company, roles) -> User:
    return await make_user(db, company, roles["user"], "Test Staff")


@pytest_asyncio.fixture
async def other_company(db: AsyncSession) -> Company:
    """다른 테넌트 — A second company for isolation checks."""
    return await _add(db, Company(name="Other Corp"))


@pytest_asyncio.fixture
async def other_admin(db: AsyncSession, other_company: Company) -> User:
    other_roles = await make_roles(db, other_company)
    return await make_user(db, other_company, other_roles["admin"], "Other Admin")


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({"sub": str(user.id)})


def auth_header(user: User) -> dict[str, str]:
    """Authorization 헤더를 생성합니다."""
    return {"Authorization": f"Bearer {make_token(user)}"}
