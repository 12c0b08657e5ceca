"""회사(테넌트) SQLAlchemy ORM 모델 정의.

Company (tenant) SQLAlchemy ORM model definition.
Every shift template and user is scoped under exactly one company.

Tables:
    - companies: 최상위 테넌트 (Top-level tenant)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class Company(Base):
    """회사(테넌트) 모델 — 시스템의 최상위 엔티티.

    Company (tenant) model — Top-level entity in the system.
    All data is scoped under a company for multi-tenant isolation.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 회사 이름 (Company name)
        is_active: 활성 상태 (Active status flag)
        created_at: 생성 일시 UTC (Creation timestamp in UTC)
        updated_at: 수정 일시 UTC (Last update timestamp in UTC)

    Relationships:
        roles: 회사 내 역할 목록 (Roles in this company, cascade delete)
        users: 회사 내 사용자 목록 (Users in this company, cascade delete)
        shift_templates: 근무 템플릿 목록 (Shift templates, cascade delete)
    """

    __tablename__ = "companies"

    # 회사 고유 식별자: Company unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 활성 상태: Whether the company is active (soft-delete pattern)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계: Relationships (cascade: 회사 삭제 시 하위 데이터 일괄 삭제)
    roles = relationship("Role", back_populates="company", cascade="all, delete-orphan")
    users = relationship("User", back_populates="company", cascade="all, delete-orphan")
    shift_templates = relationship("ShiftTemplate", back_populates="company", cascade="all, delete-orphan")
