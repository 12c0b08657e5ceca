"""사용자 및 역할 관련 SQLAlchemy ORM 모델 정의.

User and Role SQLAlchemy ORM model definitions.
Users are owned by the external identity service; this server only needs
enough of them to scope assignments by company and to check role levels.

Tables:
    - roles: 회사 내 역할 (Roles within a company, level-based hierarchy)
    - users: 사용자 계정 (User accounts with company/role scoping)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, Integer, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class Role(Base):
    """역할 모델 — 회사 내 권한 수준을 정의.

    Role model — Defines permission levels within a company.
    Lower level numbers indicate higher authority:
        1 = superadmin, 2 = admin, 3 = supervisor, 4 = user

    Constraints:
        uq_role_company_name: 회사 내 역할 이름 고유 (Unique role name per company)
        uq_role_company_level: 회사 내 역할 레벨 고유 (Unique role level per company)
    """

    __tablename__ = "roles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 소속 회사 FK: Parent company (CASCADE: 회사 삭제 시 역할도 삭제)
    company_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False)
    # 역할 이름: Role name ("superadmin", "admin", "supervisor", "user")
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # 권한 레벨: Permission level (1=superadmin 최고 권한, 4=user 최저 권한)
    level: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("company_id", "name", name="uq_role_company_name"),
        UniqueConstraint("company_id", "level", name="uq_role_company_level"),
    )

    company = relationship("Company", back_populates="roles")
    users = relationship("User", back_populates="role")


class User(Base):
    """사용자 모델 — 직원 계정 정보.

    User model — Employee account. Each user belongs to exactly one company
    and has one role.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        company_id: 소속 회사 FK (Parent company foreign key)
        role_id: 역할 FK (Assigned role foreign key)
        full_name: 실명 (Full display name)
        email: 이메일 (Email address, optional)
        is_active: 활성 상태 (Active status, soft-delete pattern)

    Relationships:
        company: 소속 회사 (Parent company)
        role: 사용자 역할 (Assigned role)
        shift_assignments: 근무 배정 목록 (Shift assignments, cascade delete)
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    # 역할 FK: Assigned role (역할 삭제 시 제한됨, role deletion is restricted)
    role_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("roles.id"), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    company = relationship("Company", back_populates="users")
    role = relationship("Role", back_populates="users")
    shift_assignments = relationship(
        "ShiftAssignment",
        back_populates="user",
        cascade="all, delete-orphan",
        foreign_keys="ShiftAssignment.user_id",
    )
