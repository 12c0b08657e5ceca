"""근무 템플릿 및 근무 배정 SQLAlchemy ORM 모델 정의.

Shift template and shift assignment SQLAlchemy ORM model definitions.

Tables:
    - shift_templates: 회사별 재사용 근무 시간대 (Reusable daily work windows per company)
    - shift_assignments: 직원 ↔ 템플릿 배정 + 반복 규칙 (User ↔ template binding with recurrence)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.utils.recurrence import Recurrence

_RECURRENCE_VALUES: str = ", ".join(f"'{r.value}'" for r in Recurrence)


class ShiftTemplate(Base):
    """근무 템플릿 모델 — 날짜와 무관한 일일 근무 시간대 정의.

    Shift template model — A reusable daily work window, not tied to a
    calendar date. Only the hour/minute of start_time/end_time matter to
    consumers; end_time earlier than start_time encodes an overnight shift.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        company_id: 소유 회사 FK, 생성 후 변경 불가 (Owning company, immutable)
        title: 템플릿 제목 (Display title, e.g. "Morning")
        start_time: 시작 시각 UTC (Start instant, UTC)
        end_time: 종료 시각 UTC (End instant, UTC)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        company: 소유 회사 (Owning company)
        assignments: 배정 목록 (Assignments, cascade delete)
    """

    __tablename__ = "shift_templates"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 소유 회사 FK: Owning company (CASCADE: 회사 삭제 시 템플릿도 삭제)
    company_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        CheckConstraint("length(title) > 0", name="ck_shift_template_title_not_empty"),
        Index("ix_shift_templates_company_created", "company_id", "created_at"),
    )

    company = relationship("Company", back_populates="shift_templates")
    assignments = relationship(
        "ShiftAssignment",
        back_populates="shift_template",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ShiftAssignment.created_at",
    )


class ShiftAssignment(Base):
    """근무 배정 모델 — 직원 1명과 템플릿 1개의 반복 규칙 연결.

    Shift assignment model — Binds one user to one shift template under a
    recurrence rule.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        shift_template_id: 템플릿 FK (Shift template)
        user_id: 배정 직원 FK (Assigned user; same company as the template)
        assigned_by: 배정 수행자 FK, 감사용 (Acting user, audit only)
        recurrence: 반복 규칙 — "all" / "weekdays" / "weekends"
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Constraints:
        uq_shift_assignment_template_user: 템플릿+직원 조합당 1개 (One row per template+user pair)
        ck_shift_assignment_recurrence: 반복 규칙 값 제한 (Closed recurrence tag set)
    """

    __tablename__ = "shift_assignments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    shift_template_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("shift_templates.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    assigned_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    recurrence: Mapped[str] = mapped_column(String(20), nullable=False, default=Recurrence.ALL.value)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("shift_template_id", "user_id", name="uq_shift_assignment_template_user"),
        CheckConstraint(f"recurrence IN ({_RECURRENCE_VALUES})", name="ck_shift_assignment_recurrence"),
        Index("ix_shift_assignments_user", "user_id"),
    )

    shift_template = relationship("ShiftTemplate", back_populates="assignments")
    user = relationship("User", back_populates="shift_assignments", foreign_keys=[user_id])
