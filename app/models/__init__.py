"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    company: 회사 (Company tenant)
    user: 역할 및 사용자 (Role and User)
    shift: 근무 템플릿 및 배정 (Shift templates and shift assignments)
"""

from app.models.company import Company
from app.models.user import Role, User
from app.models.shift import ShiftTemplate, ShiftAssignment

__all__ = [
    "Company",
    "Role", "User",
    "ShiftTemplate", "ShiftAssignment",
]
