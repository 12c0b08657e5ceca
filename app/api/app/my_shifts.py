"""앱 내 근무 라우터 — 직원 본인의 근무 템플릿 조회 API.

App My Shifts Router — The acting employee's assigned shift templates,
optionally narrowed to the ones that apply on a given calendar date.
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.common import DataResponse
from app.schemas.shift_template import MyShiftResponse
from app.services.scheduling_service import scheduling_service
from app.utils.exceptions import BadRequestError
from app.utils.time_normalizer import local_today

router: APIRouter = APIRouter()


@router.get("/shifts", response_model=DataResponse[list[MyShiftResponse]])
async def list_my_shifts(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    on: Annotated[date | None, Query()] = None,
    today: Annotated[bool, Query()] = False,
    tz: Annotated[str | None, Query()] = None,
) -> DataResponse[list[MyShiftResponse]]:
    """내 근무 목록을 조회합니다.

    List my shift templates.

    Args:
        on: 적용 날짜 필터, 선택 (Only shifts that apply on this local date)
        today: True이면 tz 기준 오늘 날짜로 필터 (Filter by today's date in ``tz``)
        tz: IANA 시간대, 기본값은 서버 설정 (IANA zone; defaults to server setting)
    """
    if today and on is None:
        try:
            on = local_today(tz)
        except ValueError as exc:
            raise BadRequestError(str(exc)) from None

    shifts = await scheduling_service.my_shifts(db, current_user, on)
    return DataResponse(data=shifts)
