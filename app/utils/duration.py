"""근무 시간 계산 유틸리티.

Shift duration calculation.
Shared by response shaping and by the payroll collaborator, so the result is
an unrounded float number of hours.
"""

from datetime import datetime, timedelta

from app.utils.time_normalizer import ensure_utc

ONE_HOUR: timedelta = timedelta(hours=1)
ONE_DAY: timedelta = timedelta(hours=24)


def total_hours(start_utc: datetime, end_utc: datetime) -> float:
    """시작/종료 시각 사이의 근무 시간(시간 단위)을 계산합니다.

    Compute the hours of a template's daily window. Only the UTC time of
    day of each value counts; the stored calendar dates are ignored. An end
    earlier than the start means the shift ends on the following day
    (22:00Z -> 06:00Z is 8.0).

    Args:
        start_utc: 시작 시각 (Start instant; naive values are read as UTC)
        end_utc: 종료 시각 (End instant; naive values are read as UTC)

    Returns:
        float: 근무 시간, 0 이상 24 미만 (Hours in [0, 24), unrounded)
    """
    # timedelta % timedelta는 항상 0 이상: the remainder is never negative
    diff: timedelta = (ensure_utc(end_utc) - ensure_utc(start_utc)) % ONE_DAY
    return diff / ONE_HOUR
