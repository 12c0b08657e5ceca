"""벽시계 시각 ↔ UTC 변환 유틸리티.

Wall-clock <-> UTC conversion helpers.
Storage always holds timezone-aware UTC instants; clients render local time.
"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.config import settings


def resolve_zone(tz_name: str | None = None) -> ZoneInfo:
    """IANA 시간대 이름을 ZoneInfo로 변환합니다. None이면 기본 시간대.

    Resolve an IANA zone name, falling back to settings.DEFAULT_TIMEZONE.

    Raises:
        ValueError: 알 수 없는 시간대 (Unknown zone name)
    """
    name: str = tz_name or settings.DEFAULT_TIMEZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone '{name}'") from None


def ensure_utc(value: datetime) -> datetime:
    """naive 값은 UTC로 간주하고, aware 값은 UTC로 변환합니다.

    Treat naive datetimes as UTC (some drivers drop tzinfo on read) and
    convert aware ones to UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_utc(value: datetime, tz_name: str | None = None) -> datetime:
    """클라이언트 벽시계 시각을 UTC 시각으로 변환합니다.

    Convert a caller's wall-clock time to a UTC instant.
    Values that already carry an offset are converted as-is; naive values
    are interpreted in ``tz_name`` (or the default zone).

    Args:
        value: 입력 시각 (Input datetime)
        tz_name: naive 값 해석용 IANA 시간대 (Zone for naive values)

    Returns:
        datetime: tz-aware UTC datetime
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=resolve_zone(tz_name))
    return value.astimezone(timezone.utc)


def from_utc(value: datetime, tz_name: str | None = None) -> datetime:
    """UTC 시각을 지정 시간대의 벽시계 시각으로 변환합니다.

    Convert a stored UTC instant to wall-clock time in ``tz_name``.
    """
    return ensure_utc(value).astimezone(resolve_zone(tz_name))


def local_today(tz_name: str | None = None, now: datetime | None = None) -> date:
    """지정 시간대 기준 오늘 날짜 — Today's calendar date in ``tz_name``."""
    current: datetime = now if now is not None else datetime.now(timezone.utc)
    return from_utc(current, tz_name).date()
