"""반복 규칙 판정 유틸리티.

Recurrence resolution utilities.
Decides whether a shift assignment applies on a given calendar date.
The date must already be expressed in the employee's own zone; no zone
conversion happens here.
"""

import enum
from collections.abc import Iterable
from datetime import date
from typing import TypeVar

T = TypeVar("T")


class Recurrence(str, enum.Enum):
    """배정 반복 규칙 — Closed set of recurrence tags."""

    ALL = "all"
    WEEKDAYS = "weekdays"
    WEEKENDS = "weekends"


# date.weekday() 기준: Monday=0 ~ Sunday=6
WEEKDAY_NUMBERS: frozenset[int] = frozenset({0, 1, 2, 3, 4})
WEEKEND_NUMBERS: frozenset[int] = frozenset({5, 6})


def parse_recurrence(value: "Recurrence | str") -> Recurrence:
    """문자열을 Recurrence로 변환합니다. 알 수 없는 값은 ValueError.

    Coerce a literal tag into a Recurrence. Unknown values raise ValueError.
    """
    if isinstance(value, Recurrence):
        return value
    try:
        return Recurrence(value)
    except ValueError:
        allowed = ", ".join(r.value for r in Recurrence)
        raise ValueError(f"Invalid recurrence '{value}'. Allowed values: {allowed}") from None


def applies(recurrence: "Recurrence | str", on: date) -> bool:
    """해당 날짜에 반복 규칙이 적용되는지 판정합니다.

    Return True if a shift under ``recurrence`` applies on ``on``.

    Args:
        recurrence: 반복 규칙 (Recurrence tag or its literal string)
        on: 판정할 날짜, 직원 기준 시간대의 달력 날짜 (Calendar date in the employee's zone)

    Returns:
        bool: 적용 여부 (Whether the shift applies that day)

    Raises:
        ValueError: 알 수 없는 반복 규칙 (Unknown recurrence tag)
    """
    rule: Recurrence = parse_recurrence(recurrence)
    if rule is Recurrence.ALL:
        return True
    if rule is Recurrence.WEEKDAYS:
        return on.weekday() in WEEKDAY_NUMBERS
    return on.weekday() in WEEKEND_NUMBERS


def applicable(items: Iterable[tuple[T, "Recurrence | str"]], on: date) -> list[T]:
    """(항목, 반복 규칙) 쌍 중 해당 날짜에 적용되는 항목만 반환합니다.

    Filter (item, recurrence) pairs down to the items that apply on ``on``,
    preserving input order.
    """
    return [item for item, recurrence in items if applies(recurrence, on)]
