"""
날짜/타임존 유틸리티

내부 타임스탬프: UTC | 거래 날짜: 로컬 달력 날짜(YYYY-MM-DD) 원칙 준수를 위한 헬퍼 함수
"""

import calendar
import re
from collections.abc import Iterator
from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.errors import ValidationError

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DATE_FORMAT_MESSAGE = "Date must be in YYYY-MM-DD format"


def get_zone(name: str) -> tzinfo:
    """IANA 타임존 이름으로 tzinfo 반환

    Raises:
        ValueError: 알 수 없는 타임존
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {name}") from e


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (타임존 명시)"""
    return datetime.now(timezone.utc)


def today_in(tz: tzinfo) -> date:
    """로컬 타임존 기준 오늘 날짜

    Example:
        UTC 2026-02-20 20:00 → Asia/Kathmandu 2026-02-21
    """
    return now_utc().astimezone(tz).date()


def parse_iso_date(value: object) -> date:
    """YYYY-MM-DD 문자열을 date로 변환

    Raises:
        ValidationError: 형식 불일치 또는 존재하지 않는 날짜 (2026-02-30 등)
    """
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        raise ValidationError("Date is required")
    if not ISO_DATE_PATTERN.match(value):
        raise ValidationError(DATE_FORMAT_MESSAGE)
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(DATE_FORMAT_MESSAGE) from e


def day_bounds(day: date) -> tuple[date, date]:
    """하루의 포함 범위 (시작일, 종료일)

    거래 날짜는 달력 날짜이므로 시작과 끝이 같음.
    """
    return day, day


def month_bounds(day: date) -> tuple[date, date]:
    """해당 월의 포함 범위 (1일, 말일)"""
    last_day = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last_day)


def shift_months(day: date, months: int) -> date:
    """월 단위 이동 (해당 월 1일 반환)

    Example:
        >>> shift_months(date(2026, 1, 31), -1)
        datetime.date(2025, 12, 1)
    """
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def month_label(day: date) -> str:
    """차트 라벨 (예: 'Aug 2025')"""
    return f"{calendar.month_abbr[day.month]} {day.year}"


def iter_recent_months(anchor: date, count: int) -> Iterator[date]:
    """anchor가 속한 월로 끝나는 최근 count개월의 1일 (오래된 순)"""
    for offset in range(count - 1, -1, -1):
        yield shift_months(anchor, -offset)
