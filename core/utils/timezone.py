"""
타임존 유틸리티

내부 저장: UTC | 영업일 경계: 매장 타임존 원칙 준수를 위한 헬퍼 함수
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.constants import Defaults


def get_store_tz(name: str = Defaults.STORE_TIMEZONE) -> tzinfo:
    """매장 타임존 반환

    Args:
        name: IANA 타임존 이름 (예: America/Rio_Branco)

    Raises:
        ValueError: 알 수 없는 타임존
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {name}") from e


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (타임존 명시)

    datetime.now(timezone.utc)의 축약형.
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """datetime을 UTC로 정규화

    naive datetime은 UTC로 간주.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_db_ts(dt: datetime) -> str:
    """DB 저장용 타임스탬프 문자열

    항상 UTC + 마이크로초 고정 포맷으로 저장하여
    문자열 비교가 시간 순서와 일치하도록 한다.

    Example:
        >>> to_db_ts(datetime(2025, 1, 5, 13, 0, tzinfo=timezone.utc))
        '2025-01-05T13:00:00.000000+00:00'
    """
    return ensure_utc(dt).isoformat(timespec="microseconds")


def from_db_ts(value: str) -> datetime:
    """DB 타임스탬프 문자열을 UTC datetime으로 변환"""
    return ensure_utc(datetime.fromisoformat(value))


def day_bounds(day: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """영업일의 UTC 경계 [시작, 다음날 시작)

    Args:
        day: 영업일 (매장 타임존 기준 달력 날짜)
        tz: 매장 타임존

    Returns:
        (start_utc, end_utc)
    """
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return ensure_utc(start), ensure_utc(end)


def month_bounds(month: int, year: int, tz: tzinfo) -> tuple[datetime, datetime]:
    """달력 월의 UTC 경계 [1일 00:00, 다음달 1일 00:00)

    Args:
        month: 월 (1~12)
        year: 연도
        tz: 매장 타임존
    """
    start = datetime(year, month, 1, tzinfo=tz)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=tz)
    else:
        end = datetime(year, month + 1, 1, tzinfo=tz)
    return ensure_utc(start), ensure_utc(end)


def format_local(dt: datetime, tz: tzinfo, fmt: str = "%d/%m/%Y") -> str:
    """UTC datetime을 매장 타임존 문자열로 포맷

    Example:
        >>> format_local(datetime(2025, 1, 5, 3, 0, tzinfo=timezone.utc), get_store_tz())
        '04/01/2025'
    """
    return ensure_utc(dt).astimezone(tz).strftime(fmt)
