"""
유틸리티 패키지

타임존 처리 등 공통 유틸리티
"""

from core.utils.timezone import (
    day_bounds,
    ensure_utc,
    format_local,
    from_db_ts,
    get_store_tz,
    month_bounds,
    now_utc,
    to_db_ts,
)

__all__ = [
    "day_bounds",
    "ensure_utc",
    "format_local",
    "from_db_ts",
    "get_store_tz",
    "month_bounds",
    "now_utc",
    "to_db_ts",
]
