"""날짜/시각 유틸리티.

- CLI 날짜 문자열(YYYY-MM-DD) 파싱
- 로컬(또는 지정) 타임존 기준 하루 범위 → UTC 변환
- GitHub API created_at(RFC3339) 파싱
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time, tzinfo
from zoneinfo import ZoneInfo


def parse_date(value: str) -> date:
    """YYYY-MM-DD 형식의 날짜를 파싱한다."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def resolve_timezone(name: str | None) -> tzinfo | None:
    """IANA 타임존 이름을 tzinfo로 변환한다. None이면 시스템 로컬."""
    if not name:
        return None
    return ZoneInfo(name)


def _localize(d: date, t: time, tz: tzinfo | None) -> datetime:
    if tz is None:
        # naive datetime.astimezone()은 시스템 로컬 타임존으로 해석한다
        return datetime.combine(d, t).astimezone()
    return datetime.combine(d, t, tzinfo=tz)


def day_window(
    from_date: date,
    to_date: date,
    tz: tzinfo | None = None,
) -> tuple[datetime, datetime]:
    """[from_date 00:00:00.000000, to_date 23:59:59.999999]를 UTC 범위로 반환한다.

    Args:
        from_date: 시작 날짜 (포함)
        to_date: 종료 날짜 (포함)
        tz: 날짜를 해석할 타임존 (None이면 시스템 로컬)

    Returns:
        (from_utc, to_utc) 튜플
    """
    start = _localize(from_date, time.min, tz)
    end = _localize(to_date, time.max, tz)
    return start.astimezone(UTC), end.astimezone(UTC)


def parse_rfc3339(value: str) -> datetime:
    """RFC3339 문자열(예: 2024-01-15T10:30:00Z)을 UTC datetime으로 변환한다.

    Raises:
        ValueError: 형식이 올바르지 않거나 오프셋이 없는 경우
    """
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp has no UTC offset: {value}")
    return parsed.astimezone(UTC)
