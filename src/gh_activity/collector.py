"""유저 이벤트 피드 Pagination 수집기.

페이지 단위로 조회 -> 타입/기간 필터 -> 파싱 -> ActivityIndex 적용.
- 필터 후 0건인 페이지 또는 max_pages 도달 시 종료
- 형식이 잘못된 단일 이벤트는 경고 후 스킵
- 네트워크/디코드 오류는 그대로 전파 (부분 결과 없음)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

from gh_activity.aggregator import ActivityIndex
from gh_activity.config import AppConfig
from gh_activity.parser import (
    SUPPORTED_EVENT_TYPES,
    MalformedEventError,
    is_supported,
    parse_created_at,
    parse_event,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGES = 10


class EventPageFetcher(Protocol):
    """이벤트 피드 한 페이지를 가져오는 collaborator."""

    def fetch_events_page(self, user: str, page: int, *, private: bool = False) -> list[dict[str, Any]]: ...


@dataclass
class CollectStats:
    """수집 통계."""

    user: str
    pages_fetched: int = 0
    events_fetched: int = 0
    events_matched: int = 0         # 타입/기간 필터 통과
    events_unsupported: int = 0
    events_out_of_range: int = 0
    events_malformed: int = 0
    duplicates_removed: int = 0
    events_applied: int = 0
    duration_ms: float = 0.0
    malformed_details: list[str] = field(default_factory=list)


@dataclass
class CollectResult:
    index: ActivityIndex
    stats: CollectStats


def collect(
    fetcher: EventPageFetcher,
    user: str,
    from_dt: datetime,
    to_dt: datetime,
    include_private: bool = False,
    *,
    max_pages: int = DEFAULT_MAX_PAGES,
    event_types: Iterable[str] | None = None,
    dedupe: bool = True,
) -> CollectResult:
    """[from_dt, to_dt] (양 끝 포함, UTC) 범위의 유저 활동을 수집한다.

    흐름:
    1. page 1, 2, 3 ... 순서로 fetcher 호출
    2. 지원하지 않는 타입 / 범위 밖 created_at 제외
    3. 필터 통과 0건이면 종료 (max_pages 도달 시에도 종료)
    4. 통과한 이벤트를 조회 순서 그대로 파싱 후 인덱스에 적용

    Raises:
        GitHubApiError: fetcher의 네트워크/HTTP/디코드 오류
    """
    if max_pages < 1:
        raise ValueError(f"max_pages must be >= 1: {max_pages}")

    allowed_types = set(SUPPORTED_EVENT_TYPES)
    if event_types is not None:
        allowed_types &= set(event_types)

    start = time.monotonic()
    index = ActivityIndex()
    stats = CollectStats(user=user)
    seen_ids: set[str] = set()

    for page in range(1, max_pages + 1):
        raw_events = fetcher.fetch_events_page(user, page, private=include_private)
        stats.pages_fetched += 1
        stats.events_fetched += len(raw_events)

        matched = _filter_page(raw_events, allowed_types, from_dt, to_dt, stats)
        logger.debug(
            "Page %d: fetched=%d, matched=%d",
            page,
            len(raw_events),
            len(matched),
            extra={"user": user, "page": page, "count": len(matched)},
        )
        if not matched:
            break

        stats.events_matched += len(matched)
        for raw in matched:
            event_id = raw.get("id")
            if dedupe and event_id is not None:
                key = str(event_id)
                if key in seen_ids:
                    stats.duplicates_removed += 1
                    continue
                seen_ids.add(key)

            try:
                parsed = parse_event(raw)
            except MalformedEventError as exc:
                _record_malformed(stats, raw, exc)
                continue

            index.add(parsed)
            stats.events_applied += 1
    else:
        logger.info(
            "Reached page ceiling (max_pages=%d), stopping pagination",
            max_pages,
            extra={"event_code": "PAGE_CEILING", "user": user},
        )

    stats.duration_ms = (time.monotonic() - start) * 1000
    logger.info(
        "Collection complete: pages=%d, fetched=%d, applied=%d, malformed=%d, duplicates=%d",
        stats.pages_fetched,
        stats.events_fetched,
        stats.events_applied,
        stats.events_malformed,
        stats.duplicates_removed,
        extra={
            "event_code": "COLLECT_DONE",
            "user": user,
            "count": stats.events_applied,
            "duration_ms": round(stats.duration_ms, 1),
        },
    )
    return CollectResult(index=index, stats=stats)


def _filter_page(
    raw_events: list[Any],
    allowed_types: set[str],
    from_dt: datetime,
    to_dt: datetime,
    stats: CollectStats,
) -> list[dict[str, Any]]:
    """타입/기간 필터를 통과한 이벤트만 반환한다.

    created_at을 해석할 수 없는 지원 타입 이벤트는 malformed로 집계하고 제외한다.
    """
    matched: list[dict[str, Any]] = []
    for raw in raw_events:
        event_type = raw.get("type") if isinstance(raw, dict) else None
        if not is_supported(event_type) or event_type not in allowed_types:
            stats.events_unsupported += 1
            continue

        try:
            created_at = parse_created_at(raw)
        except MalformedEventError as exc:
            _record_malformed(stats, raw, exc)
            continue

        if not (from_dt <= created_at <= to_dt):
            stats.events_out_of_range += 1
            continue

        matched.append(raw)
    return matched


def _record_malformed(stats: CollectStats, raw: dict[str, Any], exc: MalformedEventError) -> None:
    stats.events_malformed += 1
    detail = f"event {raw.get('id', 'unknown')}: {exc}"
    stats.malformed_details.append(detail)
    logger.warning(
        "Skipping malformed event %s",
        detail,
        extra={"event_code": "MALFORMED_EVENT", "event_type": exc.event_type},
    )


class ActivityCollector:
    """AppConfig 설정으로 collect()를 실행하는 수집기."""

    def __init__(self, api_client: EventPageFetcher, config: AppConfig) -> None:
        self._api = api_client
        self._config = config

    def collect(
        self,
        user: str,
        from_dt: datetime,
        to_dt: datetime,
        *,
        include_private: bool | None = None,
        max_pages: int | None = None,
    ) -> CollectResult:
        """설정값을 기본으로, 인자로 준 값은 우선 적용하여 수집한다."""
        collect_config = self._config.collect
        return collect(
            self._api,
            user,
            from_dt,
            to_dt,
            collect_config.include_private if include_private is None else include_private,
            max_pages=max_pages or collect_config.max_pages,
            event_types=collect_config.event_types,
            dedupe=collect_config.dedupe,
        )
