"""활동 요약 데이터 모델 (Pydantic)."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class ObjectKind(str, Enum):
    """활동 대상 객체 종류. value는 출력 라벨로 사용된다."""

    ISSUE = "Issue"
    PULL_REQUEST = "PullRequest"
    COMMIT = "Commit"


class ActivityRecord(BaseModel):
    """TrackedObject에 대한 단일 활동.

    - body는 댓글 이벤트에만 존재 (opened/closed 등 상태 변경은 None)
    - created_at은 출력 정렬용이며 중복 판단에는 쓰지 않는다
    """

    action: str
    body: str | None = None
    created_at: datetime
    link: str | None = None  # 댓글 html_url


class TrackedObject(BaseModel):
    """이슈 / PR / 커밋 단위 객체.

    kind, link, title은 처음 발견된 이벤트 기준으로 고정된다.
    """

    id: str = Field(..., description="#<number> 또는 커밋 SHA 앞 6자리")
    kind: ObjectKind
    link: str
    title: str | None = None
    activities: list[ActivityRecord] = Field(default_factory=list)

    def sorted_activities(self) -> list[ActivityRecord]:
        """created_at 오름차순으로 정렬된 활동 목록 (동일 시각은 발견 순서 유지)."""
        return sorted(self.activities, key=lambda a: a.created_at)
