"""이벤트 타입별 파싱 로직.

GitHub events API 응답(dict)에서 (객체 ID, TrackedObject 템플릿, ActivityRecord)를 추출한다.
- 지원 타입 5종을 닫힌 dispatch table로 관리
- 미등록 타입은 dispatch 시점에 UnknownEventTypeError
- 필수 필드 누락/타입 불일치는 MalformedEventError (필드 경로 + 이벤트 타입 포함)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, NamedTuple

from gh_activity.dateutil import parse_rfc3339
from gh_activity.models import ActivityRecord, ObjectKind, TrackedObject

COMMIT_ID_LENGTH = 6

SUPPORTED_EVENT_TYPES: tuple[str, ...] = (
    "IssuesEvent",
    "IssueCommentEvent",
    "PullRequestEvent",
    "PullRequestReviewCommentEvent",
    "CommitCommentEvent",
)


class MalformedEventError(ValueError):
    """지원 타입 이벤트의 필수 필드가 없거나 타입이 다르다."""

    def __init__(self, event_type: str, field_path: str, reason: str = "missing or invalid"):
        self.event_type = event_type
        self.field_path = field_path
        super().__init__(f"Malformed {event_type}: field '{field_path}' is {reason}")


class UnknownEventTypeError(ValueError):
    """핸들러가 등록되지 않은 이벤트 타입."""

    def __init__(self, event_type: object):
        self.event_type = event_type
        super().__init__(f"No parser registered for event type: {event_type!r}")


@dataclass(frozen=True)
class ParsedEvent:
    """단일 이벤트 파싱 결과."""

    repo_name: str
    object_id: str
    tracked_object: TrackedObject
    activity: ActivityRecord


class _EventFields:
    """raw 이벤트에서 점(.) 경로로 필수 필드를 꺼낸다."""

    def __init__(self, raw: dict[str, Any], event_type: str) -> None:
        self._raw = raw
        self.event_type = event_type

    def _lookup(self, path: str) -> Any:
        node: Any = self._raw
        for key in path.split("."):
            if not isinstance(node, dict) or key not in node:
                raise MalformedEventError(self.event_type, path, "missing")
            node = node[key]
        return node

    def text(self, path: str) -> str:
        value = self._lookup(path)
        if not isinstance(value, str):
            raise MalformedEventError(self.event_type, path, f"not a string ({type(value).__name__})")
        return value

    def number(self, path: str) -> int:
        value = self._lookup(path)
        # bool은 int의 서브클래스이므로 별도로 거른다
        if isinstance(value, bool) or not isinstance(value, int):
            raise MalformedEventError(self.event_type, path, f"not an integer ({type(value).__name__})")
        return value

    def timestamp(self, path: str) -> datetime:
        value = self.text(path)
        try:
            return parse_rfc3339(value)
        except ValueError as exc:
            raise MalformedEventError(self.event_type, path, f"not RFC3339 ({exc})") from exc


class EventHandler(NamedTuple):
    """이벤트 타입별 추출 함수 묶음."""

    parse_id: Callable[[_EventFields], str]
    parse_object: Callable[[_EventFields, str], TrackedObject]
    parse_activity: Callable[[_EventFields, datetime], ActivityRecord]


# ── ID 추출 ─────────────────────────────────────────────


def _issue_id(f: _EventFields) -> str:
    return f"#{f.number('payload.issue.number')}"


def _pull_request_id(f: _EventFields) -> str:
    return f"#{f.number('payload.pull_request.number')}"


def _commit_id(f: _EventFields) -> str:
    """커밋 SHA 앞 6자리."""
    sha = f.text("payload.comment.commit_id")
    if len(sha) < COMMIT_ID_LENGTH:
        raise MalformedEventError(f.event_type, "payload.comment.commit_id", "shorter than 6 characters")
    return sha[:COMMIT_ID_LENGTH]


# ── 객체 템플릿 ─────────────────────────────────────────


def _issue_object(f: _EventFields, object_id: str) -> TrackedObject:
    return TrackedObject(
        id=object_id,
        kind=ObjectKind.ISSUE,
        link=f.text("payload.issue.html_url"),
        title=f.text("payload.issue.title"),
    )


def _pull_request_object(f: _EventFields, object_id: str) -> TrackedObject:
    return TrackedObject(
        id=object_id,
        kind=ObjectKind.PULL_REQUEST,
        link=f.text("payload.pull_request.html_url"),
        title=f.text("payload.pull_request.title"),
    )


def _review_comment_object(f: _EventFields, object_id: str) -> TrackedObject:
    """리뷰 댓글은 PR이 아닌 댓글 URL을 링크로 쓴다."""
    return TrackedObject(
        id=object_id,
        kind=ObjectKind.PULL_REQUEST,
        link=f.text("payload.comment.html_url"),
        title=f.text("payload.pull_request.title"),
    )


def _commit_object(f: _EventFields, object_id: str) -> TrackedObject:
    return TrackedObject(
        id=object_id,
        kind=ObjectKind.COMMIT,
        link=f.text("payload.comment.html_url"),
        title=None,
    )


# ── 활동 ────────────────────────────────────────────────


def _state_activity(f: _EventFields, created_at: datetime) -> ActivityRecord:
    """opened/closed 등 상태 변경 (본문 없음)."""
    return ActivityRecord(action=f.text("payload.action"), created_at=created_at)


def _comment_activity(f: _EventFields, created_at: datetime) -> ActivityRecord:
    return ActivityRecord(
        action=f"Comment {f.text('payload.action')}",
        body=f.text("payload.comment.body"),
        created_at=created_at,
        link=f.text("payload.comment.html_url"),
    )


# Event handler dispatch table
_EVENT_HANDLERS: dict[str, EventHandler] = {
    "IssuesEvent": EventHandler(_issue_id, _issue_object, _state_activity),
    "IssueCommentEvent": EventHandler(_issue_id, _issue_object, _comment_activity),
    "PullRequestEvent": EventHandler(_pull_request_id, _pull_request_object, _state_activity),
    "PullRequestReviewCommentEvent": EventHandler(
        _pull_request_id, _review_comment_object, _comment_activity
    ),
    "CommitCommentEvent": EventHandler(_commit_id, _commit_object, _comment_activity),
}


def is_supported(event_type: object) -> bool:
    """파서가 등록된 이벤트 타입인지 확인한다."""
    return isinstance(event_type, str) and event_type in _EVENT_HANDLERS


def parse_created_at(raw: dict[str, Any]) -> datetime:
    """이벤트의 created_at을 UTC datetime으로 파싱한다."""
    return _EventFields(raw, str(raw.get("type"))).timestamp("created_at")


def parse_event(raw: dict[str, Any]) -> ParsedEvent:
    """raw 이벤트를 ParsedEvent로 변환한다.

    Raises:
        UnknownEventTypeError: 등록되지 않은 type
        MalformedEventError: 필수 필드 누락 또는 타입 불일치
    """
    event_type = raw.get("type")
    if not is_supported(event_type):
        raise UnknownEventTypeError(event_type)

    handler = _EVENT_HANDLERS[event_type]
    fields = _EventFields(raw, event_type)

    repo_name = fields.text("repo.name")
    created_at = fields.timestamp("created_at")
    object_id = handler.parse_id(fields)

    return ParsedEvent(
        repo_name=repo_name,
        object_id=object_id,
        tracked_object=handler.parse_object(fields, object_id),
        activity=handler.parse_activity(fields, created_at),
    )
