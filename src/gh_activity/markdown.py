"""ActivityIndex → markdown / JSON 출력.

## owner/repo
- [Issue [#12](https://github.com/owner/repo/issues/12)] 제목
  - opened
  - Comment created: 본문 앞 30자...
"""

from __future__ import annotations

import io
from typing import TextIO

import orjson

from gh_activity.aggregator import ActivityIndex
from gh_activity.models import ActivityRecord, TrackedObject

MAX_BODY_LENGTH = 30
INDENT = "  "


def truncate_body(body: str, max_length: int = MAX_BODY_LENGTH) -> str:
    """max_length자(코드 포인트 기준)를 넘으면 잘라서 '...'을 붙인다."""
    if len(body) <= max_length:
        return body
    return f"{body[:max_length]}..."


def _object_line(obj: TrackedObject) -> str:
    return f"- [{obj.kind.value} [{obj.id}]({obj.link})] {obj.title or ''}\n"


def _activity_line(activity: ActivityRecord, max_body_length: int) -> str:
    line = f"{INDENT}- {activity.action}"
    if activity.body is not None:
        line += f": {truncate_body(activity.body, max_body_length)}"
    return line + "\n"


def write_markdown(
    index: ActivityIndex,
    writer: TextIO,
    *,
    max_body_length: int = MAX_BODY_LENGTH,
) -> None:
    """저장소 → 객체 → 활동(시간순) 순서로 markdown을 쓴다."""
    for repo_name, objects in index.items():
        writer.write(f"## {repo_name}\n")
        for obj in objects:
            writer.write(_object_line(obj))
            for activity in obj.sorted_activities():
                writer.write(_activity_line(activity, max_body_length))


def render_markdown(index: ActivityIndex, *, max_body_length: int = MAX_BODY_LENGTH) -> str:
    buffer = io.StringIO()
    write_markdown(index, buffer, max_body_length=max_body_length)
    return buffer.getvalue()


def render_json(index: ActivityIndex) -> bytes:
    """JSON 출력 (본문은 자르지 않는다)."""
    return orjson.dumps(index.to_dict(), option=orjson.OPT_INDENT_2)
