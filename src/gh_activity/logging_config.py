"""gh_activity 로거 설정.

로그는 항상 stderr로 보낸다. stdout은 markdown/JSON 결과 전용.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, TextIO

LOGGER_NAME = "gh_activity"

# logger.xxx(..., extra={...})로 넘기는 수집 컨텍스트 키
_CONTEXT_FIELDS = ("event_code", "user", "page", "count", "event_type", "duration_ms")

_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """한 줄 JSON 로그. 수집 컨텍스트(extra)는 값이 있을 때만 포함한다."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=UTC)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, value)
            for key in _CONTEXT_FIELDS
            if (value := getattr(record, key, None)) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(
    *,
    json_format: bool = True,
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> logging.Logger:
    """gh_activity 로거에 stderr 핸들러 하나를 설치하고 반환한다.

    여러 번 호출해도 핸들러는 하나만 유지된다.

    Args:
        json_format: True이면 JsonFormatter, False이면 텍스트 포맷
        level: 로그 레벨 (CLI -v 시 DEBUG)
        stream: 출력 스트림 (기본: 호출 시점의 sys.stderr)
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(JsonFormatter() if json_format else logging.Formatter(_TEXT_FORMAT))
    logger.addHandler(handler)
    return logger
