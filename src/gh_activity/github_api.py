"""GitHub REST API 동기 클라이언트.

유저 이벤트 피드(GET /users/{user}/events[/public])를 페이지 단위로 조회한다.
- 5xx / 타임아웃은 지수 백오프 재시도
- 4xx는 즉시 실패
- JSON 배열이 아닌 응답은 GitHubDecodeError
"""

from __future__ import annotations

import logging
import os
import random
import time
from typing import Any

import httpx

from gh_activity.config import GitHubApiConfig

logger = logging.getLogger(__name__)


class GitHubApiError(Exception):
    """GitHub API 호출 실패 (네트워크/HTTP)."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(f"GitHub API error {status_code}: {message}")


class GitHubDecodeError(GitHubApiError):
    """응답 본문이 기대한 JSON 형식이 아니다."""


class GitHubApiClient:
    """GitHub REST API 동기 클라이언트."""

    def __init__(self, config: GitHubApiConfig, token: str | None = None) -> None:
        token = token or os.environ.get(config.token_env_var, "")
        if not token:
            raise RuntimeError(f"환경변수 {config.token_env_var}이 설정되지 않았습니다")

        self._config = config
        self._client = httpx.Client(
            base_url=config.base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": config.user_agent,
            },
            timeout=config.request_timeout_sec,
        )

    def _get_json(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
        """GET 요청 후 JSON 본문을 반환한다 (5xx/타임아웃 재시도)."""
        max_retries = self._config.max_retries

        for attempt in range(max_retries + 1):
            try:
                resp = self._client.get(path, params=params)
            except httpx.TimeoutException as exc:
                if attempt < max_retries:
                    delay = _backoff_wait(attempt, self._config.backoff_factor)
                    logger.warning(
                        "Timeout, retry %d/%d in %.1fs: %s",
                        attempt + 1,
                        max_retries,
                        delay,
                        exc,
                    )
                    time.sleep(delay)
                    continue
                raise GitHubApiError(0, f"Timeout after {max_retries} retries: {exc}") from exc
            except httpx.HTTPError as exc:
                raise GitHubApiError(0, f"Request failed: {exc}") from exc

            if resp.status_code >= 500:
                if attempt < max_retries:
                    delay = _backoff_wait(attempt, self._config.backoff_factor)
                    logger.warning(
                        "Server error %d, retry %d/%d in %.1fs",
                        resp.status_code,
                        attempt + 1,
                        max_retries,
                        delay,
                    )
                    time.sleep(delay)
                    continue
                raise GitHubApiError(
                    resp.status_code,
                    f"Server error after {max_retries} retries",
                )

            if resp.status_code >= 400:
                raise GitHubApiError(resp.status_code, _error_message(resp))

            try:
                return resp.json()
            except ValueError as exc:
                raise GitHubDecodeError(resp.status_code, f"Invalid JSON body: {exc}") from exc

        # max_retries >= 0 이므로 도달하지 않는다
        raise GitHubApiError(0, "Max retries exceeded")

    def fetch_events_page(self, user: str, page: int, *, private: bool = False) -> list[dict[str, Any]]:
        """유저 이벤트 피드의 한 페이지를 조회한다.

        Args:
            user: GitHub 유저명
            page: 1부터 시작하는 페이지 번호
            private: True이면 /users/{user}/events (인증 유저 본인이면 비공개 포함),
                False이면 /users/{user}/events/public

        Returns:
            이벤트 객체 배열 (최신 → 오래된 순)

        Raises:
            GitHubApiError: HTTP/네트워크 오류
            GitHubDecodeError: 응답이 JSON 배열이 아님
        """
        path = f"/users/{user}/events" if private else f"/users/{user}/events/public"
        data = self._get_json(path, params={"page": page, "per_page": self._config.per_page})

        if not isinstance(data, list):
            raise GitHubDecodeError(200, f"Expected JSON array from {path}, got {type(data).__name__}")

        logger.debug("Fetched %d events from %s (page=%d)", len(data), path, page)
        return data

    def close(self) -> None:
        """httpx.Client를 종료한다."""
        self._client.close()

    def __enter__(self) -> GitHubApiClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


def _error_message(resp: httpx.Response) -> str:
    """4xx 응답 본문에서 message 필드를 꺼낸다."""
    try:
        body = resp.json()
    except ValueError:
        return resp.reason_phrase or "client error"
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return resp.reason_phrase or "client error"


def _backoff_wait(attempt: int, backoff_factor: float) -> float:
    """지수 백오프 + 지터 대기 시간을 계산한다."""
    return backoff_factor ** (attempt + 1) + random.uniform(0, 1)
