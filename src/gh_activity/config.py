"""YAML 설정 로딩 + Pydantic 모델."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from gh_activity.parser import SUPPORTED_EVENT_TYPES

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config.yaml"


# ── 설정 모델 ──────────────────────────────────────────


class GitHubApiConfig(BaseModel):
    base_url: str = "https://api.github.com"
    token_env_var: str = "GITHUB_TOKEN"
    request_timeout_sec: float = 30.0
    max_retries: int = Field(default=2, ge=0)
    backoff_factor: float = 2.0
    per_page: int = Field(default=30, ge=1, le=100)
    user_agent: str = "gh-activity/0.1.0"


class CollectConfig(BaseModel):
    max_pages: int = Field(default=10, ge=1)  # 페이지 상한 (무한 pagination 방지)
    include_private: bool = False
    event_types: list[str] = Field(default_factory=lambda: list(SUPPORTED_EVENT_TYPES))
    dedupe: bool = True

    @field_validator("event_types")
    @classmethod
    def event_types_supported(cls, v: list[str]) -> list[str]:
        unknown = [t for t in v if t not in SUPPORTED_EVENT_TYPES]
        if unknown:
            raise ValueError(f"unsupported event types: {unknown}")
        return v


class RenderConfig(BaseModel):
    max_body_length: int = Field(default=30, ge=1)


class AppConfig(BaseModel):
    """애플리케이션 전체 설정."""

    user_name: str = ""
    timezone: str | None = None  # None이면 시스템 로컬 타임존
    github_api: GitHubApiConfig = Field(default_factory=GitHubApiConfig)
    collect: CollectConfig = Field(default_factory=CollectConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)


# ── 로딩 ───────────────────────────────────────────────


def load_config(path: Path | None = None) -> AppConfig:
    """YAML 설정 파일을 로딩하고 Pydantic 모델로 검증한다.

    환경변수 우선순위: 시스템 환경변수 > .env 파일 > config.yaml 기본값
    기본 경로의 config.yaml이 없으면 모델 기본값을 사용한다.
    """
    config_path = path or _DEFAULT_CONFIG_PATH

    dotenv_path = config_path.parent / ".env"
    load_dotenv(dotenv_path=dotenv_path, override=False)

    if path is None and not config_path.exists():
        raw: dict = {}
    else:
        with open(config_path) as f:
            raw = yaml.safe_load(f)

        if raw is None:
            raise ValueError(f"Empty config file: {config_path}")

    # 환경변수 오버라이드
    if user_name := os.environ.get("GITHUB_USER"):
        raw["user_name"] = user_name

    if tz_name := os.environ.get("GH_ACTIVITY_TIMEZONE"):
        raw["timezone"] = tz_name

    return AppConfig.model_validate(raw)
