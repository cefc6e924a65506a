"""공통 fixture."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml


@pytest.fixture()
def issues_event() -> dict[str, Any]:
    """IssuesEvent 샘플."""
    return {
        "id": "30000000001",
        "type": "IssuesEvent",
        "actor": {"id": 1, "login": "octocat"},
        "repo": {"id": 100, "name": "octo-org/octo-repo"},
        "payload": {
            "action": "opened",
            "issue": {
                "number": 12,
                "title": "Crash on startup",
                "html_url": "https://github.com/octo-org/octo-repo/issues/12",
            },
        },
        "public": True,
        "created_at": "2024-01-15T10:30:00Z",
    }


@pytest.fixture()
def issue_comment_event() -> dict[str, Any]:
    """IssueCommentEvent 샘플."""
    return {
        "id": "30000000002",
        "type": "IssueCommentEvent",
        "actor": {"id": 1, "login": "octocat"},
        "repo": {"id": 100, "name": "octo-org/octo-repo"},
        "payload": {
            "action": "created",
            "issue": {
                "number": 12,
                "title": "Crash on startup",
                "html_url": "https://github.com/octo-org/octo-repo/issues/12",
            },
            "comment": {
                "id": 555,
                "body": "Reproduced on macOS 14 with the latest build.",
                "html_url": "https://github.com/octo-org/octo-repo/issues/12#issuecomment-555",
            },
        },
        "public": True,
        "created_at": "2024-01-15T11:00:00Z",
    }


@pytest.fixture()
def pull_request_event() -> dict[str, Any]:
    """PullRequestEvent 샘플."""
    return {
        "id": "30000000003",
        "type": "PullRequestEvent",
        "actor": {"id": 1, "login": "octocat"},
        "repo": {"id": 100, "name": "octo-org/octo-repo"},
        "payload": {
            "action": "closed",
            "number": 34,
            "pull_request": {
                "number": 34,
                "title": "Fix startup crash",
                "html_url": "https://github.com/octo-org/octo-repo/pull/34",
            },
        },
        "public": True,
        "created_at": "2024-01-15T12:00:00Z",
    }


@pytest.fixture()
def review_comment_event() -> dict[str, Any]:
    """PullRequestReviewCommentEvent 샘플."""
    return {
        "id": "30000000004",
        "type": "PullRequestReviewCommentEvent",
        "actor": {"id": 1, "login": "octocat"},
        "repo": {"id": 200, "name": "octo-org/tools"},
        "payload": {
            "action": "created",
            "pull_request": {
                "number": 7,
                "title": "Add lint step",
                "html_url": "https://github.com/octo-org/tools/pull/7",
            },
            "comment": {
                "id": 777,
                "body": "nit: typo",
                "html_url": "https://github.com/octo-org/tools/pull/7#discussion_r777",
            },
        },
        "public": True,
        "created_at": "2024-01-15T13:00:00Z",
    }


@pytest.fixture()
def commit_comment_event() -> dict[str, Any]:
    """CommitCommentEvent 샘플."""
    return {
        "id": "30000000005",
        "type": "CommitCommentEvent",
        "actor": {"id": 1, "login": "octocat"},
        "repo": {"id": 200, "name": "octo-org/tools"},
        "payload": {
            "action": "created",
            "comment": {
                "id": 999,
                "commit_id": "abcdef1234567890",
                "body": "Why was this reverted?",
                "html_url": "https://github.com/octo-org/tools/commit/abcdef1234567890#commitcomment-999",
            },
        },
        "public": True,
        "created_at": "2024-01-15T14:00:00Z",
    }


@pytest.fixture()
def watch_event() -> dict[str, Any]:
    """지원하지 않는 WatchEvent 샘플."""
    return {
        "id": "30000000006",
        "type": "WatchEvent",
        "actor": {"id": 1, "login": "octocat"},
        "repo": {"id": 300, "name": "someone/starred"},
        "payload": {"action": "started"},
        "public": True,
        "created_at": "2024-01-15T15:00:00Z",
    }


@pytest.fixture()
def sample_config_data() -> dict[str, Any]:
    """테스트용 config dict."""
    return {
        "user_name": "octocat",
        "timezone": None,
        "github_api": {
            "base_url": "https://api.github.com",
            "token_env_var": "GITHUB_TOKEN",
            "request_timeout_sec": 5,
            "max_retries": 1,
            "backoff_factor": 0.01,
            "per_page": 30,
        },
        "collect": {"max_pages": 3, "include_private": False, "dedupe": True},
        "render": {"max_body_length": 30},
    }


@pytest.fixture()
def tmp_config_file(tmp_path: Path, sample_config_data: dict[str, Any]) -> Path:
    """임시 YAML 설정 파일."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.dump(sample_config_data), encoding="utf-8")
    return config_path
