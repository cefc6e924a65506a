"""click CLI 엔트리포인트.

gh-activity report --from-date 2024-01-01 --to-date 2024-01-07
gh-activity report --private --format json --output activity.json
"""

from __future__ import annotations

import logging
from datetime import date as date_type
from datetime import datetime
from pathlib import Path

import click
from pydantic import ValidationError

from gh_activity import __version__
from gh_activity.collector import ActivityCollector, CollectStats
from gh_activity.config import load_config
from gh_activity.dateutil import day_window, parse_date, resolve_timezone
from gh_activity.github_api import GitHubApiClient, GitHubApiError
from gh_activity.logging_config import setup_logging
from gh_activity.markdown import render_json, render_markdown

logger = logging.getLogger(__name__)


def _parse_date_option(value: str, option: str) -> date_type:
    """YYYY-MM-DD 형식의 날짜 옵션을 파싱한다."""
    try:
        return parse_date(value)
    except ValueError as exc:
        raise click.BadParameter(
            f"날짜 형식이 올바르지 않습니다: {value} (YYYY-MM-DD)", param_hint=option
        ) from exc


@click.group()
@click.version_option(version=__version__, prog_name="gh-activity")
def main() -> None:
    """GitHub 유저 활동을 저장소/이슈/PR/커밋 단위로 요약합니다."""


@main.command()
@click.option("--user", "user_name", default=None, help="GitHub 유저명 (기본: 설정 user_name 또는 GITHUB_USER)")
@click.option("-f", "--from-date", default=None, help="시작 날짜 YYYY-MM-DD (기본: 오늘)")
@click.option("-t", "--to-date", default=None, help="종료 날짜 YYYY-MM-DD (기본: 오늘)")
@click.option(
    "-p/-P",
    "--private/--public",
    "include_private",
    default=None,
    help="비공개 저장소 활동 포함 여부 (미지정 시 설정 collect.include_private)",
)
@click.option("--max-pages", default=None, type=click.IntRange(min=1), help="조회할 최대 페이지 수")
@click.option(
    "--format",
    "output_format",
    default="markdown",
    type=click.Choice(["markdown", "json"]),
    help="출력 형식 (기본: markdown)",
)
@click.option(
    "-o",
    "--output",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="결과를 파일로 저장 (기본: stdout)",
)
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(exists=True, path_type=Path),
    help="설정 파일 경로 (기본: 프로젝트 루트 config.yaml)",
)
@click.option("--json-log/--no-json-log", default=False, help="JSON 로그 포맷 (기본: 비활성)")
@click.option("-v", "--verbose", is_flag=True, help="DEBUG 로그 출력")
def report(
    user_name: str | None,
    from_date: str | None,
    to_date: str | None,
    include_private: bool | None,
    max_pages: int | None,
    output_format: str,
    output: Path | None,
    config_path: Path | None,
    json_log: bool,
    verbose: bool,
) -> None:
    """지정 기간의 활동을 수집해 markdown(또는 JSON)으로 출력합니다.

    수집 중 오류가 나면 아무것도 출력하지 않고 종료 코드 1로 끝납니다.
    """
    setup_logging(json_format=json_log, level=logging.DEBUG if verbose else logging.INFO)

    # ── 설정 로딩 ──
    try:
        config = load_config(config_path)
    except (ValidationError, ValueError) as exc:
        raise click.ClickException(f"설정 파일을 읽을 수 없습니다: {exc}") from exc

    user = user_name or config.user_name
    if not user:
        raise click.UsageError("--user 또는 설정 user_name(GITHUB_USER)을 지정하세요")

    try:
        tz = resolve_timezone(config.timezone)
    except (KeyError, ValueError) as exc:
        raise click.ClickException(f"알 수 없는 타임존입니다: {config.timezone}") from exc

    # ── 기간 결정 ──
    today = datetime.now(tz).date() if tz else date_type.today()
    start = _parse_date_option(from_date, "--from-date") if from_date else today
    end = _parse_date_option(to_date, "--to-date") if to_date else today
    if start > end:
        raise click.BadParameter(f"from-date({start})가 to-date({end})보다 늦습니다")

    from_dt, to_dt = day_window(start, end, tz)
    logger.info(
        "Collecting activity for %s: %s ~ %s",
        user,
        from_dt.isoformat(),
        to_dt.isoformat(),
        extra={"event_code": "COLLECT_START", "user": user},
    )

    # ── 수집 ──
    try:
        with GitHubApiClient(config.github_api) as api:
            collector = ActivityCollector(api, config)
            result = collector.collect(
                user,
                from_dt,
                to_dt,
                include_private=include_private,
                max_pages=max_pages,
            )
    except RuntimeError as exc:
        raise click.ClickException(str(exc)) from exc
    except GitHubApiError as exc:
        logger.error(
            "Collection failed: %s",
            exc,
            extra={"event_code": "COLLECT_ERROR", "user": user},
        )
        raise click.ClickException(str(exc)) from exc

    _log_summary(result.stats)

    # ── 출력 ──
    if output_format == "json":
        text = render_json(result.index).decode("utf-8") + "\n"
    else:
        text = render_markdown(result.index, max_body_length=config.render.max_body_length)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        click.echo(f"Wrote {len(result.index)} objects to {output}", err=True)
    else:
        click.echo(text, nl=False)


def _log_summary(stats: CollectStats) -> None:
    """수집 통계 요약 로그."""
    logger.info(
        "Summary: pages=%d, fetched=%d, matched=%d, unsupported=%d, out_of_range=%d, "
        "malformed=%d, duplicates=%d, applied=%d, %.1fs",
        stats.pages_fetched,
        stats.events_fetched,
        stats.events_matched,
        stats.events_unsupported,
        stats.events_out_of_range,
        stats.events_malformed,
        stats.duplicates_removed,
        stats.events_applied,
        stats.duration_ms / 1000,
        extra={"event_code": "SUMMARY", "user": stats.user, "count": stats.events_applied},
    )
