"""Environment-driven settings for report generation."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

LOG_LEVELS: tuple[str, ...] = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")
TRUE_VALUES: tuple[str, ...] = ("1", "true", "yes", "on")
FALSE_VALUES: tuple[str, ...] = ("0", "false", "no", "off", "")

DEFAULT_DAILY_TITLE = "ChatGPT 교육 광고 - 주간 성과 리포트"
DEFAULT_DAILY_FILE_PREFIX = "ChatGPT교육_광고리포트"
DEFAULT_WEEKLY_TITLE = "지피티코리아 주간 광고운영내역"
DEFAULT_WEEKLY_SUBTITLE = "네이버 건매수, 구글 건매수"
DEFAULT_WEEKLY_FILE_PREFIX = "지피티코리아_주간광고운영내역"
DEFAULT_WEEKLY_ISSUE_NOTE = "- 일광고비 7만원 이하 운영 (PC 1,300 / 모바일 1,800)"


@dataclass(frozen=True)
class ReportSettings:
    output_dir: Path
    log_level: str
    daily_title: str
    daily_file_prefix: str
    weekly_title: str
    weekly_subtitle: str
    weekly_file_prefix: str
    weekly_issue_note: str
    write_json: bool


def _log_level() -> str:
    raw = os.getenv("ADREPORT_LOG_LEVEL", "INFO").strip().upper()
    if raw not in LOG_LEVELS:
        raise ValueError(f"Invalid ADREPORT_LOG_LEVEL: {raw} (expected one of {', '.join(LOG_LEVELS)})")
    return raw


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ValueError(f"Invalid {name}: {raw}")


def _text(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def load_settings() -> ReportSettings:
    """Read settings from ``ADREPORT_*`` environment variables."""
    return ReportSettings(
        output_dir=Path(_text("ADREPORT_OUTPUT_DIR", "output")),
        log_level=_log_level(),
        daily_title=_text("ADREPORT_DAILY_TITLE", DEFAULT_DAILY_TITLE),
        daily_file_prefix=_text("ADREPORT_DAILY_FILE_PREFIX", DEFAULT_DAILY_FILE_PREFIX),
        weekly_title=_text("ADREPORT_WEEKLY_TITLE", DEFAULT_WEEKLY_TITLE),
        weekly_subtitle=_text("ADREPORT_WEEKLY_SUBTITLE", DEFAULT_WEEKLY_SUBTITLE),
        weekly_file_prefix=_text("ADREPORT_WEEKLY_FILE_PREFIX", DEFAULT_WEEKLY_FILE_PREFIX),
        weekly_issue_note=_text("ADREPORT_WEEKLY_ISSUE_NOTE", DEFAULT_WEEKLY_ISSUE_NOTE),
        write_json=_flag("ADREPORT_WRITE_JSON", False),
    )
