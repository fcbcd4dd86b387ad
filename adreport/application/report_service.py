"""Report use cases: analysis -> workbook -> file (+ optional JSON summary)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from time import perf_counter
from typing import Any, Callable, Dict, Optional, Union

from loguru import logger

from adreport.application.analysis_service import (
    DailyAnalysisResult,
    WeeklyAnalysisResult,
    run_daily_analysis,
    run_weekly_analysis,
)
from adreport.application.reporting.rendering import KEYWORD_RANKING_LIMIT
from adreport.config import ReportSettings, load_settings
from adreport.domain.models import AdditionalMetrics, ManualWeekRow
from adreport.infrastructure.excel_repository import (
    build_daily_workbook,
    build_weekly_workbook,
    daily_report_filename,
    save_output_workbook,
    weekly_report_filename,
)
from adreport.infrastructure.report_exporter import save_summary_json


@dataclass(frozen=True)
class ReportOutcome:
    workbook_path: Path
    saved: bool
    error_message: str
    analysis: Union[DailyAnalysisResult, WeeklyAnalysisResult]
    json_path: Optional[Path] = None


def _stage_timer() -> tuple[Callable[[str], None], list[tuple[str, float]]]:
    stage_timings: list[tuple[str, float]] = []
    stage_start = perf_counter()

    def _mark(stage_name: str) -> None:
        nonlocal stage_start
        now = perf_counter()
        stage_timings.append((stage_name, now - stage_start))
        stage_start = now

    return _mark, stage_timings


def _log_timings(report: str, stage_timings: list[tuple[str, float]]) -> None:
    stage_text = ", ".join([f"{name}={seconds:.3f}s" for name, seconds in stage_timings])
    total = sum(seconds for _, seconds in stage_timings)
    logger.debug(f"[report] {report} stage timing: {stage_text}")
    logger.info(f"[report] {report} total elapsed: {total:.3f}s")


def daily_summary(result: DailyAnalysisResult, report_date: date) -> Dict[str, Any]:
    return {
        "report": "daily",
        "report_date": report_date.isoformat(),
        "record_count": len(result.records),
        "metrics": result.metrics,
        "platforms": result.platforms,
        "top_keywords": result.keywords[:KEYWORD_RANKING_LIMIT],
        "insights": result.insights,
    }


def weekly_summary(result: WeeklyAnalysisResult) -> Dict[str, Any]:
    return {
        "report": "weekly",
        "current_week": result.current_week,
        "prior_week": result.prior_week,
        "summary": result.summary,
        "prior_week_row": result.manual_row,
    }


def _finish(
    report: str,
    workbook_path: Path,
    payload: bytes,
    summary: Dict[str, Any],
    analysis: Union[DailyAnalysisResult, WeeklyAnalysisResult],
    write_json: bool,
    mark: Callable[[str], None],
) -> ReportOutcome:
    saved, error_message = save_output_workbook(workbook_path, payload)
    mark("save_excel")
    if saved:
        logger.info(f"[report] saved {report} workbook: {workbook_path}")
    else:
        logger.warning(f"[report] {report} workbook not saved (file may be open/locked): {error_message}")

    json_path: Optional[Path] = None
    # no summary next to a workbook that was never written
    if write_json and saved:
        json_path = workbook_path.with_suffix(".json")
        save_summary_json(json_path, summary)
        mark("save_json")
        logger.info(f"[report] saved {report} summary: {json_path}")

    return ReportOutcome(
        workbook_path=workbook_path,
        saved=saved,
        error_message=error_message,
        analysis=analysis,
        json_path=json_path,
    )


def run_daily_report(
    text: str,
    report_date: Optional[date] = None,
    settings: Optional[ReportSettings] = None,
) -> ReportOutcome:
    settings = settings or load_settings()
    report_date = report_date or date.today()
    mark, stage_timings = _stage_timer()

    analysis = run_daily_analysis(text)
    mark("run_daily_analysis")
    payload = build_daily_workbook(analysis, report_date, title=settings.daily_title)
    mark("build_workbook")

    workbook_path = settings.output_dir / daily_report_filename(settings.daily_file_prefix, report_date)
    outcome = _finish(
        "daily",
        workbook_path,
        payload,
        daily_summary(analysis, report_date),
        analysis,
        settings.write_json,
        mark,
    )
    _log_timings("daily", stage_timings)
    return outcome


def run_weekly_report(
    naver_text: str,
    google_text: str,
    metrics: AdditionalMetrics,
    manual_row: Optional[ManualWeekRow] = None,
    reference_date: Optional[date] = None,
    settings: Optional[ReportSettings] = None,
) -> ReportOutcome:
    settings = settings or load_settings()
    mark, stage_timings = _stage_timer()

    analysis = run_weekly_analysis(
        naver_text,
        google_text,
        metrics,
        manual_row=manual_row,
        reference_date=reference_date,
    )
    mark("run_weekly_analysis")
    payload = build_weekly_workbook(
        analysis,
        title=settings.weekly_title,
        subtitle=settings.weekly_subtitle,
        issue_note=settings.weekly_issue_note,
    )
    mark("build_workbook")

    workbook_path = settings.output_dir / weekly_report_filename(settings.weekly_file_prefix, analysis.current_week)
    outcome = _finish(
        "weekly",
        workbook_path,
        payload,
        weekly_summary(analysis),
        analysis,
        settings.write_json,
        mark,
    )
    _log_timings("weekly", stage_timings)
    return outcome
