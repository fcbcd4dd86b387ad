"""Naver/Google ad performance reporting package."""

from .analyzer import PerformanceEngine
from .application import (
    DailyAnalysisResult,
    ReportOutcome,
    WeeklyAnalysisResult,
    run_daily_analysis,
    run_daily_report,
    run_weekly_analysis,
    run_weekly_report,
)
from .exceptions import AdReportError, ExportError, InputValidationError
from .ingestion import parse_data_text, parse_google_weekly_data, parse_naver_weekly_data

__all__ = [
    "PerformanceEngine",
    "parse_data_text",
    "parse_naver_weekly_data",
    "parse_google_weekly_data",
    "DailyAnalysisResult",
    "WeeklyAnalysisResult",
    "ReportOutcome",
    "run_daily_analysis",
    "run_weekly_analysis",
    "run_daily_report",
    "run_weekly_report",
    "AdReportError",
    "InputValidationError",
    "ExportError",
]
