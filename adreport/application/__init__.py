"""Application layer package."""

from .analysis_service import DailyAnalysisResult, WeeklyAnalysisResult, run_daily_analysis, run_weekly_analysis
from .report_service import ReportOutcome, run_daily_report, run_weekly_report

__all__ = [
    "DailyAnalysisResult",
    "WeeklyAnalysisResult",
    "run_daily_analysis",
    "run_weekly_analysis",
    "ReportOutcome",
    "run_daily_report",
    "run_weekly_report",
]
