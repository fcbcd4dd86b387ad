"""Infrastructure layer package."""

from .excel_repository import build_daily_workbook, build_weekly_workbook, save_output_workbook
from .report_exporter import save_summary_json

__all__ = ["build_daily_workbook", "build_weekly_workbook", "save_output_workbook", "save_summary_json"]
