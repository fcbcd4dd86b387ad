"""Infrastructure adapter rendering analysis results into Excel workbooks."""

from __future__ import annotations

import io
from datetime import date
from pathlib import Path
from typing import Any, Sequence

from loguru import logger
from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import IllegalCharacterError

from adreport.application.analysis_service import DailyAnalysisResult, WeeklyAnalysisResult
from adreport.application.reporting.rendering import (
    ACTION_HEADERS,
    ACTION_SECTIONS,
    DAILY_DETAIL_HEADERS,
    KEYWORD_HEADERS,
    PLATFORM_HEADERS,
    SUMMARY_INSIGHT_LIMIT,
    TREND_CRITERIA,
    action_rows,
    daily_detail_rows,
    insights_by_level,
    keyword_ranking_rows,
    platform_rows,
    summary_headers,
    summary_metric_rows,
    weekly_comparison_row,
    weekly_current_row,
    weekly_headers,
    weekly_prior_row,
)
from adreport.config import (
    DEFAULT_DAILY_TITLE,
    DEFAULT_WEEKLY_ISSUE_NOTE,
    DEFAULT_WEEKLY_SUBTITLE,
    DEFAULT_WEEKLY_TITLE,
)
from adreport.domain.models import WeeklyScope
from adreport.exceptions import ExportError

SUMMARY_SHEET = "주요 지표"
DAILY_DETAIL_SHEET = "일일 광고 성과 분석"
KEYWORD_SHEET = "키워드별 상세 분석"
PLATFORM_SHEET = "Google vs Naver 매체 비교"
ACTION_SHEET = "개선 제안 및 액션 플랜"
WEEKLY_SHEET = "주간 광고 운영"

INSIGHT_SECTION_TITLE = "주요 인사이트"
TREND_SECTION_TITLE = "트렌드 판단 기준"
ISSUE_BOX_TITLE = "운영이슈"
WEEKLY_SECTIONS: list[tuple[WeeklyScope, str]] = [
    (WeeklyScope.OVERALL, "1. 전체"),
    (WeeklyScope.NAVER, "2. 네이버"),
    (WeeklyScope.GOOGLE, "3. 구글"),
]
WEEKLY_SHEET_WIDTH = 12
NUMBER_FORMAT = "#,##0"

_THIN = Side(style="thin")
_BORDER = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)
_TITLE_FONT = Font(bold=True, size=14)
_HEADER_FONT = Font(bold=True, color="FFFFFF", size=11)
_HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
_WEEKLY_TITLE_FILL = PatternFill(start_color="1E3A8A", end_color="1E3A8A", fill_type="solid")
_WEEKLY_HEADER_FILL = PatternFill(start_color="1E40AF", end_color="1E40AF", fill_type="solid")
_ISSUE_FILL = PatternFill(start_color="E8F5E9", end_color="E8F5E9", fill_type="solid")
_SECTION_FONT = Font(bold=True, size=12)
_SUBTITLE_FONT = Font(size=10, color="FF0000")
_CENTER = Alignment(horizontal="center", vertical="center")
_LEFT = Alignment(horizontal="left", vertical="center")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _cell_value(value: Any) -> Any:
    # control characters pasted with the report are not valid in xlsx
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def _write_header(ws, row: int, headers: Sequence[str], fill: PatternFill = _HEADER_FILL) -> None:
    for col, value in enumerate(headers, start=1):
        cell = ws.cell(row=row, column=col, value=_cell_value(value))
        cell.font = _HEADER_FONT
        cell.fill = fill
        cell.alignment = _CENTER
        cell.border = _BORDER


def _write_rows(ws, start_row: int, rows: Sequence[Sequence[Any]]) -> int:
    row_idx = start_row
    for values in rows:
        for col, value in enumerate(values, start=1):
            cell = ws.cell(row=row_idx, column=col, value=_cell_value(value))
            cell.border = _BORDER
            if _is_number(value):
                cell.number_format = NUMBER_FORMAT
        row_idx += 1
    return row_idx


def _write_table(ws, start_row: int, headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> int:
    """Header at ``start_row``, data below it. Returns the first free row."""
    _write_header(ws, start_row, headers)
    return _write_rows(ws, start_row + 1, rows)


def _write_title(ws, row: int, text: str, width: int, font: Font = _TITLE_FONT) -> None:
    ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=width)
    cell = ws.cell(row=row, column=1, value=_cell_value(text))
    cell.font = font
    cell.alignment = _CENTER


def _auto_width(ws, max_width: int = 50) -> None:
    for col in range(1, ws.max_column + 1):
        max_len = 0
        for row in ws.iter_rows(min_col=col, max_col=col):
            for cell in row:
                max_len = max(max_len, min(len(str(cell.value or "")), max_width))
        ws.column_dimensions[get_column_letter(col)].width = max(max_len + 2, 10)


def _to_bytes(workbook: Workbook) -> bytes:
    buf = io.BytesIO()
    workbook.save(buf)
    return buf.getvalue()


def _summary_sheet(ws, result: DailyAnalysisResult, report_date: date, title: str) -> None:
    headers = summary_headers(report_date)
    _write_title(ws, 1, title, len(headers))
    next_row = _write_table(ws, 3, headers, summary_metric_rows(result.metrics))

    section_row = next_row + 1
    ws.cell(row=section_row, column=1, value=INSIGHT_SECTION_TITLE).font = _SECTION_FONT
    rows = [
        [insight.level.value, insight.reason, insight.action, insight.period]
        for insight in result.insights[:SUMMARY_INSIGHT_LIMIT]
    ]
    _write_rows(ws, section_row + 1, rows)


def _keyword_sheet(ws, result: DailyAnalysisResult) -> None:
    next_row = _write_table(ws, 1, KEYWORD_HEADERS, keyword_ranking_rows(result.keywords))
    legend_row = next_row + 1
    ws.cell(row=legend_row, column=1, value=TREND_SECTION_TITLE).font = _SECTION_FONT
    for offset, (label, description) in enumerate(TREND_CRITERIA, start=1):
        ws.cell(row=legend_row + offset, column=1, value=label)
        ws.cell(row=legend_row + offset, column=2, value=description)


def _action_sheet(ws, result: DailyAnalysisResult) -> None:
    grouped = insights_by_level(result.insights)
    row = 1
    for level, section_title in ACTION_SECTIONS:
        if not grouped[level]:
            continue
        ws.cell(row=row, column=1, value=section_title).font = _SECTION_FONT
        row = _write_table(ws, row + 1, ACTION_HEADERS, action_rows(grouped[level]))
        row += 1


def build_daily_workbook(
    result: DailyAnalysisResult,
    report_date: date,
    title: str = DEFAULT_DAILY_TITLE,
) -> bytes:
    """Five-sheet daily report workbook as xlsx bytes."""
    try:
        workbook = Workbook()
        summary_ws = workbook.active
        summary_ws.title = SUMMARY_SHEET
        _summary_sheet(summary_ws, result, report_date, title)

        detail_ws = workbook.create_sheet(DAILY_DETAIL_SHEET)
        _write_table(detail_ws, 1, DAILY_DETAIL_HEADERS, daily_detail_rows(result.records))

        _keyword_sheet(workbook.create_sheet(KEYWORD_SHEET), result)

        platform_ws = workbook.create_sheet(PLATFORM_SHEET)
        _write_table(platform_ws, 1, PLATFORM_HEADERS, platform_rows(result.platforms))

        _action_sheet(workbook.create_sheet(ACTION_SHEET), result)

        for ws in workbook.worksheets:
            _auto_width(ws)
        return _to_bytes(workbook)
    except (TypeError, ValueError, AttributeError, IllegalCharacterError) as exc:
        logger.error(f"[export] daily workbook failed: {exc}")
        raise ExportError(details={"report": "daily", "error": str(exc)}) from exc


def _issue_box(ws, row: int, note: str) -> None:
    for offset, (text, font) in enumerate([(ISSUE_BOX_TITLE, Font(bold=True, size=11)), (note, Font(size=10))]):
        ws.merge_cells(start_row=row + offset, start_column=1, end_row=row + offset, end_column=WEEKLY_SHEET_WIDTH)
        cell = ws.cell(row=row + offset, column=1, value=_cell_value(text))
        cell.font = font
        cell.fill = _ISSUE_FILL
        cell.alignment = _LEFT
        cell.border = _BORDER


def _weekly_section(ws, row: int, section_title: str, scope: WeeklyScope, result: WeeklyAnalysisResult) -> int:
    show_all = scope == WeeklyScope.OVERALL
    summary = {item.scope: item for item in result.summary.scopes()}[scope]
    manual = result.manual_row if show_all else None

    ws.cell(row=row, column=1, value=section_title).font = _SECTION_FONT
    _write_header(ws, row + 1, weekly_headers(show_all), fill=_WEEKLY_HEADER_FILL)
    rows = [
        weekly_current_row(result.current_week, summary, show_all),
        weekly_prior_row(result.prior_week, manual, show_all),
        weekly_comparison_row(show_all),
    ]
    return _write_rows(ws, row + 2, rows) + 1


def build_weekly_workbook(
    result: WeeklyAnalysisResult,
    title: str = DEFAULT_WEEKLY_TITLE,
    subtitle: str = DEFAULT_WEEKLY_SUBTITLE,
    issue_note: str = DEFAULT_WEEKLY_ISSUE_NOTE,
) -> bytes:
    try:
        workbook = Workbook()
        ws = workbook.active
        ws.title = WEEKLY_SHEET

        _write_title(ws, 1, title, WEEKLY_SHEET_WIDTH, font=Font(bold=True, size=16, color="FFFFFF"))
        ws.cell(row=1, column=1).fill = _WEEKLY_TITLE_FILL
        ws.row_dimensions[1].height = 25
        _write_title(ws, 2, subtitle, WEEKLY_SHEET_WIDTH, font=_SUBTITLE_FONT)
        _issue_box(ws, 4, issue_note)

        row = 7
        for scope, section_title in WEEKLY_SECTIONS:
            row = _weekly_section(ws, row, section_title, scope, result)

        ws.column_dimensions["A"].width = 15
        for col in range(2, WEEKLY_SHEET_WIDTH + 1):
            ws.column_dimensions[get_column_letter(col)].width = 12
        return _to_bytes(workbook)
    except (TypeError, ValueError, AttributeError, KeyError, IllegalCharacterError) as exc:
        logger.error(f"[export] weekly workbook failed: {exc}")
        raise ExportError(details={"report": "weekly", "error": str(exc)}) from exc


def daily_report_filename(prefix: str, report_date: date) -> str:
    return f"{prefix}_{report_date.isoformat()}.xlsx"


def weekly_report_filename(prefix: str, week_label: str) -> str:
    return f"{prefix}_{week_label.replace('~', '-')}.xlsx"


def save_output_workbook(path: Path, payload: bytes) -> tuple[bool, str]:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(payload)
    except OSError as exc:
        logger.error(f"[export] cannot write {path}: {exc}")
        return False, str(exc)
    return True, ""
