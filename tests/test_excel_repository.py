"""엑셀 워크북 렌더링 및 저장 테스트."""

import io
from datetime import date
from pathlib import Path

import pytest
from openpyxl import load_workbook
from openpyxl.utils.exceptions import IllegalCharacterError

from adreport.application.analysis_service import run_daily_analysis, run_weekly_analysis
from adreport.domain.models import AdditionalMetrics, InsightLevel
from adreport.exceptions import ExportError
from adreport.infrastructure import excel_repository
from adreport.infrastructure.excel_repository import (
    ACTION_SHEET,
    DAILY_DETAIL_SHEET,
    KEYWORD_SHEET,
    PLATFORM_SHEET,
    SUMMARY_SHEET,
    WEEKLY_SHEET,
    build_daily_workbook,
    build_weekly_workbook,
    daily_report_filename,
    save_output_workbook,
    weekly_report_filename,
)
from adreport.ingestion import parse_manual_week_row
from conftest import DAILY_HEADER, DAILY_ROWS


def _open(payload: bytes):
    return load_workbook(io.BytesIO(payload))


def _column_values(ws, column: str) -> list:
    return [cell.value for cell in ws[column]]


# ── 일일 리포트 ──

def test_daily_workbook_sheets(daily_text):
    payload = build_daily_workbook(run_daily_analysis(daily_text), date(2026, 1, 14), title="테스트 리포트")

    wb = _open(payload)

    assert wb.sheetnames == [SUMMARY_SHEET, DAILY_DETAIL_SHEET, KEYWORD_SHEET, PLATFORM_SHEET, ACTION_SHEET]


def test_daily_summary_sheet(daily_text):
    wb = _open(build_daily_workbook(run_daily_analysis(daily_text), date(2026, 1, 14), title="테스트 리포트"))
    ws = wb[SUMMARY_SHEET]

    assert ws["A1"].value == "테스트 리포트"
    assert [ws.cell(row=3, column=col).value for col in range(1, 4)] == ["구분", "01월 13일", "01월 12일"]
    assert ws["A4"].value == "광고비"
    assert ws["B4"].value == 29117
    assert ws["A7"].value == "CTR"
    assert ws["B7"].value == "0.41%"
    assert "Google 매체 집중도 78%" in _column_values(ws, "B")


def test_daily_detail_keyword_platform_sheets(daily_text):
    wb = _open(build_daily_workbook(run_daily_analysis(daily_text), date(2026, 1, 14)))

    detail = wb[DAILY_DETAIL_SHEET]
    assert detail["A1"].value == "매체"
    assert _column_values(detail, "B")[1:] == ["CHATGPT강의", "챗GPT강의", "챗GPT교육"]

    keywords = wb[KEYWORD_SHEET]
    assert keywords["A2"].value == 1
    assert keywords["C2"].value == "챗GPT교육"
    assert keywords["I2"].value == "감소"
    assert "트렌드 판단 기준" in _column_values(keywords, "A")

    platforms = wb[PLATFORM_SHEET]
    assert platforms["A2"].value == "Google"
    assert platforms["C2"].value == "77.6%"
    assert platforms["G2"].value == "CPC 효율성, CTR 높음"


def test_daily_action_sheet_groups_by_level(daily_text):
    wb = _open(build_daily_workbook(run_daily_analysis(daily_text), date(2026, 1, 14)))
    ws = wb[ACTION_SHEET]

    titles = _column_values(ws, "A")
    assert ws["A1"].value == "🟡 적극적 기회"
    assert titles.index("🟡 적극적 기회") < titles.index("🟢 긍정적 지표 (유지 전략)")
    reasons = _column_values(ws, "B")
    assert reasons.index("Google 매체 집중도 78%") < reasons.index("주간 광고비 20.9% 감소 - 효율성 개선 중")


def test_daily_action_sheet_omits_levels_without_insights(daily_text):
    result = run_daily_analysis(daily_text)
    wb = _open(build_daily_workbook(result, date(2026, 1, 14)))

    titles = _column_values(wb[ACTION_SHEET], "A")
    assert all(insight.level != InsightLevel.URGENT for insight in result.insights)
    assert "🔴 즉시 조치 필요" not in titles
    assert titles.count("No") == 2


def test_daily_workbook_strips_control_characters():
    row = DAILY_ROWS[0].replace("CHATGPT강의", "CHATGPT\x01강의")
    result = run_daily_analysis("\n".join([DAILY_HEADER, row, *DAILY_ROWS[1:]]))

    wb = _open(build_daily_workbook(result, date(2026, 1, 14), title="리포트\x02"))

    assert wb[SUMMARY_SHEET]["A1"].value == "리포트"
    assert _column_values(wb[DAILY_DETAIL_SHEET], "B")[1] == "CHATGPT강의"
    texts = [cell.value for ws in wb.worksheets for row in ws.iter_rows() for cell in row if isinstance(cell.value, str)]
    assert not any("\x01" in text for text in texts)


def test_daily_workbook_failure_raises_export_error(daily_text, monkeypatch):
    def _broken(metrics):
        raise IllegalCharacterError("bad cell")

    monkeypatch.setattr(excel_repository, "summary_metric_rows", _broken)

    with pytest.raises(ExportError) as exc_info:
        build_daily_workbook(run_daily_analysis(daily_text), date(2026, 1, 14))

    assert exc_info.value.message == "리포트 생성에 실패했습니다."
    assert exc_info.value.details["report"] == "daily"


# ── 주간 리포트 ──

def _weekly_result(naver_text, google_text, manual_text=None):
    return run_weekly_analysis(
        naver_text,
        google_text,
        AdditionalMetrics(ga_conversions=2, real_inquiries=1, pmax_spend=5000),
        manual_row=parse_manual_week_row(manual_text),
        reference_date=date(2026, 1, 14),
    )


def test_weekly_workbook_layout(naver_text, google_text):
    wb = _open(build_weekly_workbook(_weekly_result(naver_text, google_text), title="주간 리포트", subtitle="부제"))
    ws = wb[WEEKLY_SHEET]

    assert wb.sheetnames == [WEEKLY_SHEET]
    assert ws["A1"].value == "주간 리포트"
    assert ws["A2"].value == "부제"
    assert ws["A4"].value == "운영이슈"
    assert ws["A7"].value == "1. 전체"
    assert ws["I8"].value == "퍼맥스광고비"
    assert ws["A9"].value == "01.05~01.09"
    assert [ws.cell(row=9, column=col).value for col in range(2, 10)] == [1744, 9, 955, 8591, 2, 1, 2864, 5000]
    assert ws["A10"].value == "12.29~01.02"
    assert ws["A11"].value == "전주 비교"

    sections = _column_values(ws, "A")
    assert "2. 네이버" in sections
    assert "3. 구글" in sections
    naver_row = sections.index("2. 네이버") + 3
    assert [ws.cell(row=naver_row, column=col).value for col in range(1, 6)] == ["01.05~01.09", 1600, 5, 862, 4312]
    assert ws.cell(row=naver_row - 1, column=9).value is None


def test_weekly_workbook_manual_row_fills_overall_prior_week(naver_text, google_text):
    manual = "12.22~12.26\t1500\t10\t900\t9000\t2\t1\t3000\t4000"
    wb = _open(build_weekly_workbook(_weekly_result(naver_text, google_text, manual)))
    ws = wb[WEEKLY_SHEET]

    assert [ws.cell(row=10, column=col).value for col in range(1, 10)] == [
        "12.22~12.26",
        1500,
        10,
        900,
        9000,
        2,
        1,
        3000,
        4000,
    ]


def test_weekly_workbook_strips_control_characters_from_note(naver_text, google_text):
    wb = _open(build_weekly_workbook(_weekly_result(naver_text, google_text), issue_note="특이사항\x0b없음"))

    assert wb[WEEKLY_SHEET]["A5"].value == "특이사항없음"


def test_weekly_workbook_failure_raises_export_error(naver_text, google_text, monkeypatch):
    def _broken(*args):
        raise KeyError("scope")

    monkeypatch.setattr(excel_repository, "weekly_current_row", _broken)

    with pytest.raises(ExportError) as exc_info:
        build_weekly_workbook(_weekly_result(naver_text, google_text))

    assert exc_info.value.details["report"] == "weekly"


# ── 파일명 / 저장 ──

def test_report_filenames():
    assert daily_report_filename("리포트", date(2026, 1, 14)) == "리포트_2026-01-14.xlsx"
    assert weekly_report_filename("주간", "01.05~01.09") == "주간_01.05-01.09.xlsx"


def test_save_output_workbook(tmp_path):
    target = tmp_path / "nested" / "report.xlsx"

    saved, message = save_output_workbook(target, b"payload")

    assert saved is True
    assert message == ""
    assert target.read_bytes() == b"payload"


def test_save_output_workbook_reports_locked_file(tmp_path, monkeypatch):
    def _locked(self, data):
        raise PermissionError("file is open")

    monkeypatch.setattr(Path, "write_bytes", _locked)

    saved, message = save_output_workbook(tmp_path / "report.xlsx", b"payload")

    assert saved is False
    assert "file is open" in message


def test_save_output_workbook_reports_unwritable_target(tmp_path):
    target = tmp_path / "report.xlsx"
    target.mkdir()

    saved, message = save_output_workbook(target, b"payload")

    assert saved is False
    assert message
