"""Ad report entrypoint."""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger

from adreport.application.report_service import ReportOutcome, run_daily_report, run_weekly_report
from adreport.config import ReportSettings, load_settings
from adreport.exceptions import AdReportError
from adreport.ingestion import parse_additional_metrics, parse_manual_week_row


def _read_text(path: Path) -> str:
    # tolerates a leading BOM
    return path.read_text(encoding="utf-8-sig")


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"날짜 형식은 YYYY-MM-DD 입니다: {value}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Naver/Google 광고 성과 리포트 생성기")
    subparsers = parser.add_subparsers(dest="command", required=True)

    daily = subparsers.add_parser("daily", help="일일 광고 성과 리포트")
    daily.add_argument("input", type=Path, help="붙여넣은 일일 성과 데이터 파일 (탭/콤마 구분)")
    daily.add_argument("--date", type=_parse_date, default=None, help="리포트 기준일 (기본: 오늘)")

    weekly = subparsers.add_parser("weekly", help="주간 광고 운영 리포트")
    weekly.add_argument("--naver", type=Path, required=True, help="네이버 키워드 보고서 파일")
    weekly.add_argument("--google", type=Path, required=True, help="구글 검색어 보고서 파일")
    weekly.add_argument("--ga", default="0", help="GA 전환수")
    weekly.add_argument("--inquiries", default="0", help="실문의 건수")
    weekly.add_argument("--pmax", default="0", help="퍼포먼스 맥스 광고비")
    weekly.add_argument("--prev-week", type=Path, default=None, help="지지난주 합계 행 파일 (탭 구분 9개 항목)")
    weekly.add_argument("--date", type=_parse_date, default=None, help="주차 계산 기준일 (기본: 오늘)")

    for sub in (daily, weekly):
        sub.add_argument("--output-dir", type=Path, default=None, help="출력 폴더 (기본: ADREPORT_OUTPUT_DIR)")
        sub.add_argument("--json", action="store_true", help="요약 JSON도 함께 저장")
    return parser


def _settings_for(args: argparse.Namespace) -> ReportSettings:
    settings = load_settings()
    if args.output_dir is not None:
        settings = replace(settings, output_dir=args.output_dir)
    if args.json:
        settings = replace(settings, write_json=True)
    return settings


def _read_inputs(args: argparse.Namespace) -> Dict[str, Optional[str]]:
    if args.command == "daily":
        return {"daily": _read_text(args.input)}
    return {
        "naver": _read_text(args.naver),
        "google": _read_text(args.google),
        "prev_week": _read_text(args.prev_week) if args.prev_week else None,
    }


def _run(args: argparse.Namespace, inputs: Dict[str, Optional[str]], settings: ReportSettings) -> ReportOutcome:
    if args.command == "daily":
        return run_daily_report(inputs["daily"], report_date=args.date, settings=settings)

    return run_weekly_report(
        inputs["naver"],
        inputs["google"],
        parse_additional_metrics(args.ga, args.inquiries, args.pmax),
        manual_row=parse_manual_week_row(inputs["prev_week"]),
        reference_date=args.date,
        settings=settings,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = _settings_for(args)
    except ValueError as exc:
        print(f"설정 오류: {exc}", file=sys.stderr)
        return 1

    logger.remove()
    logger.add(sys.stderr, level=settings.log_level, format="{time:HH:mm:ss} | {level:<7} | {message}")

    try:
        inputs = _read_inputs(args)
    except OSError as exc:
        print(f"입력 파일을 읽을 수 없습니다: {exc}", file=sys.stderr)
        return 1

    try:
        outcome = _run(args, inputs, settings)
    except AdReportError as exc:
        print(exc.message, file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"리포트를 저장할 수 없습니다: {exc}", file=sys.stderr)
        return 1

    if outcome.saved:
        print(f"Saved Excel: {outcome.workbook_path}")
    else:
        print(f"Excel save skipped (file may be open/locked): {outcome.error_message}")
    if outcome.json_path is not None:
        print(f"Saved JSON: {outcome.json_path}")
    return 0 if outcome.saved else 1


if __name__ == "__main__":
    sys.exit(main())
