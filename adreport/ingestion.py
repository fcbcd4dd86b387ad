"""Pasted-text ingestion: delimited ad report text to typed records."""

from __future__ import annotations

import math
import re
from typing import Any, Callable, Sequence, TypeVar

import polars as pl
from loguru import logger

from adreport.domain.models import (
    AdditionalMetrics,
    AdRecord,
    GoogleWeeklyRecord,
    ManualWeekRow,
    NaverWeeklyRecord,
)
from adreport.exceptions import InputValidationError

RecordT = TypeVar("RecordT")

DAILY_COLUMNS: list[str] = [
    "platform",
    "keyword",
    "spend_today",
    "spend_prev_day",
    "spend_last_7d",
    "spend_prev_7d",
    "spend_this_month",
    "spend_last_month",
    "cpc_today",
    "cpc_prev_day",
    "cpc_last_7d",
    "cpc_prev_7d",
    "cpc_this_month",
    "cpc_last_month",
    "cvr",
    "campaign",
    "ad_group",
    "impressions",
    "clicks",
    "ctr",
]
DAILY_NUMERIC_COLUMNS: list[str] = [
    "spend_today",
    "spend_prev_day",
    "spend_last_7d",
    "spend_prev_7d",
    "spend_this_month",
    "spend_last_month",
    "cpc_today",
    "cpc_prev_day",
    "cpc_last_7d",
    "cpc_prev_7d",
    "cpc_this_month",
    "cpc_last_month",
    "impressions",
    "clicks",
]
DAILY_PERCENT_COLUMNS: list[str] = ["cvr", "ctr"]
DAILY_MIN_FIELDS = 5

NAVER_COLUMNS: list[str] = [
    "campaign",
    "ad_group",
    "keyword",
    "date",
    "impressions",
    "clicks",
    "avg_cpc",
    "cost",
    "avg_rank",
]
NAVER_NUMERIC_COLUMNS: list[str] = ["impressions", "clicks", "avg_cpc", "cost", "avg_rank"]
NAVER_MIN_FIELDS = 8
NAVER_REPORT_TOKEN = "키워드 보고서"

GOOGLE_COLUMNS: list[str] = [
    "campaign",
    "ad_group",
    "search_keyword",
    "date",
    "currency",
    "max_cpc",
    "impressions",
    "clicks",
    "cost",
    "avg_cpc",
]
GOOGLE_NUMERIC_COLUMNS: list[str] = ["max_cpc", "impressions", "clicks", "cost", "avg_cpc"]
GOOGLE_MIN_FIELDS = 10
GOOGLE_MIN_LINES = 3
GOOGLE_HEADER_SCAN_LINES = 5

HEADER_TOKENS: tuple[str, ...] = ("캠페인", "campaign")
SUMMARY_TOKENS: tuple[str, ...] = ("합계", "total")
MANUAL_WEEK_FIELDS = 9

_LEADING_INT = re.compile(r"^[+-]?\d+")


def parse_number(value: Any) -> float:
    """Parse a pasted numeric cell; ``-``, blanks and garbage become 0."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value or "").replace(",", "").strip()
        if text in ("", "-"):
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    return number if math.isfinite(number) else 0.0


def parse_percent(value: Any) -> float:
    """``"1.23%"`` -> ``1.23``."""
    if isinstance(value, str):
        value = value.replace("%", "")
    return parse_number(value)


def parse_count(value: Any) -> int:
    """Leading non-negative integer of a hand-typed field, else 0."""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, (int, float)):
        return max(int(value), 0) if math.isfinite(value) else 0
    match = _LEADING_INT.match(str(value).replace(",", "").strip())
    if match is None:
        return 0
    return max(int(match.group(0)), 0)


def _cell_text_expr(column_name: str) -> pl.Expr:
    return pl.col(column_name).cast(pl.Utf8, strict=False).str.strip_chars()


def _number_parsed_expr(column_name: str, strip: str = ",") -> pl.Expr:
    text = _cell_text_expr(column_name)
    for char in strip:
        text = text.str.replace_all(char, "", literal=True)
    return text.str.strip_chars().cast(pl.Float64, strict=False)


def _finite_or_zero(parsed: pl.Expr) -> pl.Expr:
    return pl.when(parsed.is_finite()).then(parsed).otherwise(0.0)


def _number_expr(column_name: str) -> pl.Expr:
    return _finite_or_zero(_number_parsed_expr(column_name)).alias(column_name)


def _percent_expr(column_name: str) -> pl.Expr:
    return _finite_or_zero(_number_parsed_expr(column_name, strip=",%")).alias(column_name)


def _parse_error_expr(column_name: str) -> pl.Expr:
    text_expr = _cell_text_expr(column_name)
    parsed_expr = _number_parsed_expr(column_name, strip=",%")
    return (
        (text_expr.is_not_null() & (text_expr != "") & (text_expr != "-") & parsed_expr.is_null())
        .cast(pl.UInt32)
        .sum()
        .alias(column_name)
    )


def _log_parse_errors(raw: pl.DataFrame, metric_columns: Sequence[str], context: str) -> None:
    if raw.is_empty():
        return
    counts = raw.select([_parse_error_expr(column) for column in metric_columns]).row(0, named=True)
    failures = {column: int(count or 0) for column, count in counts.items() if count}
    if failures:
        joined = ", ".join(f"{column}={count}" for column, count in failures.items())
        logger.warning(f"[ingestion] {context}: unparseable numeric cells treated as 0 ({joined})")


def _is_summary_row(first_field: str) -> bool:
    if first_field == "-":
        return True
    lowered = first_field.lower()
    return any(token in lowered for token in SUMMARY_TOKENS)


def _split_rows(
    lines: Sequence[str],
    start: int,
    delimiter: str,
    columns: Sequence[str],
    min_fields: int,
    context: str,
) -> list[tuple[int, list[str]]]:
    rows: list[tuple[int, list[str]]] = []
    width = len(columns)
    for idx in range(start, len(lines)):
        line = lines[idx].strip()
        if not line:
            continue
        values = [value.strip() for value in line.split(delimiter)]
        if values[0] and _is_summary_row(values[0]):
            logger.debug(f"[ingestion] {context}: line {idx + 1} skipped (summary row)")
            continue
        if len(values) < min_fields:
            logger.debug(f"[ingestion] {context}: line {idx + 1} skipped ({len(values)} < {min_fields} fields)")
            continue
        padded = (values + [""] * width)[:width]
        rows.append((idx + 1, padded))
    return rows


def _clean_frame(
    rows: Sequence[tuple[int, list[str]]],
    columns: Sequence[str],
    numeric_columns: Sequence[str],
    percent_columns: Sequence[str],
    context: str,
) -> pl.DataFrame:
    raw = pl.DataFrame(
        {column: [values[pos] for _, values in rows] for pos, column in enumerate(columns)},
        schema={column: pl.Utf8 for column in columns},
    )
    _log_parse_errors(raw, [*numeric_columns, *percent_columns], context)
    return raw.with_columns(
        [_number_expr(column) for column in numeric_columns]
        + [_percent_expr(column) for column in percent_columns]
    )


def _to_records(
    frame: pl.DataFrame,
    line_numbers: Sequence[int],
    factory: Callable[[dict[str, Any]], RecordT],
    context: str,
) -> list[RecordT]:
    records: list[RecordT] = []
    for line_number, row in zip(line_numbers, frame.iter_rows(named=True)):
        try:
            records.append(factory(row))
        except (TypeError, ValueError) as exc:
            logger.warning(f"[ingestion] {context}: line {line_number} parse failed - {exc}")
    return records


def _parse_rows(
    lines: Sequence[str],
    start: int,
    delimiter: str,
    columns: Sequence[str],
    numeric_columns: Sequence[str],
    percent_columns: Sequence[str],
    min_fields: int,
    factory: Callable[[dict[str, Any]], RecordT],
    context: str,
) -> list[RecordT]:
    rows = _split_rows(lines, start, delimiter, columns, min_fields, context)
    if not rows:
        return []
    frame = _clean_frame(rows, columns, numeric_columns, percent_columns, context)
    records = _to_records(frame, [line_number for line_number, _ in rows], factory, context)
    logger.debug(f"[ingestion] {context}: {len(records)} records from {len(lines) - start} data lines")
    return records


def _has_header_token(line: str) -> bool:
    lowered = line.lower()
    return any(token in lowered for token in HEADER_TOKENS)


def parse_data_text(text: str) -> list[AdRecord]:
    """Parse the daily report (tab- or comma-delimited, one header line)."""
    if not text or not text.strip():
        raise InputValidationError("데이터가 비어있습니다.")

    lines = text.strip().split("\n")
    if len(lines) < 2:
        raise InputValidationError("최소 2줄(헤더 + 데이터)이 필요합니다.", details={"lines": len(lines)})

    delimiter = "\t" if "\t" in lines[0] else ","
    records = _parse_rows(
        lines,
        start=1,
        delimiter=delimiter,
        columns=DAILY_COLUMNS,
        numeric_columns=DAILY_NUMERIC_COLUMNS,
        percent_columns=DAILY_PERCENT_COLUMNS,
        min_fields=DAILY_MIN_FIELDS,
        factory=AdRecord.from_row,
        context="daily",
    )
    if not records:
        raise InputValidationError("파싱된 데이터가 없습니다. 데이터 형식을 확인해주세요.")
    return records


def parse_naver_weekly_data(text: str) -> list[NaverWeeklyRecord]:
    """Parse a Naver keyword report; an optional report-title line precedes the header."""
    if not text or not text.strip():
        raise InputValidationError("네이버 데이터가 비어있습니다.")

    lines = text.strip().split("\n")
    if len(lines) < 2:
        raise InputValidationError("최소 2줄(헤더 + 데이터)이 필요합니다.", details={"lines": len(lines)})

    start = 2 if NAVER_REPORT_TOKEN in lines[0] else 1
    records = _parse_rows(
        lines,
        start=start,
        delimiter="\t",
        columns=NAVER_COLUMNS,
        numeric_columns=NAVER_NUMERIC_COLUMNS,
        percent_columns=[],
        min_fields=NAVER_MIN_FIELDS,
        factory=NaverWeeklyRecord.from_row,
        context="naver_weekly",
    )
    if not records:
        raise InputValidationError("파싱된 네이버 데이터가 없습니다.")
    return records


def parse_google_weekly_data(text: str) -> list[GoogleWeeklyRecord]:
    """Parse a Google Ads keyword export; the header is searched in the first five lines."""
    if not text or not text.strip():
        raise InputValidationError("구글 데이터가 비어있습니다.")

    lines = text.strip().split("\n")
    if len(lines) < GOOGLE_MIN_LINES:
        raise InputValidationError("최소 3줄(제목 + 날짜 + 헤더 + 데이터)이 필요합니다.", details={"lines": len(lines)})

    start = 0
    for idx in range(min(GOOGLE_HEADER_SCAN_LINES, len(lines))):
        if _has_header_token(lines[idx]):
            start = idx + 1
            break

    records = _parse_rows(
        lines,
        start=start,
        delimiter="\t",
        columns=GOOGLE_COLUMNS,
        numeric_columns=GOOGLE_NUMERIC_COLUMNS,
        percent_columns=[],
        min_fields=GOOGLE_MIN_FIELDS,
        factory=GoogleWeeklyRecord.from_row,
        context="google_weekly",
    )
    if not records:
        raise InputValidationError("파싱된 구글 데이터가 없습니다.")
    return records


def parse_additional_metrics(ga_conversions: Any, real_inquiries: Any, pmax_spend: Any) -> AdditionalMetrics:
    return AdditionalMetrics(
        ga_conversions=parse_count(ga_conversions),
        real_inquiries=parse_count(real_inquiries),
        pmax_spend=parse_count(pmax_spend),
    )


def parse_manual_week_row(text: str | None) -> ManualWeekRow | None:
    """Parse the optional tab-separated totals row of the week before the reported one."""
    if not text or not text.strip():
        return None

    line = next(line for line in text.strip().split("\n") if line.strip())
    values = [value.strip() for value in line.strip().split("\t")]
    values = (values + [""] * MANUAL_WEEK_FIELDS)[:MANUAL_WEEK_FIELDS]
    numbers = [parse_number(value) for value in values[1:MANUAL_WEEK_FIELDS]]
    return ManualWeekRow(
        label=values[0],
        impressions=numbers[0],
        clicks=numbers[1],
        cpc=numbers[2],
        spend=numbers[3],
        ga_conversions=numbers[4],
        inquiries=numbers[5],
        cpa=numbers[6],
        pmax_spend=numbers[7],
    )
