"""Metric aggregation over daily ad records and weekly platform records."""

from __future__ import annotations

from typing import Sequence

import polars as pl

from adreport.domain.models import (
    AdditionalMetrics,
    AdRecord,
    GoogleWeeklyRecord,
    NaverWeeklyRecord,
    SummaryMetrics,
    WeeklyReportSummary,
    WeeklyScope,
    WeeklySummary,
)
from adreport.ingestion import DAILY_COLUMNS, DAILY_NUMERIC_COLUMNS, DAILY_PERCENT_COLUMNS
from adreport.metrics import positive_mean_expr, round_half_up

COUNT_COLUMNS: list[str] = ["impressions", "clicks"]
AD_RECORD_SCHEMA: dict[str, pl.DataType] = {
    **{column: pl.Utf8() for column in DAILY_COLUMNS},
    **{column: pl.Float64() for column in [*DAILY_NUMERIC_COLUMNS, *DAILY_PERCENT_COLUMNS]},
    **{column: pl.Int64() for column in COUNT_COLUMNS},
}
# (spend column, cpc column) per reporting window, current first
WINDOWS: dict[str, tuple[str, str]] = {
    "today": ("spend_today", "cpc_today"),
    "prev_day": ("spend_prev_day", "cpc_prev_day"),
    "last_7d": ("spend_last_7d", "cpc_last_7d"),
    "prev_7d": ("spend_prev_7d", "cpc_prev_7d"),
    "this_month": ("spend_this_month", "cpc_this_month"),
    "last_month": ("spend_last_month", "cpc_last_month"),
}
WEEKLY_SCHEMA: dict[str, pl.DataType] = {
    "impressions": pl.Int64(),
    "clicks": pl.Int64(),
    "cost": pl.Float64(),
}


def calculate_change_rate(current: float, previous: float) -> float:
    """Percent change; growth from zero counts as +100."""
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / previous * 100


def ad_records_frame(records: Sequence[AdRecord]) -> pl.DataFrame:
    rows = [{column: getattr(record, column) for column in DAILY_COLUMNS} for record in records]
    return pl.DataFrame(rows, schema=AD_RECORD_SCHEMA)


def calculate_summary_metrics(records: Sequence[AdRecord]) -> SummaryMetrics:
    if not records:
        return SummaryMetrics()

    frame = ad_records_frame(records)
    spend_columns = [spend for spend, _ in WINDOWS.values()]
    cpc_columns = [cpc for _, cpc in WINDOWS.values()]
    totals = frame.select(
        [pl.col(column).sum() for column in spend_columns]
        + [pl.col(column).sum() for column in COUNT_COLUMNS]
        + [positive_mean_expr(column) for column in cpc_columns]
    ).row(0, named=True)

    total_clicks = int(totals["clicks"] or 0)
    total_impressions = int(totals["impressions"] or 0)
    avg_ctr = total_clicks / total_impressions * 100 if total_impressions > 0 else 0.0

    spend = {window: float(totals[column] or 0.0) for window, (column, _) in WINDOWS.items()}
    cpc = {window: float(totals[column] or 0.0) for window, (_, column) in WINDOWS.items()}

    # the pasted report has no per-window click counts, so those stay 0
    return SummaryMetrics(
        total_ad_spend=spend["today"],
        avg_cpc=cpc["today"],
        total_clicks=total_clicks,
        avg_ctr=avg_ctr,
        total_impressions=total_impressions,
        prev_day_ad_spend=spend["prev_day"],
        prev_day_avg_cpc=cpc["prev_day"],
        prev_day_clicks=0,
        last_7d_ad_spend=spend["last_7d"],
        last_7d_avg_cpc=cpc["last_7d"],
        last_7d_clicks=0,
        prev_7d_ad_spend=spend["prev_7d"],
        prev_7d_avg_cpc=cpc["prev_7d"],
        prev_7d_clicks=0,
        current_month_ad_spend=spend["this_month"],
        current_month_avg_cpc=cpc["this_month"],
        current_month_clicks=0,
        prev_month_ad_spend=spend["last_month"],
        prev_month_avg_cpc=cpc["last_month"],
        prev_month_clicks=0,
        ad_spend_change=calculate_change_rate(spend["today"], spend["prev_day"]),
        cpc_change=calculate_change_rate(cpc["today"], cpc["prev_day"]),
        clicks_change=0.0,
        ad_spend_7d_change=calculate_change_rate(spend["last_7d"], spend["prev_7d"]),
        cpc_7d_change=calculate_change_rate(cpc["last_7d"], cpc["prev_7d"]),
    )


def _weekly_totals(rows: list[dict[str, float]]) -> tuple[int, int, float]:
    totals = (
        pl.DataFrame(rows, schema=WEEKLY_SCHEMA)
        .select([pl.col(column).sum() for column in WEEKLY_SCHEMA])
        .row(0, named=True)
    )
    return int(totals["impressions"] or 0), int(totals["clicks"] or 0), float(totals["cost"] or 0.0)


def _cpc(spend: float, clicks: int) -> int:
    return round_half_up(spend / clicks) if clicks > 0 else 0


def aggregate_naver_weekly(records: Sequence[NaverWeeklyRecord]) -> WeeklySummary:
    impressions, clicks, spend = _weekly_totals(
        [{"impressions": row.impressions, "clicks": row.clicks, "cost": row.cost} for row in records]
    )
    return WeeklySummary(
        scope=WeeklyScope.NAVER,
        impressions=impressions,
        clicks=clicks,
        cpc=_cpc(spend, clicks),
        spend=spend,
    )


def aggregate_google_weekly(records: Sequence[GoogleWeeklyRecord], pmax_spend: int) -> WeeklySummary:
    impressions, clicks, spend = _weekly_totals(
        [{"impressions": row.impressions, "clicks": row.clicks, "cost": row.cost} for row in records]
    )
    return WeeklySummary(
        scope=WeeklyScope.GOOGLE,
        impressions=impressions,
        clicks=clicks,
        cpc=_cpc(spend, clicks),
        spend=spend,
        pmax_spend=pmax_spend,
    )


def calculate_cpa(spend: float, ga_conversions: int, inquiries: int) -> int:
    """Spend per (GA conversion + real inquiry); 0 without any."""
    total = ga_conversions + inquiries
    if total == 0:
        return 0
    return round_half_up(spend / total)


def generate_weekly_summary(
    naver_records: Sequence[NaverWeeklyRecord],
    google_records: Sequence[GoogleWeeklyRecord],
    metrics: AdditionalMetrics,
) -> WeeklyReportSummary:
    """Overall / Naver / Google totals.

    Conversions and inquiries are only known for the account as a whole, so the
    per-platform scopes report them (and CPA) as 0.
    """
    naver = aggregate_naver_weekly(naver_records)
    google = aggregate_google_weekly(google_records, metrics.pmax_spend)

    impressions = naver.impressions + google.impressions
    clicks = naver.clicks + google.clicks
    spend = naver.spend + google.spend
    overall = WeeklySummary(
        scope=WeeklyScope.OVERALL,
        impressions=impressions,
        clicks=clicks,
        cpc=_cpc(spend, clicks),
        spend=spend,
        ga_conversions=metrics.ga_conversions,
        inquiries=metrics.real_inquiries,
        cpa=calculate_cpa(spend, metrics.ga_conversions, metrics.real_inquiries),
        pmax_spend=metrics.pmax_spend,
    )
    return WeeklyReportSummary(overall=overall, naver=naver, google=google)
