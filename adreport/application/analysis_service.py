"""Application service for the daily insight and weekly summary use cases."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from time import perf_counter
from typing import Optional

from loguru import logger

from adreport.aggregation import calculate_summary_metrics, generate_weekly_summary
from adreport.analyzer import PerformanceEngine
from adreport.application.reporting.periods import calculate_previous_week_range, calculate_week_range, week_label
from adreport.domain.models import (
    AdditionalMetrics,
    AdRecord,
    Insight,
    KeywordPerformance,
    ManualWeekRow,
    PlatformComparison,
    SummaryMetrics,
    WeeklyReportSummary,
)
from adreport.domain.recommendation import generate_insights
from adreport.ingestion import parse_data_text, parse_google_weekly_data, parse_naver_weekly_data


@dataclass(frozen=True)
class DailyAnalysisResult:
    records: list[AdRecord]
    metrics: SummaryMetrics
    keywords: list[KeywordPerformance]
    platforms: list[PlatformComparison]
    insights: list[Insight]


@dataclass(frozen=True)
class WeeklyAnalysisResult:
    summary: WeeklyReportSummary
    current_week: str
    prior_week: str
    manual_row: Optional[ManualWeekRow] = None


def run_daily_analysis(text: str) -> DailyAnalysisResult:
    """Parse -> aggregate -> analyze -> insights. Parser errors propagate unchanged."""
    started = perf_counter()
    records = parse_data_text(text)

    engine = PerformanceEngine()
    metrics = calculate_summary_metrics(records)
    keywords = engine.analyze_keyword_performance(records)
    platforms = engine.compare_platforms(records)
    insights = generate_insights(metrics, keywords, platforms)

    logger.info(
        f"[analysis] daily: {len(records)} records, {len(platforms)} platforms, "
        f"{len(insights)} insights ({perf_counter() - started:.3f}s)"
    )
    return DailyAnalysisResult(
        records=records,
        metrics=metrics,
        keywords=keywords,
        platforms=platforms,
        insights=insights,
    )


def run_weekly_analysis(
    naver_text: str,
    google_text: str,
    metrics: AdditionalMetrics,
    manual_row: Optional[ManualWeekRow] = None,
    reference_date: Optional[date] = None,
) -> WeeklyAnalysisResult:
    started = perf_counter()
    naver_records = parse_naver_weekly_data(naver_text)
    google_records = parse_google_weekly_data(google_text)
    summary = generate_weekly_summary(naver_records, google_records, metrics)

    reference = reference_date or date.today()
    current_week = week_label(calculate_week_range(reference))
    prior_week = week_label(calculate_previous_week_range(reference))

    logger.info(
        f"[analysis] weekly {current_week}: naver={len(naver_records)} rows, google={len(google_records)} rows "
        f"({perf_counter() - started:.3f}s)"
    )
    return WeeklyAnalysisResult(
        summary=summary,
        current_week=current_week,
        prior_week=prior_week,
        manual_row=manual_row,
    )
