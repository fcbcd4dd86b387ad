"""Row builders for the report workbooks (plain values, no spreadsheet objects)."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, List, Sequence

from adreport.domain.models import (
    AdRecord,
    Insight,
    InsightLevel,
    KeywordPerformance,
    ManualWeekRow,
    PlatformComparison,
    SummaryMetrics,
    WeeklySummary,
)
from adreport.metrics import fmt_pct, fmt_rate, round_half_up

KEYWORD_RANKING_LIMIT = 12
SUMMARY_INSIGHT_LIMIT = 5

SUMMARY_HEADERS_TAIL: List[str] = ["증감", "최근 7일", "이전 7일", "증감율", "당월"]
DAILY_DETAIL_HEADERS: List[str] = ["매체", "키워드", "당일 광고비", "당일 CPC", "노출수", "클릭수"]
KEYWORD_HEADERS: List[str] = ["순위", "매체", "키워드", "최근7일 광고비", "이전7일 광고비", "증감", "최근7일 CPC", "CTR", "성과"]
PLATFORM_HEADERS: List[str] = ["매체", "최근7일 광고비", "점유율", "평균 CPC", "CTR", "클릭수", "평가"]
ACTION_HEADERS: List[str] = ["No", "이유", "제안 액션", "기간", "우선순위"]
WEEKLY_HEADERS: List[str] = ["주", "노출", "클릭", "CPC", "광고비", "GA전환수", "실문의건수", "CPA"]
WEEKLY_PMAX_HEADER = "퍼맥스광고비"
WEEKLY_COMPARISON_LABEL = "전주 비교"

TREND_CRITERIA: List[tuple[str, str]] = [
    ("🆕 신규:", "조건 1: 이전 7일 광고비가 0원이고, 최근 7일 광고비가 0원 초과"),
    ("", "조건 2: 이전 7일 광고비가 있지만 증감률이 -10% ~ +10% 사이 (유지)"),
    ("📈 증가:", "이전 7일 광고비 대비 +10% 초과 증가"),
    ("📉 감소:", "이전 7일 광고비 대비 -10% 미만 감소"),
    ("⏸️ 중단:", "최근 7일 광고비가 0원"),
]
ACTION_SECTIONS: List[tuple[InsightLevel, str]] = [
    (InsightLevel.URGENT, "🔴 즉시 조치 필요"),
    (InsightLevel.OPPORTUNITY, "🟡 적극적 기회"),
    (InsightLevel.POSITIVE, "🟢 긍정적 지표 (유지 전략)"),
]


def _fmt_korean_day(value: date) -> str:
    return f"{value.month:02d}월 {value.day:02d}일"


def summary_headers(report_date: date) -> List[str]:
    # "today" in the pasted report is the day before the report date
    yesterday = report_date - timedelta(days=1)
    day_before = report_date - timedelta(days=2)
    return ["구분", _fmt_korean_day(yesterday), _fmt_korean_day(day_before), *SUMMARY_HEADERS_TAIL]


def summary_metric_rows(metrics: SummaryMetrics) -> List[List[Any]]:
    return [
        [
            "광고비",
            metrics.total_ad_spend,
            metrics.prev_day_ad_spend,
            fmt_rate(metrics.ad_spend_change),
            metrics.last_7d_ad_spend,
            metrics.prev_7d_ad_spend,
            fmt_rate(metrics.ad_spend_7d_change),
            metrics.current_month_ad_spend,
        ],
        [
            "CPC",
            round_half_up(metrics.avg_cpc),
            round_half_up(metrics.prev_day_avg_cpc),
            fmt_rate(metrics.cpc_change),
            round_half_up(metrics.last_7d_avg_cpc),
            round_half_up(metrics.prev_7d_avg_cpc),
            fmt_rate(metrics.cpc_7d_change),
            round_half_up(metrics.current_month_avg_cpc),
        ],
        [
            "클릭수",
            metrics.total_clicks,
            metrics.prev_day_clicks,
            "",
            metrics.last_7d_clicks,
            metrics.prev_7d_clicks,
            "",
            metrics.current_month_clicks,
        ],
        ["CTR", fmt_pct(metrics.avg_ctr), "", "", "", "", "", ""],
        ["노출수", metrics.total_impressions, "", "", "", "", "", ""],
    ]


def daily_detail_rows(records: Sequence[AdRecord]) -> List[List[Any]]:
    return [
        [row.platform, row.keyword, row.spend_today, row.cpc_today, row.impressions, row.clicks]
        for row in records
    ]


def keyword_ranking_rows(keywords: Sequence[KeywordPerformance], limit: int = KEYWORD_RANKING_LIMIT) -> List[List[Any]]:
    rows: List[List[Any]] = []
    for rank, kw in enumerate(keywords[:limit], start=1):
        rows.append(
            [
                rank,
                kw.platform,
                kw.keyword,
                kw.spend_last_7d,
                kw.spend_prev_7d,
                kw.spend_last_7d - kw.spend_prev_7d,
                kw.cpc_last_7d,
                fmt_pct(kw.ctr),
                kw.trend.value,
            ]
        )
    return rows


def platform_evaluation(platform: PlatformComparison) -> str:
    if platform.avg_cpc > 1000:
        return "CPC 효율성, CTR 높음"
    if platform.ctr < 0.1:
        return "CPC 우수, CTR 개선 필요"
    return "안정적"


def platform_rows(platforms: Sequence[PlatformComparison]) -> List[List[Any]]:
    return [
        [
            item.platform,
            item.ad_spend,
            fmt_rate(item.share),
            round_half_up(item.avg_cpc),
            fmt_pct(item.ctr),
            item.clicks,
            platform_evaluation(item),
        ]
        for item in platforms
    ]


def insights_by_level(insights: Sequence[Insight]) -> Dict[InsightLevel, List[Insight]]:
    grouped: Dict[InsightLevel, List[Insight]] = {level: [] for level, _ in ACTION_SECTIONS}
    for insight in insights:
        grouped[insight.level].append(insight)
    return grouped


def action_rows(insights: Sequence[Insight]) -> List[List[Any]]:
    return [
        [idx, insight.reason, insight.action, insight.period, insight.priority.value]
        for idx, insight in enumerate(insights, start=1)
    ]


def weekly_headers(show_pmax: bool) -> List[str]:
    return [*WEEKLY_HEADERS, WEEKLY_PMAX_HEADER] if show_pmax else list(WEEKLY_HEADERS)


def weekly_current_row(label: str, summary: WeeklySummary, show_all: bool) -> List[Any]:
    """Per-platform scopes leave the account-level columns blank."""
    row: List[Any] = [label, summary.impressions, summary.clicks, summary.cpc, summary.spend]
    if show_all:
        row.extend([summary.ga_conversions, summary.inquiries, summary.cpa, summary.pmax_spend])
    else:
        row.extend(["", "", ""])
    return row


def weekly_prior_row(label: str, manual: ManualWeekRow | None, show_all: bool) -> List[Any]:
    width = len(weekly_headers(show_all))
    if manual is None:
        return [label] + [""] * (width - 1)
    row: List[Any] = [
        manual.label or label,
        manual.impressions,
        manual.clicks,
        manual.cpc,
        manual.spend,
        manual.ga_conversions,
        manual.inquiries,
        manual.cpa,
    ]
    if show_all:
        row.append(manual.pmax_spend)
    return row


def weekly_comparison_row(show_all: bool) -> List[Any]:
    width = len(weekly_headers(show_all))
    return [WEEKLY_COMPARISON_LABEL] + [""] * (width - 1)
