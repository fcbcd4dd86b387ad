"""Typed records and value objects shared by the parser, aggregator, analyzer and rule engine."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Mapping


def _to_float(value: Any) -> float:
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _to_int(value: Any) -> int:
    return int(_to_float(value))


def _to_text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


class Trend(str, Enum):
    INCREASE = "증가"
    DECREASE = "감소"
    NEW = "신규"
    STOPPED = "중단"


class InsightLevel(str, Enum):
    URGENT = "즉시조치"
    OPPORTUNITY = "적극적기회"
    POSITIVE = "긍정적지표"


class Priority(str, Enum):
    HIGH = "높음"
    MEDIUM = "중간"
    LOW = "낮음"


class WeeklyScope(str, Enum):
    OVERALL = "전체"
    NAVER = "Naver"
    GOOGLE = "Google"


@dataclass(frozen=True)
class AdRecord:
    """One media+keyword row of the daily report.

    ``cvr`` and ``ctr`` hold the percentage as a number (``"1.23%"`` -> ``1.23``).
    """

    platform: str
    keyword: str
    spend_today: float
    spend_prev_day: float
    spend_last_7d: float
    spend_prev_7d: float
    spend_this_month: float
    spend_last_month: float
    cpc_today: float
    cpc_prev_day: float
    cpc_last_7d: float
    cpc_prev_7d: float
    cpc_this_month: float
    cpc_last_month: float
    cvr: float
    campaign: str
    ad_group: str
    impressions: int
    clicks: int
    ctr: float

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "AdRecord":
        return cls(
            platform=_to_text(row.get("platform")),
            keyword=_to_text(row.get("keyword")),
            spend_today=_to_float(row.get("spend_today")),
            spend_prev_day=_to_float(row.get("spend_prev_day")),
            spend_last_7d=_to_float(row.get("spend_last_7d")),
            spend_prev_7d=_to_float(row.get("spend_prev_7d")),
            spend_this_month=_to_float(row.get("spend_this_month")),
            spend_last_month=_to_float(row.get("spend_last_month")),
            cpc_today=_to_float(row.get("cpc_today")),
            cpc_prev_day=_to_float(row.get("cpc_prev_day")),
            cpc_last_7d=_to_float(row.get("cpc_last_7d")),
            cpc_prev_7d=_to_float(row.get("cpc_prev_7d")),
            cpc_this_month=_to_float(row.get("cpc_this_month")),
            cpc_last_month=_to_float(row.get("cpc_last_month")),
            cvr=_to_float(row.get("cvr")),
            campaign=_to_text(row.get("campaign")),
            ad_group=_to_text(row.get("ad_group")),
            impressions=_to_int(row.get("impressions")),
            clicks=_to_int(row.get("clicks")),
            ctr=_to_float(row.get("ctr")),
        )


@dataclass(frozen=True)
class KeywordPerformance(AdRecord):
    score: float
    trend: Trend

    @classmethod
    def from_record(cls, record: AdRecord, score: float, trend: Trend) -> "KeywordPerformance":
        values = {item.name: getattr(record, item.name) for item in fields(AdRecord)}
        return cls(**values, score=score, trend=trend)


@dataclass(frozen=True)
class NaverWeeklyRecord:
    campaign: str
    ad_group: str
    keyword: str
    date: str
    impressions: int
    clicks: int
    avg_cpc: float
    cost: float
    avg_rank: float

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "NaverWeeklyRecord":
        return cls(
            campaign=_to_text(row.get("campaign")),
            ad_group=_to_text(row.get("ad_group")),
            keyword=_to_text(row.get("keyword"), default="-"),
            date=_to_text(row.get("date")),
            impressions=_to_int(row.get("impressions")),
            clicks=_to_int(row.get("clicks")),
            avg_cpc=_to_float(row.get("avg_cpc")),
            cost=_to_float(row.get("cost")),
            avg_rank=_to_float(row.get("avg_rank")),
        )


@dataclass(frozen=True)
class GoogleWeeklyRecord:
    campaign: str
    ad_group: str
    search_keyword: str
    date: str
    currency: str
    max_cpc: float
    impressions: int
    clicks: int
    cost: float
    avg_cpc: float

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "GoogleWeeklyRecord":
        return cls(
            campaign=_to_text(row.get("campaign")),
            ad_group=_to_text(row.get("ad_group")),
            search_keyword=_to_text(row.get("search_keyword")),
            date=_to_text(row.get("date")),
            currency=_to_text(row.get("currency"), default="KRW"),
            max_cpc=_to_float(row.get("max_cpc")),
            impressions=_to_int(row.get("impressions")),
            clicks=_to_int(row.get("clicks")),
            cost=_to_float(row.get("cost")),
            avg_cpc=_to_float(row.get("avg_cpc")),
        )


@dataclass(frozen=True)
class SummaryMetrics:
    # today
    total_ad_spend: float = 0.0
    avg_cpc: float = 0.0
    total_clicks: int = 0
    avg_ctr: float = 0.0
    total_impressions: int = 0
    # previous day
    prev_day_ad_spend: float = 0.0
    prev_day_avg_cpc: float = 0.0
    prev_day_clicks: int = 0
    # last 7 days
    last_7d_ad_spend: float = 0.0
    last_7d_avg_cpc: float = 0.0
    last_7d_clicks: int = 0
    # previous 7 days
    prev_7d_ad_spend: float = 0.0
    prev_7d_avg_cpc: float = 0.0
    prev_7d_clicks: int = 0
    # this month
    current_month_ad_spend: float = 0.0
    current_month_avg_cpc: float = 0.0
    current_month_clicks: int = 0
    # last month
    prev_month_ad_spend: float = 0.0
    prev_month_avg_cpc: float = 0.0
    prev_month_clicks: int = 0
    # change rates (percent)
    ad_spend_change: float = 0.0
    cpc_change: float = 0.0
    clicks_change: float = 0.0
    ad_spend_7d_change: float = 0.0
    cpc_7d_change: float = 0.0


@dataclass(frozen=True)
class PlatformComparison:
    platform: str
    ad_spend: float
    avg_cpc: float
    ctr: float
    clicks: int
    impressions: int
    share: float


@dataclass(frozen=True)
class AdditionalMetrics:
    """Hand-entered figures for the weekly report."""

    ga_conversions: int = 0
    real_inquiries: int = 0
    pmax_spend: int = 0


@dataclass(frozen=True)
class WeeklySummary:
    scope: WeeklyScope
    impressions: int
    clicks: int
    cpc: int
    spend: float
    ga_conversions: int = 0
    inquiries: int = 0
    cpa: int = 0
    pmax_spend: int = 0


@dataclass(frozen=True)
class WeeklyReportSummary:
    overall: WeeklySummary
    naver: WeeklySummary
    google: WeeklySummary

    def scopes(self) -> list[WeeklySummary]:
        return [self.overall, self.naver, self.google]


@dataclass(frozen=True)
class ManualWeekRow:
    """Hand-pasted totals for the week before the reported one."""

    label: str
    impressions: float
    clicks: float
    cpc: float
    spend: float
    ga_conversions: float
    inquiries: float
    cpa: float
    pmax_spend: float


@dataclass(frozen=True)
class Insight:
    level: InsightLevel
    reason: str
    action: str
    period: str
    priority: Priority
