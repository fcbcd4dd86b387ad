"""Domain policies turning aggregated ad metrics into prioritized insights."""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from adreport.domain.models import (
    Insight,
    InsightLevel,
    KeywordPerformance,
    PlatformComparison,
    Priority,
    SummaryMetrics,
    Trend,
)
from adreport.metrics import fmt_pct, fmt_won

CPC_SPIKE_PCT = 50.0
LOW_AVG_CTR_PCT = 0.2
LOW_KEYWORD_CTR_PCT = 0.15
LOW_KEYWORD_MIN_CLICKS = 5
PLATFORM_CONCENTRATION_PCT = 75.0
PMAX_CAMPAIGN_TOKENS: tuple[str, ...] = ("performance max", "pmax")
SPEND_DROP_PCT = -20.0
COMPETITIVE_CPC = 1000.0
TOP_KEYWORD_COUNT = 3
TOP_KEYWORD_CTR_PCT = 1.0
TOP_KEYWORD_MIN_CLICKS = 10
GOOGLE_SHARE_PCT = 60.0

Keywords = Sequence[KeywordPerformance]
Platforms = Sequence[PlatformComparison]
Rule = Callable[[SummaryMetrics, Keywords, Platforms], Optional[Insight]]


def _urgent(reason: str, action: str, period: str) -> Insight:
    return Insight(level=InsightLevel.URGENT, reason=reason, action=action, period=period, priority=Priority.HIGH)


def _opportunity(reason: str, action: str, period: str) -> Insight:
    return Insight(
        level=InsightLevel.OPPORTUNITY, reason=reason, action=action, period=period, priority=Priority.MEDIUM
    )


def _positive(reason: str, action: str) -> Insight:
    return Insight(level=InsightLevel.POSITIVE, reason=reason, action=action, period="-", priority=Priority.LOW)


def cpc_spike(metrics: SummaryMetrics, keywords: Keywords, platforms: Platforms) -> Optional[Insight]:
    if metrics.cpc_change <= CPC_SPIKE_PCT:
        return None
    return _urgent(
        f"당일 CPC {fmt_won(metrics.avg_cpc)}로 전일 대비 {metrics.cpc_change:.1f}% 급등",
        "입찰가 조정 또는 품질평가수 확인",
        "즉시",
    )


def low_average_ctr(metrics: SummaryMetrics, keywords: Keywords, platforms: Platforms) -> Optional[Insight]:
    if metrics.total_impressions <= 0 or metrics.avg_ctr >= LOW_AVG_CTR_PCT:
        return None
    return _urgent(
        f"전반적 CTR {fmt_pct(metrics.avg_ctr)} 저조",
        "광고 문구 및 타겟 전략 재검토",
        "1주일 이내",
    )


def low_ctr_keyword(metrics: SummaryMetrics, keywords: Keywords, platforms: Platforms) -> Optional[Insight]:
    match = next(
        (kw for kw in keywords if kw.ctr < LOW_KEYWORD_CTR_PCT and kw.clicks > LOW_KEYWORD_MIN_CLICKS),
        None,
    )
    if match is None:
        return None
    return _urgent(f"{match.keyword} CTR {fmt_pct(match.ctr)} 저조", "광고 문구 및 랜딩 재검토", "즉시")


def new_keywords(metrics: SummaryMetrics, keywords: Keywords, platforms: Platforms) -> Optional[Insight]:
    fresh = [kw for kw in keywords if kw.trend == Trend.NEW and kw.clicks > 0]
    if not fresh:
        return None
    return _opportunity(
        f"신규 키워드 성과 모니터링 ({len(fresh)}개)",
        f"'{fresh[0].keyword}' 등 신규 키워드 추적",
        "2주",
    )


def platform_concentration(metrics: SummaryMetrics, keywords: Keywords, platforms: Platforms) -> Optional[Insight]:
    if len(platforms) < 2:
        return None
    top = platforms[0]
    if top.share <= PLATFORM_CONCENTRATION_PCT:
        return None
    return _opportunity(
        f"{top.platform} 매체 집중도 {top.share:.0f}%",
        f"{platforms[1].platform or '다른 매체'} 확장 기회 탐색",
        "1개월",
    )


def performance_max_campaign(metrics: SummaryMetrics, keywords: Keywords, platforms: Platforms) -> Optional[Insight]:
    has_pmax = any(any(token in kw.campaign.lower() for token in PMAX_CAMPAIGN_TOKENS) for kw in keywords)
    if not has_pmax:
        return None
    return _opportunity("Performance Max 캠페인 데이터 분석", "전환 추적 설정 및 성과 분석 재구축", "2주")


def weekly_spend_drop(metrics: SummaryMetrics, keywords: Keywords, platforms: Platforms) -> Optional[Insight]:
    if metrics.ad_spend_7d_change >= SPEND_DROP_PCT:
        return None
    return _positive(
        f"주간 광고비 {abs(metrics.ad_spend_7d_change):.1f}% 감소 - 효율성 개선 중",
        "현재 전략 유지",
    )


def competitive_cpc(metrics: SummaryMetrics, keywords: Keywords, platforms: Platforms) -> Optional[Insight]:
    if not 0 < metrics.avg_cpc < COMPETITIVE_CPC:
        return None
    return _positive(f"평균 CPC {fmt_won(metrics.avg_cpc)} - 경쟁적 수준 유지", "CPC 수준 유지")


def top_keyword(metrics: SummaryMetrics, keywords: Keywords, platforms: Platforms) -> Optional[Insight]:
    match = next(
        (
            kw
            for kw in keywords[:TOP_KEYWORD_COUNT]
            if kw.ctr > TOP_KEYWORD_CTR_PCT or kw.clicks > TOP_KEYWORD_MIN_CLICKS
        ),
        None,
    )
    if match is None:
        return None
    return _positive(f"'{match.keyword}' 키워드 - {match.platform}에서 가장 높은 성과", "예산 배분 최적화")


def google_share(metrics: SummaryMetrics, keywords: Keywords, platforms: Platforms) -> Optional[Insight]:
    google = next((p for p in platforms if "google" in p.platform.lower()), None)
    if google is None or google.share <= GOOGLE_SHARE_PCT:
        return None
    return _positive(f"Google 평균 CPC {fmt_won(google.avg_cpc)} - 경쟁적 있는 CPC 수준 유지", "현재 수준 유지")


RULES: tuple[Rule, ...] = (
    cpc_spike,
    low_average_ctr,
    low_ctr_keyword,
    new_keywords,
    platform_concentration,
    performance_max_campaign,
    weekly_spend_drop,
    competitive_cpc,
    top_keyword,
    google_share,
)


def generate_insights(
    metrics: SummaryMetrics,
    keywords: Sequence[KeywordPerformance],
    platforms: Sequence[PlatformComparison],
) -> list[Insight]:
    """Evaluate every rule in order; each contributes at most one insight.

    ``keywords`` must be sorted by score and ``platforms`` by 7-day spend, both
    descending, as produced by ``PerformanceEngine``.
    """
    insights: list[Insight] = []
    for rule in RULES:
        insight = rule(metrics, keywords, platforms)
        if insight is not None:
            insights.append(insight)
    return insights
