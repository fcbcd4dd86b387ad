"""키워드 성과 점수, 트렌드 분류, 매체 비교 테스트."""

import pytest

from adreport.analyzer import PerformanceEngine, analyze_keyword_performance, compare_platforms
from adreport.domain.models import Trend
from adreport.ingestion import parse_data_text
from conftest import make_record


# ── 트렌드 ──

@pytest.mark.parametrize(
    ("prev", "curr", "expected"),
    [
        (100, 110, Trend.NEW),
        (100, 111, Trend.INCREASE),
        (100, 90, Trend.NEW),
        (100, 89, Trend.DECREASE),
        (0, 50, Trend.NEW),
        (0, 0, Trend.STOPPED),
        (100, 0, Trend.DECREASE),
    ],
)
def test_classify_trend(prev, curr, expected):
    engine = PerformanceEngine()
    record = make_record(spend_prev_7d=prev, spend_last_7d=curr)

    assert engine.classify_trend(record) == expected
    assert analyze_keyword_performance([record])[0].trend == expected


def test_performance_score():
    engine = PerformanceEngine()

    assert engine.performance_score(make_record(cpc_today=500, ctr=1.5)) == pytest.approx(2 + 15)
    assert engine.performance_score(make_record(cpc_today=0, ctr=0.3)) == pytest.approx(3)


def test_per_record_methods_match_ranking_with_custom_weights():
    engine = PerformanceEngine(cpc_score_numerator=500.0, ctr_score_weight=2.0, trend_threshold_pct=50.0)
    record = make_record(cpc_today=250, ctr=1.0, spend_prev_7d=100, spend_last_7d=140)

    ranked = engine.analyze_keyword_performance([record])[0]

    assert engine.performance_score(record) == pytest.approx(4.0) == ranked.score
    assert engine.classify_trend(record) == Trend.NEW == ranked.trend


# ── 키워드 순위 ──

def test_sample_keyword_order(daily_text):
    keywords = analyze_keyword_performance(parse_data_text(daily_text))

    assert [kw.keyword for kw in keywords] == ["챗GPT교육", "CHATGPT강의", "챗GPT강의"]
    assert keywords[0].score == pytest.approx(1000 / 1246 + 100)
    assert [kw.trend for kw in keywords] == [Trend.DECREASE, Trend.DECREASE, Trend.INCREASE]


def test_keyword_ties_keep_input_order():
    records = [make_record(keyword=name, cpc_today=1000, ctr=0.5) for name in ("a", "b", "c")]

    keywords = analyze_keyword_performance(records)

    assert [kw.keyword for kw in keywords] == ["a", "b", "c"]


def test_keyword_performance_keeps_record_fields():
    record = make_record(keyword="k", campaign="Performance Max", clicks=7, impressions=700)

    keyword = analyze_keyword_performance([record])[0]

    assert keyword.campaign == "Performance Max"
    assert keyword.clicks == 7
    assert keyword.impressions == 700


def test_analyze_empty():
    assert analyze_keyword_performance([]) == []
    assert compare_platforms([]) == []


# ── 매체 비교 ──

def test_sample_platform_comparison(daily_text):
    platforms = compare_platforms(parse_data_text(daily_text))

    assert [p.platform for p in platforms] == ["Google", "Naver"]
    google, naver = platforms
    assert google.ad_spend == 92289
    assert google.clicks == 17
    assert google.impressions == 1590
    assert google.avg_cpc == pytest.approx(1104)
    assert google.ctr == pytest.approx(17 / 1590 * 100)
    assert google.share == pytest.approx(92289 / 118887 * 100)
    assert naver.ad_spend == 26598
    assert naver.avg_cpc == pytest.approx(1108)


def test_platform_shares_sum_to_100():
    records = [
        make_record(platform="Google", spend_last_7d=333),
        make_record(platform="Naver", spend_last_7d=333),
        make_record(platform="Kakao", spend_last_7d=334),
        make_record(platform="Naver", spend_last_7d=0),
    ]

    platforms = compare_platforms(records)

    assert sum(p.share for p in platforms) == pytest.approx(100)


def test_platform_zero_total_spend_has_zero_share():
    platforms = compare_platforms([make_record(platform="Google"), make_record(platform="Naver")])

    assert [p.share for p in platforms] == [0, 0]
    assert [p.platform for p in platforms] == ["Google", "Naver"]


def test_platform_blank_name_is_unknown():
    platforms = compare_platforms([make_record(platform="", spend_last_7d=10)])

    assert platforms[0].platform == PerformanceEngine.UNKNOWN_PLATFORM


def test_platform_cpc_average_ignores_zero_and_ctr_without_impressions():
    records = [
        make_record(platform="Naver", cpc_last_7d=800),
        make_record(platform="Naver", cpc_last_7d=0),
    ]

    naver = compare_platforms(records)[0]

    assert naver.avg_cpc == pytest.approx(800)
    assert naver.ctr == 0
