"""공통 테스트 픽스처: 붙여넣기 샘플 데이터와 레코드 팩토리."""

from __future__ import annotations

from dataclasses import fields
from typing import Any

import pytest

from adreport.domain.models import AdRecord, KeywordPerformance, PlatformComparison, Trend

DAILY_HEADER = "\t".join(
    [
        "매체",
        "키워드(소재)",
        "당일(광고비)",
        "전일(광고비)",
        "최근7일(광고비)",
        "이전7일(광고비)",
        "당월(광고비)",
        "전월(광고비)",
        "당일(CPC)",
        "전일(CPC)",
        "최근7일(CPC)",
        "이전7일(CPC)",
        "당월(CPC)",
        "전월(CPC)",
        "CVR",
        "캠페인",
        "광고그룹",
        "노출수",
        "클릭수",
        "CTR",
    ]
)

DAILY_ROWS = [
    "Google\tCHATGPT강의\t16,058\t17,335\t73,650\t99,037\t33,393\t582,955\t973\t1,083\t877\t812\t1,077\t700\t0.00%"
    "\tMO_TOP 10_지피티\tTOP10_MO\t1,570\t15\t0.96%",
    "Naver\t챗GPT강의\t10,318\t6,160\t26,598\t23,320\t16,478\t173,437\t1,042\t1,232\t1,108\t686\t1,177\t458\t0.00%"
    "\tMO_TOP10_지피티\tTOP10_MO\t4,825\t9\t0.19%",
    "Google\t챗GPT교육\t2,741\t1,420\t18,639\t27,972\t4,161\t102,227\t1,246\t1,420\t1,331\t1,216\t1,387\t1,175\t0.00%"
    "\tPC_TOP 10_지피티\tTOP10_PC\t20\t2\t10.00%",
]

NAVER_HEADER = "\t".join(
    ["캠페인", "광고그룹", "키워드", "일별", "노출수", "클릭수", "평균클릭비용(VAT포함,원)", "총비용(VAT포함,원)", "평균노출순위"]
)
NAVER_ROWS = [
    "MO_TOP10_지피티\tTOP10_MO\t-\t2025.12.08.\t1097\t3\t704\t2112\t2.9",
    "PC_TOP10_지피티\tTOP10_PC\t챗GPT교육\t2025.12.08.\t503\t2\t1,100\t2,200\t3.1",
]

GOOGLE_HEADER = "\t".join(
    ["캠페인", "광고그룹", "검색 키워드", "일", "통화 코드", "검색 키워드 최대 CPC", "노출수", "클릭수", "비용", "평균 CPC"]
)
GOOGLE_ROWS = [
    "MO_TOP 10_지피티\tTOP10_MO\tAI활용교육\t2026-01-05\tKRW\t10000\t24\t1\t979\t979",
    "PC_TOP 10_지피티\tTOP10_PC\t챗GPT강의\t2026-01-05\tKRW\t10000\t120\t3\t3,300\t1,100",
    "총 합계\t\t\t\t\t\t144\t4\t4279\t1070",
]


@pytest.fixture
def daily_text() -> str:
    return "\n".join([DAILY_HEADER, *DAILY_ROWS])


@pytest.fixture
def naver_text() -> str:
    return "\n".join(["키워드 보고서(2025.12.08.~2025.12.12.)", NAVER_HEADER, *NAVER_ROWS])


@pytest.fixture
def google_text() -> str:
    return "\n".join(["검색 키워드 보고서", "2026년 1월 5일 - 2026년 1월 9일", GOOGLE_HEADER, *GOOGLE_ROWS])


def make_record(**overrides: Any) -> AdRecord:
    values: dict[str, Any] = {item.name: 0.0 for item in fields(AdRecord)}
    values.update(platform="Google", keyword="키워드", campaign="", ad_group="", impressions=0, clicks=0)
    values.update(overrides)
    return AdRecord(**values)


def make_keyword(score: float = 0.0, trend: Trend = Trend.NEW, **overrides: Any) -> KeywordPerformance:
    return KeywordPerformance.from_record(make_record(**overrides), score=score, trend=trend)


def make_platform(platform: str, share: float, avg_cpc: float = 900.0, ctr: float = 0.5) -> PlatformComparison:
    return PlatformComparison(
        platform=platform,
        ad_spend=share * 1000,
        avg_cpc=avg_cpc,
        ctr=ctr,
        clicks=10,
        impressions=2000,
        share=share,
    )
