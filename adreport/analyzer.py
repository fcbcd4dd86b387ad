"""Performance Engine: keyword scoring, 7-day trend labels and platform comparison."""

from __future__ import annotations

from typing import List, Sequence

import polars as pl

from adreport.aggregation import ad_records_frame
from adreport.domain.models import AdRecord, KeywordPerformance, PlatformComparison, Trend
from adreport.metrics import positive_mean_expr, safe_ratio_expr


class PerformanceEngine:
    """Per-keyword scoring and per-platform 7-day comparison."""

    UNKNOWN_PLATFORM = "Unknown"
    CPC_SCORE_NUMERATOR = 1000.0
    CTR_SCORE_WEIGHT = 10.0
    TREND_THRESHOLD_PCT = 10.0
    ROW_INDEX = "__row"

    def __init__(
        self,
        cpc_score_numerator: float = CPC_SCORE_NUMERATOR,
        ctr_score_weight: float = CTR_SCORE_WEIGHT,
        trend_threshold_pct: float = TREND_THRESHOLD_PCT,
    ) -> None:
        self.cpc_score_numerator = cpc_score_numerator
        self.ctr_score_weight = ctr_score_weight
        self.trend_threshold_pct = trend_threshold_pct

    def _score_expr(self) -> pl.Expr:
        cpc = pl.col("cpc_today")
        cpc_score = pl.when(cpc > 0).then(pl.lit(self.cpc_score_numerator) / cpc).otherwise(0.0)
        return (cpc_score + pl.col("ctr") * self.ctr_score_weight).alias("score")

    def _trend_expr(self) -> pl.Expr:
        curr = pl.col("spend_last_7d")
        prev = pl.col("spend_prev_7d")
        change = (curr - prev) / prev * 100
        # the +-10% band keeps the "new" label
        return (
            pl.when(prev > 0)
            .then(
                pl.when(change > self.trend_threshold_pct)
                .then(pl.lit(Trend.INCREASE.value))
                .when(change < -self.trend_threshold_pct)
                .then(pl.lit(Trend.DECREASE.value))
                .otherwise(pl.lit(Trend.NEW.value))
            )
            .when(curr == 0)
            .then(pl.lit(Trend.STOPPED.value))
            .otherwise(pl.lit(Trend.NEW.value))
            .alias("trend")
        )

    def _scored_frame(self, records: Sequence[AdRecord]) -> pl.DataFrame:
        return (
            ad_records_frame(records)
            .with_row_index(self.ROW_INDEX)
            .select([pl.col(self.ROW_INDEX), self._score_expr(), self._trend_expr()])
        )

    def performance_score(self, record: AdRecord) -> float:
        return float(self._scored_frame([record])["score"][0])

    def classify_trend(self, record: AdRecord) -> Trend:
        return Trend(self._scored_frame([record])["trend"][0])

    def analyze_keyword_performance(self, records: Sequence[AdRecord]) -> List[KeywordPerformance]:
        """Score every record and order by score, highest first (ties keep input order)."""
        if not records:
            return []

        scored = self._scored_frame(records).sort("score", descending=True, maintain_order=True)
        return [
            KeywordPerformance.from_record(records[row[self.ROW_INDEX]], score=float(row["score"]), trend=Trend(row["trend"]))
            for row in scored.iter_rows(named=True)
        ]

    def compare_platforms(self, records: Sequence[AdRecord]) -> List[PlatformComparison]:
        """7-day spend, CPC, CTR and spend share per platform, largest spend first."""
        if not records:
            return []

        frame = ad_records_frame(records).with_columns(
            pl.when(pl.col("platform").is_null() | (pl.col("platform") == ""))
            .then(pl.lit(self.UNKNOWN_PLATFORM))
            .otherwise(pl.col("platform"))
            .alias("platform")
        )
        total_spend = float(frame.select(pl.col("spend_last_7d").sum()).item() or 0.0)

        grouped = (
            frame.group_by("platform", maintain_order=True)
            .agg(
                [
                    pl.col("spend_last_7d").sum().alias("ad_spend"),
                    pl.col("clicks").sum().alias("clicks"),
                    pl.col("impressions").sum().alias("impressions"),
                    positive_mean_expr("cpc_last_7d").alias("avg_cpc"),
                ]
            )
            .with_columns(
                (safe_ratio_expr(pl.col("clicks").cast(pl.Float64), pl.col("impressions").cast(pl.Float64)) * 100)
                .fill_null(0.0)
                .alias("ctr"),
                (pl.col("ad_spend") / total_spend * 100 if total_spend > 0 else pl.lit(0.0)).alias("share"),
            )
            .sort("ad_spend", descending=True, maintain_order=True)
        )
        return [
            PlatformComparison(
                platform=str(row["platform"]),
                ad_spend=float(row["ad_spend"] or 0.0),
                avg_cpc=float(row["avg_cpc"] or 0.0),
                ctr=float(row["ctr"] or 0.0),
                clicks=int(row["clicks"] or 0),
                impressions=int(row["impressions"] or 0),
                share=float(row["share"] or 0.0),
            )
            for row in grouped.iter_rows(named=True)
        ]


def analyze_keyword_performance(records: Sequence[AdRecord]) -> List[KeywordPerformance]:
    return PerformanceEngine().analyze_keyword_performance(records)


def compare_platforms(records: Sequence[AdRecord]) -> List[PlatformComparison]:
    return PerformanceEngine().compare_platforms(records)
