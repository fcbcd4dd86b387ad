"""Domain layer package."""

from .models import AdRecord, Insight, InsightLevel, KeywordPerformance, SummaryMetrics, Trend
from .recommendation import generate_insights

__all__ = ["AdRecord", "KeywordPerformance", "SummaryMetrics", "Insight", "InsightLevel", "Trend", "generate_insights"]
