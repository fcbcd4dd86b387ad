"""Shared numeric/formatting utilities for reporting."""

from __future__ import annotations

import math

import polars as pl


def round_half_up(value: float | None) -> int:
    """Round .5 away from zero for positives, matching spreadsheet display."""
    if value is None:
        return 0
    return int(math.floor(value + 0.5))


def safe_ratio_expr(num: pl.Expr, den: pl.Expr) -> pl.Expr:
    safe_den = pl.when(den > 0).then(den).otherwise(None)
    return num / safe_den


def positive_mean_expr(column_name: str) -> pl.Expr:
    """Mean over strictly positive values; 0 when there are none."""
    column = pl.col(column_name)
    return column.filter(column > 0).mean().fill_null(0.0).alias(column_name)


def fmt_int(value: float | None) -> str:
    return f"{round_half_up(value):,}"


def fmt_won(value: float | None) -> str:
    return f"₩{fmt_int(value)}"


def fmt_pct(value: float | None, digits: int = 2) -> str:
    if value is None:
        return "N/A"
    return f"{value:.{digits}f}%"


def fmt_rate(value: float | None) -> str:
    return fmt_pct(value, digits=1)
