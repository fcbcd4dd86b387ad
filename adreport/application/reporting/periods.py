"""Week labels for the weekly report (last Monday-Friday, and the week before)."""

from __future__ import annotations

from datetime import date, timedelta


def _fmt_month_day(value: date) -> str:
    return value.strftime("%m.%d")


def _last_friday(reference: date) -> date:
    # Saturday -> the day before, Sunday -> two days before, weekdays -> previous week's Friday
    weekday = reference.weekday()
    if weekday == 5:
        return reference - timedelta(days=1)
    if weekday == 6:
        return reference - timedelta(days=2)
    return reference - timedelta(days=weekday + 3)


def calculate_week_range(reference: date) -> tuple[str, str]:
    friday = _last_friday(reference)
    monday = friday - timedelta(days=4)
    return _fmt_month_day(monday), _fmt_month_day(friday)


def calculate_previous_week_range(reference: date) -> tuple[str, str]:
    friday = _last_friday(reference) - timedelta(days=7)
    monday = friday - timedelta(days=4)
    return _fmt_month_day(monday), _fmt_month_day(friday)


def week_label(week: tuple[str, str]) -> str:
    start, end = week
    return f"{start}~{end}"
