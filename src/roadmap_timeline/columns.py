from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Sequence

from .schedule_models import AxisColumn, TimelineRange, ZoomMode

MONTH_LABELS_FR: tuple[str, ...] = (
    "janv.", "févr.", "mars", "avr.", "mai", "juin",
    "juil.", "août", "sept.", "oct.", "nov.", "déc.",
)
MONTH_LABELS_EN: tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
DEFAULT_MONTH_LABELS = MONTH_LABELS_FR


def generate_columns(
    timeline_range: TimelineRange,
    mode: ZoomMode,
    today: date,
    month_labels: Sequence[str] = DEFAULT_MONTH_LABELS,
) -> list[AxisColumn]:
    """
    Build the header segments of the time axis.

    Day and week grids start on the Sunday on or before the range start; the
    month grid starts on the first of the start month. Iteration stops once a
    segment would begin after the range end. An inverted range is a caller
    error and yields no columns.
    """

    if not timeline_range.is_valid:
        return []
    if len(month_labels) != 12:
        raise ValueError(f"month_labels must have 12 entries, got {len(month_labels)}")

    if mode is ZoomMode.DAYS:
        return _day_columns(timeline_range, today)
    if mode is ZoomMode.WEEKS:
        return _week_columns(timeline_range, today)
    return _month_columns(timeline_range, today, month_labels)


def sunday_on_or_before(day: date) -> date:
    # date.weekday(): Monday == 0 ... Sunday == 6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def week_number(day: date) -> int:
    """Sunday-based week of year, counting the partial first week as week 1."""
    jan1 = date(day.year, 1, 1)
    jan1_weekday = (jan1.weekday() + 1) % 7
    past_days = (day - jan1).days
    return math.ceil((past_days + jan1_weekday + 1) / 7)


def _day_columns(timeline_range: TimelineRange, today: date) -> list[AxisColumn]:
    columns: list[AxisColumn] = []
    current = sunday_on_or_before(timeline_range.start)
    while current <= timeline_range.end:
        columns.append(AxisColumn(current, str(current.day), current == today))
        current += timedelta(days=1)
    return columns


def _week_columns(timeline_range: TimelineRange, today: date) -> list[AxisColumn]:
    columns: list[AxisColumn] = []
    current = sunday_on_or_before(timeline_range.start)
    while current <= timeline_range.end:
        is_current = current <= today <= current + timedelta(days=6)
        columns.append(AxisColumn(current, f"W{week_number(current)}", is_current))
        current += timedelta(days=7)
    return columns


def _month_columns(timeline_range: TimelineRange, today: date, month_labels: Sequence[str]) -> list[AxisColumn]:
    columns: list[AxisColumn] = []
    current = timeline_range.start.replace(day=1)
    while current <= timeline_range.end:
        is_current = (current.year, current.month) == (today.year, today.month)
        columns.append(AxisColumn(current, month_labels[current.month - 1], is_current))
        current = _next_month(current)
    return columns


def _next_month(first_of_month: date) -> date:
    if first_of_month.month == 12:
        return date(first_of_month.year + 1, 1, 1)
    return first_of_month.replace(month=first_of_month.month + 1)
