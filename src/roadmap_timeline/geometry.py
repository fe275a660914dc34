from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from .schedule_models import BarGeometry, TimelineRange, ZoomMode

# Narrowest bar drawn, so one-day items stay clickable at every zoom level.
MIN_BAR_WIDTH = 8.0

DEFAULT_COLUMN_WIDTHS: dict[ZoomMode, float] = {
    ZoomMode.DAYS: 32.0,
    ZoomMode.WEEKS: 48.0,
    ZoomMode.MONTHS: 80.0,
}

# Days represented by one column; months use a flat 30-day approximation.
DAYS_PER_COLUMN: dict[ZoomMode, int] = {
    ZoomMode.DAYS: 1,
    ZoomMode.WEEKS: 7,
    ZoomMode.MONTHS: 30,
}


@dataclass(frozen=True)
class LayoutSettings:
    """Per-host overrides for column widths and the bar floor."""

    column_widths: dict[ZoomMode, float] = field(default_factory=lambda: dict(DEFAULT_COLUMN_WIDTHS))
    min_bar_width: float = MIN_BAR_WIDTH

    def column_width(self, mode: ZoomMode) -> float:
        return self.column_widths.get(mode, DEFAULT_COLUMN_WIDTHS[mode])


def days_between(start: date, end: date) -> int:
    """Signed whole calendar days from `start` to `end`."""
    return (end - start).days


def pixels_per_day(mode: ZoomMode, column_width: float) -> float:
    return column_width / DAYS_PER_COLUMN[mode]


def date_to_offset(day: date, range_start: date, px_per_day: float) -> float:
    """Horizontal offset of `day`; dates before the range start pin to 0."""
    return max(0, days_between(range_start, day)) * px_per_day


def layout_bar(
    start: date | None,
    end: date | None,
    timeline_range: TimelineRange,
    mode: ZoomMode,
    column_width: float,
    min_bar_width: float = MIN_BAR_WIDTH,
) -> BarGeometry | None:
    """
    Position an item's date interval on the axis.

    - No end date means nothing to anchor the bar on: returns None.
    - A missing start collapses the item onto its end date (one day wide).
    - Width never drops below `min_bar_width`; bars may run past the range end.
    """

    if end is None:
        return None

    effective_start = start if start is not None else end
    px_per_day = pixels_per_day(mode, column_width)
    duration_days = max(1, days_between(effective_start, end) + 1)

    return BarGeometry(
        offset_px=date_to_offset(effective_start, timeline_range.start, px_per_day),
        width_px=max(duration_days * px_per_day, min_bar_width),
    )


def bar_in_range(start: date | None, end: date | None, timeline_range: TimelineRange) -> bool:
    """True when the item's interval overlaps the visible window at all."""
    if end is None:
        return False
    effective_start = start if start is not None else end
    lo, hi = min(effective_start, end), max(effective_start, end)
    return hi >= timeline_range.start and lo <= timeline_range.end


def locate_now(
    today: date,
    timeline_range: TimelineRange,
    mode: ZoomMode,
    column_width: float,
) -> float | None:
    """Offset of the now-marker, or None when today is outside the window."""
    if not timeline_range.contains(today):
        return None
    return date_to_offset(today, timeline_range.start, pixels_per_day(mode, column_width))
