import datetime as dt

import pytest

from roadmap_timeline.geometry import (
    MIN_BAR_WIDTH,
    bar_in_range,
    date_to_offset,
    layout_bar,
    locate_now,
    pixels_per_day,
)
from roadmap_timeline.schedule_models import TimelineRange, ZoomMode

MARCH = TimelineRange(dt.date(2024, 3, 1), dt.date(2024, 3, 31))


def test_pixels_per_day_per_mode():
    assert pixels_per_day(ZoomMode.DAYS, 32) == 32
    assert pixels_per_day(ZoomMode.WEEKS, 49) == 7
    assert pixels_per_day(ZoomMode.MONTHS, 90) == 3


def test_date_to_offset_pins_early_dates_to_zero():
    assert date_to_offset(dt.date(2024, 3, 4), dt.date(2024, 3, 1), 10) == 30
    assert date_to_offset(dt.date(2024, 2, 20), dt.date(2024, 3, 1), 10) == 0


def test_end_only_item_collapses_to_one_day():
    bar = layout_bar(None, dt.date(2024, 3, 10), MARCH, ZoomMode.DAYS, 32)

    assert bar is not None
    assert bar.offset_px == 288
    assert bar.width_px == max(32, MIN_BAR_WIDTH)


def test_missing_end_date_yields_no_geometry():
    assert layout_bar(dt.date(2024, 3, 2), None, MARCH, ZoomMode.DAYS, 32) is None
    assert layout_bar(None, None, MARCH, ZoomMode.WEEKS, 48) is None


def test_bar_width_counts_both_ends_inclusive():
    bar = layout_bar(dt.date(2024, 3, 4), dt.date(2024, 3, 10), MARCH, ZoomMode.WEEKS, 49)

    assert bar.offset_px == 21
    assert bar.width_px == 49


def test_narrow_bars_are_clamped_to_minimum_width():
    bar = layout_bar(dt.date(2024, 3, 5), dt.date(2024, 3, 5), MARCH, ZoomMode.MONTHS, 30)

    assert bar.width_px == MIN_BAR_WIDTH
    assert bar.offset_px == 4


def test_bar_starting_before_range_is_pinned_to_origin():
    bar = layout_bar(dt.date(2024, 2, 20), dt.date(2024, 3, 2), MARCH, ZoomMode.DAYS, 32)

    assert bar.offset_px == 0
    assert bar.width_px == 12 * 32


def test_bar_is_not_clamped_at_range_end():
    bar = layout_bar(dt.date(2024, 3, 30), dt.date(2024, 4, 5), MARCH, ZoomMode.DAYS, 10)

    assert bar.end_px > 31 * 10


@pytest.mark.parametrize("mode", list(ZoomMode))
@pytest.mark.parametrize(
    "start,end",
    [
        (None, dt.date(2024, 3, 1)),
        (dt.date(2024, 3, 1), dt.date(2024, 3, 1)),
        (dt.date(2024, 1, 1), dt.date(2024, 1, 2)),
        (dt.date(2024, 3, 20), dt.date(2024, 3, 2)),
    ],
)
def test_every_placed_bar_meets_floor(mode, start, end):
    bar = layout_bar(start, end, MARCH, mode, 20)

    assert bar.width_px >= MIN_BAR_WIDTH
    assert bar.offset_px >= 0


def test_bar_in_range():
    assert bar_in_range(None, dt.date(2024, 3, 1), MARCH)
    assert bar_in_range(dt.date(2024, 2, 1), dt.date(2024, 4, 1), MARCH)
    assert not bar_in_range(dt.date(2024, 1, 1), dt.date(2024, 2, 29), MARCH)
    assert not bar_in_range(dt.date(2024, 4, 1), dt.date(2024, 4, 2), MARCH)
    assert not bar_in_range(dt.date(2024, 3, 1), None, MARCH)


def test_locate_now_outside_range_is_none():
    assert locate_now(dt.date(2024, 2, 29), MARCH, ZoomMode.DAYS, 32) is None
    assert locate_now(dt.date(2024, 4, 1), MARCH, ZoomMode.DAYS, 32) is None


@pytest.mark.parametrize("mode,width", [(ZoomMode.DAYS, 32), (ZoomMode.WEEKS, 48), (ZoomMode.MONTHS, 80)])
def test_locate_now_matches_offset_for_mode(mode, width):
    today = dt.date(2024, 3, 5)
    expected = date_to_offset(today, MARCH.start, pixels_per_day(mode, width))

    assert locate_now(today, MARCH, mode, width) == expected


def test_locate_now_on_range_edges():
    assert locate_now(MARCH.start, MARCH, ZoomMode.DAYS, 32) == 0
    assert locate_now(MARCH.end, MARCH, ZoomMode.DAYS, 32) == 30 * 32
