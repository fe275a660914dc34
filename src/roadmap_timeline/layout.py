from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date

from .columns import generate_columns
from .expansion import ExpansionState
from .geometry import LayoutSettings, bar_in_range, layout_bar, locate_now
from .schedule_models import (
    AxisColumn,
    BarGeometry,
    GanttData,
    LayoutRow,
    RoadmapLayout,
    ScheduleItem,
    TimelineRange,
    ZoomMode,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Geometry:
    """Expansion-independent part of a layout: axis plus one bar per item."""

    columns: tuple[AxisColumn, ...]
    phase_bars: tuple[BarGeometry | None, ...]
    task_bars: tuple[tuple[BarGeometry | None, ...], ...]
    unassigned_bars: tuple[BarGeometry | None, ...]


def build_layout(
    data: GanttData,
    timeline_range: TimelineRange,
    mode: ZoomMode,
    today: date,
    expansion: ExpansionState | None = None,
    settings: LayoutSettings | None = None,
) -> RoadmapLayout:
    """Compute a full roadmap layout without caching."""
    settings = settings or LayoutSettings()
    geometry = _compute_geometry(data, timeline_range, mode, today, settings)
    return _assemble(data, timeline_range, mode, today, expansion, settings, geometry)


class LayoutCache:
    """
    Memoizes axis and bar geometry on (range, mode, snapshot).

    Re-rendering with the same inputs reuses the previous geometry, so only
    the cheap row filtering for the current expansion state runs again. The
    now-marker depends on the mode and is computed per call.
    """

    def __init__(self, settings: LayoutSettings | None = None, max_entries: int = 8) -> None:
        self.settings = settings or LayoutSettings()
        self.max_entries = max_entries
        self.computations = 0
        self._entries: OrderedDict[tuple, _Geometry] = OrderedDict()

    def layout(
        self,
        data: GanttData,
        timeline_range: TimelineRange,
        mode: ZoomMode,
        today: date,
        expansion: ExpansionState | None = None,
    ) -> RoadmapLayout:
        column_width = self.settings.column_width(mode)
        key = (timeline_range, mode, data, column_width, today)
        geometry = self._entries.get(key)
        if geometry is None:
            geometry = _compute_geometry(data, timeline_range, mode, today, self.settings)
            self.computations += 1
            self._entries[key] = geometry
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
        else:
            self._entries.move_to_end(key)
        return _assemble(data, timeline_range, mode, today, expansion, self.settings, geometry)

    def clear(self) -> None:
        self._entries.clear()


def _compute_geometry(
    data: GanttData,
    timeline_range: TimelineRange,
    mode: ZoomMode,
    today: date,
    settings: LayoutSettings,
) -> _Geometry:
    column_width = settings.column_width(mode)

    def place(item: ScheduleItem) -> BarGeometry | None:
        if not bar_in_range(item.start_date, item.end_date, timeline_range):
            return None
        return layout_bar(
            item.start_date,
            item.end_date,
            timeline_range,
            mode,
            column_width,
            min_bar_width=settings.min_bar_width,
        )

    columns = tuple(generate_columns(timeline_range, mode, today))
    if not columns:
        logger.warning("no axis columns for range %s..%s", timeline_range.start, timeline_range.end)

    geometry = _Geometry(
        columns=columns,
        phase_bars=tuple(place(phase) for phase in data.milestones),
        task_bars=tuple(tuple(place(item) for item in phase.tasks) for phase in data.milestones),
        unassigned_bars=tuple(place(item) for item in data.unassigned_tasks),
    )
    logger.debug(
        "computed %d columns and %d phase bars in %s mode",
        len(columns),
        len(geometry.phase_bars),
        mode.value,
    )
    return geometry


def _assemble(
    data: GanttData,
    timeline_range: TimelineRange,
    mode: ZoomMode,
    today: date,
    expansion: ExpansionState | None,
    settings: LayoutSettings,
    geometry: _Geometry,
) -> RoadmapLayout:
    expansion = expansion if expansion is not None else ExpansionState.all_expanded(data)
    column_width = settings.column_width(mode)

    rows: list[LayoutRow] = []
    for idx, phase in enumerate(data.milestones):
        rows.append(LayoutRow(kind="phase", item=phase, depth=0, bar=geometry.phase_bars[idx]))
        if not expansion.is_expanded(phase.id):
            continue
        for item, bar in zip(phase.tasks, geometry.task_bars[idx]):
            rows.append(LayoutRow(kind="item", item=item, parent=phase, depth=1, bar=bar))

    for item, bar in zip(data.unassigned_tasks, geometry.unassigned_bars):
        rows.append(LayoutRow(kind="unassigned_item", item=item, depth=0, bar=bar))

    return RoadmapLayout(
        range=timeline_range,
        mode=mode,
        column_width=column_width,
        columns=geometry.columns,
        rows=tuple(rows),
        now_offset=locate_now(today, timeline_range, mode, column_width),
    )
