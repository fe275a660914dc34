from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, Protocol, Sequence

from .columns import DEFAULT_MONTH_LABELS
from .schedule_models import GanttData, Phase, ScheduleItem
from .scroll_sync import Unsubscribe

logger = logging.getLogger(__name__)

COMPACT_BREAKPOINT_PX = 768


class ViewMode(Enum):
    COMPACT = "compact"
    FULL = "full"


def select_mode(viewport_width: float) -> ViewMode:
    """Narrow viewports get the single-column list instead of the dual-pane chart."""
    return ViewMode.COMPACT if viewport_width < COMPACT_BREAKPOINT_PX else ViewMode.FULL


class ViewportRegion(Protocol):
    """The host's viewport; reports its width and fires on resize."""

    def get_width(self) -> float: ...

    def on_resize(self, callback: Callable[[], None]) -> Unsubscribe: ...


class ResponsiveSelector:
    """
    Tracks the view mode for a viewport across resizes.

    The mode is evaluated once on attach and again on every resize event; the
    host callback fires only when the mode actually changes.
    """

    def __init__(self, viewport: ViewportRegion, on_change: Callable[[ViewMode], None] | None = None) -> None:
        self.viewport = viewport
        self.on_change = on_change
        self.mode: ViewMode | None = None
        self._unsubscribe: Unsubscribe | None = None

    @property
    def attached(self) -> bool:
        return self._unsubscribe is not None

    def attach(self) -> "ResponsiveSelector":
        if self.attached:
            return self
        self.mode = select_mode(self.viewport.get_width())
        self._unsubscribe = self.viewport.on_resize(self.on_resize)
        logger.debug("responsive selector attached in %s mode", self.mode.value)
        return self

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
            logger.debug("responsive selector detached")

    def __enter__(self) -> "ResponsiveSelector":
        return self.attach()

    def __exit__(self, *exc_info) -> None:
        self.detach()

    def on_resize(self) -> None:
        mode = select_mode(self.viewport.get_width())
        if mode is self.mode:
            return
        self.mode = mode
        logger.debug("viewport switched to %s mode", mode.value)
        if self.on_change is not None:
            self.on_change(mode)


@dataclass(frozen=True)
class CompactEntry:
    """A line of the compact roadmap list."""

    item: ScheduleItem
    parent: Phase | None
    depth: int
    dates: str
    progress: int | None = None


def compact_entries(data: GanttData, month_labels: Sequence[str] = DEFAULT_MONTH_LABELS) -> list[CompactEntry]:
    """Phases with their sub-items underneath, unassigned sub-items last."""
    entries: list[CompactEntry] = []
    for phase in data.milestones:
        entries.append(
            CompactEntry(
                item=phase,
                parent=None,
                depth=0,
                dates=_date_span(phase.start_date, phase.end_date, month_labels),
                progress=phase.progress_percent,
            )
        )
        for item in phase.tasks:
            entries.append(CompactEntry(item, phase, 1, _short_date(item.end_date, month_labels)))
    for item in data.unassigned_tasks:
        entries.append(CompactEntry(item, None, 0, _short_date(item.end_date, month_labels)))
    return entries


def format_compact(entries: Sequence[CompactEntry]) -> str:
    lines = []
    for entry in entries:
        indent = "    " * entry.depth
        suffix = f"  {entry.progress}%" if entry.progress is not None else ""
        dates = f"  ({entry.dates})" if entry.dates else ""
        lines.append(f"{indent}[{entry.item.status.style.label}] {entry.item.title}{dates}{suffix}")
    return "\n".join(lines)


def _short_date(value: date | None, month_labels: Sequence[str]) -> str:
    if value is None:
        return ""
    return f"{value.day} {month_labels[value.month - 1]}"


def _date_span(start: date | None, end: date | None, month_labels: Sequence[str]) -> str:
    if start is None:
        return _short_date(end, month_labels)
    return f"{_short_date(start, month_labels)} → {_short_date(end, month_labels)}"
