from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Literal


StatusTier = Literal["neutral", "active", "success", "warning", "danger", "muted"]
"""Presentation tiers a status maps onto; hosts pick colours/icons per tier."""


class ZoomMode(Enum):
    """Time-axis granularity: one column per day, week or month."""

    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"

    @classmethod
    def parse(cls, value: str) -> "ZoomMode":
        """Parse a mode name, case-insensitively; singular forms are accepted."""
        key = value.strip().lower()
        if key in _ZOOM_ALIASES:
            return _ZOOM_ALIASES[key]
        raise ValueError(f"unknown zoom mode '{value}', expected one of {sorted(_ZOOM_ALIASES)}")


# "quarters" is the dashboard's name for the month-column view.
_ZOOM_ALIASES = {
    "day": ZoomMode.DAYS,
    "days": ZoomMode.DAYS,
    "week": ZoomMode.WEEKS,
    "weeks": ZoomMode.WEEKS,
    "month": ZoomMode.MONTHS,
    "months": ZoomMode.MONTHS,
    "quarters": ZoomMode.MONTHS,
}


@dataclass(frozen=True)
class StatusStyle:
    label: str
    tier: StatusTier


class PhaseStatus(Enum):
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    DELAYED = "delayed"
    CANCELLED = "cancelled"

    @property
    def style(self) -> StatusStyle:
        return PHASE_STATUS_STYLES[self]


class ItemStatus(Enum):
    BACKLOG = "backlog"
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    DONE = "done"
    BLOCKED = "blocked"

    @property
    def style(self) -> StatusStyle:
        return ITEM_STATUS_STYLES[self]


PHASE_STATUS_STYLES: dict[PhaseStatus, StatusStyle] = {
    PhaseStatus.PLANNED: StatusStyle("Planned", "neutral"),
    PhaseStatus.IN_PROGRESS: StatusStyle("In progress", "active"),
    PhaseStatus.COMPLETED: StatusStyle("Completed", "success"),
    PhaseStatus.DELAYED: StatusStyle("Delayed", "warning"),
    PhaseStatus.CANCELLED: StatusStyle("Cancelled", "danger"),
}

ITEM_STATUS_STYLES: dict[ItemStatus, StatusStyle] = {
    ItemStatus.BACKLOG: StatusStyle("Backlog", "muted"),
    ItemStatus.TODO: StatusStyle("To do", "neutral"),
    ItemStatus.IN_PROGRESS: StatusStyle("In progress", "active"),
    ItemStatus.REVIEW: StatusStyle("Review", "active"),
    ItemStatus.DONE: StatusStyle("Done", "success"),
    ItemStatus.BLOCKED: StatusStyle("Blocked", "danger"),
}


def _assert_exhaustive(styles: dict, status_enum: type[Enum]) -> None:
    missing = [member.value for member in status_enum if member not in styles]
    if missing:
        raise TypeError(f"{status_enum.__name__} has no presentation style for {missing}")


_assert_exhaustive(PHASE_STATUS_STYLES, PhaseStatus)
_assert_exhaustive(ITEM_STATUS_STYLES, ItemStatus)


@dataclass(frozen=True)
class TimelineRange:
    """Visible calendar window, both ends inclusive."""

    start: date
    end: date

    @property
    def is_valid(self) -> bool:
        return self.start <= self.end

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class SubItem:
    """Schedule entry that may hang under one phase or stay unassigned."""

    id: str
    title: str
    status: ItemStatus = ItemStatus.TODO
    start_date: date | None = None
    end_date: date | None = None


@dataclass(frozen=True)
class Phase:
    """Top-level schedule entry (a milestone) owning an ordered list of sub-items."""

    id: str
    title: str
    status: PhaseStatus = PhaseStatus.PLANNED
    start_date: date | None = None
    end_date: date | None = None
    progress_percent: int = 0
    tasks: tuple[SubItem, ...] = ()

    def __post_init__(self) -> None:
        # Hashable so snapshots can key the layout cache.
        object.__setattr__(self, "tasks", tuple(self.tasks))
        if not 0 <= self.progress_percent <= 100:
            raise ValueError(f"progress_percent must be within 0..100, got {self.progress_percent}")


ScheduleItem = Phase | SubItem
"""Anything that can be laid out as a bar."""


@dataclass(frozen=True)
class GanttData:
    """Read-only snapshot handed to the engine; replaced wholesale, never patched."""

    milestones: tuple[Phase, ...] = ()
    unassigned_tasks: tuple[SubItem, ...] = ()
    date_range: TimelineRange | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "milestones", tuple(self.milestones))
        object.__setattr__(self, "unassigned_tasks", tuple(self.unassigned_tasks))

    def phase_ids(self) -> list[str]:
        return [phase.id for phase in self.milestones]


@dataclass(frozen=True)
class AxisColumn:
    period_start: date
    label: str
    is_current_period: bool = False


@dataclass(frozen=True)
class BarGeometry:
    offset_px: float
    width_px: float

    @property
    def end_px(self) -> float:
        return self.offset_px + self.width_px


RowKind = Literal["phase", "item", "unassigned_item"]


@dataclass(frozen=True)
class LayoutRow:
    """
    One line of the list pane paired with its timeline bar.

    `parent` is the owning phase for sub-items so a host can route clicks as
    (item, parent_or_none) without asking the engine again.
    """

    kind: RowKind
    item: ScheduleItem
    parent: Phase | None = None
    depth: int = 0
    bar: BarGeometry | None = None


@dataclass(frozen=True)
class RoadmapLayout:
    """Everything a host needs to draw the dual-pane roadmap for one render."""

    range: TimelineRange
    mode: ZoomMode
    column_width: float
    columns: tuple[AxisColumn, ...] = ()
    rows: tuple[LayoutRow, ...] = ()
    now_offset: float | None = None

    @property
    def total_width(self) -> float:
        return len(self.columns) * self.column_width
