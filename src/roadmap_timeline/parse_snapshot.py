from __future__ import annotations

import datetime as _dt
import logging
from dataclasses import dataclass
from typing import Any, Iterable

import yaml

from .schedule_models import GanttData, ItemStatus, Phase, PhaseStatus, SubItem, TimelineRange

logger = logging.getLogger(__name__)

# Padding added around the earliest/latest dated item when deriving a range.
RANGE_PADDING_DAYS = 7


class SnapshotValidationError(ValueError):
    """Raised when a roadmap snapshot document is malformed."""


@dataclass(frozen=True)
class _Path:
    """Helper to produce readable document paths like milestones[0].tasks[1]."""

    parts: tuple[str, ...] = ()

    def child(self, segment: str) -> "_Path":
        return _Path(self.parts + (segment,))

    def __str__(self) -> str:  # pragma: no cover - trivial
        return ".".join(self.parts) if self.parts else "root"


def load_snapshot(path: str, today: _dt.date) -> GanttData:
    """Load a snapshot from a YAML or JSON file (JSON parses as YAML)."""

    with open(path, "r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    data = parse_snapshot(raw, today)
    logger.info(
        "loaded %s: %d phases, %d unassigned items",
        path,
        len(data.milestones),
        len(data.unassigned_tasks),
    )
    return data


def parse_snapshot(data: Any, today: _dt.date) -> GanttData:
    """
    Build a GanttData snapshot from plain mappings.

    Both camelCase (`unassignedTasks`, `dateRange`) and snake_case keys are
    accepted. Sub-items may be nested under their phase (`tasks`) or listed
    flat at the top level with a `milestone_id`; flat ones are appended after
    nested ones. When no date range is given it is derived from the items.
    """

    path = _Path()
    if not isinstance(data, dict):
        raise SnapshotValidationError(f"{path}: expected mapping at top level")
    _assert_allowed_keys(
        data,
        {"milestones", "tasks", "unassignedTasks", "unassigned_tasks", "dateRange", "date_range"},
        path,
    )

    ids: set[str] = set()
    milestones_raw = _optional_list(data, "milestones", path)
    phases = [_parse_phase(raw, path.child(f"milestones[{idx}]"), ids) for idx, raw in enumerate(milestones_raw)]

    unassigned_key = _pick_key(data, "unassignedTasks", "unassigned_tasks", path)
    unassigned = [
        _parse_item(raw, path.child(f"{unassigned_key}[{idx}]"), ids)
        for idx, raw in enumerate(_optional_list(data, unassigned_key, path))
    ]

    phases, unassigned = _group_flat_tasks(data, path, ids, phases, unassigned)

    range_key = _pick_key(data, "dateRange", "date_range", path)
    if data.get(range_key) is not None:
        date_range = _parse_range(data[range_key], path.child(range_key))
    else:
        date_range = derive_date_range(phases, unassigned, today)
        logger.debug("derived date range %s..%s", date_range.start, date_range.end)

    return GanttData(milestones=tuple(phases), unassigned_tasks=tuple(unassigned), date_range=date_range)


def derive_date_range(
    phases: Iterable[Phase],
    unassigned: Iterable[SubItem],
    today: _dt.date,
) -> TimelineRange:
    """
    Window covering every dated item, padded by a week on both sides.

    Falls back to the calendar quarter containing `today` when nothing is
    dated.
    """

    dates: list[_dt.date] = []
    for phase in phases:
        dates.extend(d for d in (phase.start_date, phase.end_date) if d is not None)
        for item in phase.tasks:
            dates.extend(d for d in (item.start_date, item.end_date) if d is not None)
    for item in unassigned:
        dates.extend(d for d in (item.start_date, item.end_date) if d is not None)

    if not dates:
        return _quarter_of(today)

    padding = _dt.timedelta(days=RANGE_PADDING_DAYS)
    return TimelineRange(min(dates) - padding, max(dates) + padding)


def _quarter_of(day: _dt.date) -> TimelineRange:
    first_month = (day.month - 1) // 3 * 3 + 1
    start = _dt.date(day.year, first_month, 1)
    if first_month == 10:
        end = _dt.date(day.year, 12, 31)
    else:
        end = _dt.date(day.year, first_month + 3, 1) - _dt.timedelta(days=1)
    return TimelineRange(start, end)


def _parse_phase(data: Any, path: _Path, ids: set[str]) -> Phase:
    if not isinstance(data, dict):
        raise SnapshotValidationError(f"{path}: expected mapping for milestone")

    phase_id = _require_id(data, path, ids)
    title = _require_str(data, "title", path)
    status = _parse_status(data.get("status", PhaseStatus.PLANNED.value), PhaseStatus, path.child("status"))
    start_date = _optional_date(data, ("start_date",), path)
    end_date = _optional_date(data, ("target_date", "end_date"), path)
    progress = _parse_progress(data.get("progress_percent", 0), path.child("progress_percent"))

    tasks = [
        _parse_item(raw, path.child(f"tasks[{idx}]"), ids)
        for idx, raw in enumerate(_optional_list(data, "tasks", path))
    ]

    return Phase(
        id=phase_id,
        title=title,
        status=status,
        start_date=start_date,
        end_date=end_date,
        progress_percent=progress,
        tasks=tuple(tasks),
    )


def _parse_item(data: Any, path: _Path, ids: set[str]) -> SubItem:
    if not isinstance(data, dict):
        raise SnapshotValidationError(f"{path}: expected mapping for task")

    return SubItem(
        id=_require_id(data, path, ids),
        title=_require_str(data, "title", path),
        status=_parse_status(data.get("status", ItemStatus.TODO.value), ItemStatus, path.child("status")),
        start_date=_optional_date(data, ("start_date",), path),
        end_date=_optional_date(data, ("due_date", "end_date"), path),
    )


def _group_flat_tasks(
    data: dict[str, Any],
    path: _Path,
    ids: set[str],
    phases: list[Phase],
    unassigned: list[SubItem],
) -> tuple[list[Phase], list[SubItem]]:
    flat_raw = _optional_list(data, "tasks", path)
    if not flat_raw:
        return phases, unassigned

    by_phase: dict[str, list[SubItem]] = {phase.id: [] for phase in phases}
    for idx, raw in enumerate(flat_raw):
        item_path = path.child(f"tasks[{idx}]")
        item = _parse_item(raw, item_path, ids)
        owner = raw.get("milestone_id")
        if owner is None:
            unassigned.append(item)
            continue
        owner = str(owner)
        if owner not in by_phase:
            raise SnapshotValidationError(f"{item_path}.milestone_id: unknown milestone '{owner}'")
        by_phase[owner].append(item)

    grouped = [
        Phase(
            id=phase.id,
            title=phase.title,
            status=phase.status,
            start_date=phase.start_date,
            end_date=phase.end_date,
            progress_percent=phase.progress_percent,
            tasks=phase.tasks + tuple(by_phase[phase.id]),
        )
        for phase in phases
    ]
    return grouped, unassigned


def _pick_key(data: dict[str, Any], camel: str, snake: str, path: _Path) -> str:
    if camel in data and snake in data:
        raise SnapshotValidationError(f"{path}: use only one of {camel}/{snake}")
    return camel if camel in data else snake


def _parse_range(value: Any, path: _Path) -> TimelineRange:
    if not isinstance(value, dict):
        raise SnapshotValidationError(f"{path}: expected mapping with start and end")
    _assert_allowed_keys(value, {"start", "end"}, path)
    start = _parse_date(_require_value(value, "start", path), path.child("start"))
    end = _parse_date(_require_value(value, "end", path), path.child("end"))
    return TimelineRange(start, end)


def _parse_status(value: Any, enum_type: type, path: _Path):
    try:
        return enum_type(value)
    except ValueError as exc:
        allowed = [member.value for member in enum_type]
        raise SnapshotValidationError(f"{path}: unknown status {value!r}, expected one of {allowed}") from exc


def _parse_progress(value: Any, path: _Path) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SnapshotValidationError(f"{path}: expected number between 0 and 100")
    if not 0 <= value <= 100:
        raise SnapshotValidationError(f"{path}: expected number between 0 and 100, got {value}")
    return int(round(value))


def _optional_list(data: dict[str, Any], key: str, path: _Path) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise SnapshotValidationError(f"{path.child(key)}: expected list")
    return value


def _optional_date(data: dict[str, Any], keys: tuple[str, ...], path: _Path) -> _dt.date | None:
    for key in keys:
        value = data.get(key)
        if value not in (None, ""):
            return _parse_date(value, path.child(key))
    return None


def _assert_allowed_keys(data: dict[str, Any], allowed: set[str], path: _Path) -> None:
    extras = sorted(set(data.keys()) - allowed)
    if extras:
        raise SnapshotValidationError(f"{path}: unexpected fields {extras}")


def _require_str(data: dict[str, Any], key: str, path: _Path) -> str:
    value = _require_value(data, key, path)
    if not isinstance(value, str) or not value.strip():
        raise SnapshotValidationError(f"{path.child(key)}: expected non-empty string")
    return value


def _require_value(data: dict[str, Any], key: str, path: _Path) -> Any:
    if key not in data:
        raise SnapshotValidationError(f"{path}: missing required field '{key}'")
    return data[key]


def _require_id(data: dict[str, Any], path: _Path, ids: set[str]) -> str:
    value = _require_value(data, "id", path)
    if isinstance(value, bool) or not isinstance(value, (str, int)) or str(value).strip() == "":
        raise SnapshotValidationError(f"{path.child('id')}: expected non-empty string or integer")
    item_id = str(value)
    if item_id in ids:
        raise SnapshotValidationError(f"{path.child('id')}: duplicate id '{item_id}'")
    ids.add(item_id)
    return item_id


def _parse_date(value: Any, path: _Path) -> _dt.date:
    # YAML turns unquoted YYYY-MM-DD into date objects already.
    if isinstance(value, _dt.datetime):
        return value.date()
    if isinstance(value, _dt.date):
        return value
    if not isinstance(value, str):
        raise SnapshotValidationError(f"{path}: expected YYYY-MM-DD string")
    try:
        # A time part ("2024-01-01T09:00") is dropped; anything else must be a bare date.
        return _dt.date.fromisoformat(value.split("T", 1)[0])
    except ValueError as exc:
        raise SnapshotValidationError(f"{path}: expected YYYY-MM-DD string") from exc
