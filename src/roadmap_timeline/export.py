from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from pathlib import Path

from .schedule_models import GanttData, Phase, SubItem

logger = logging.getLogger(__name__)

CSV_HEADER = ("Type", "Title", "Status", "Start Date", "End Date", "Progress")
TITLE_INDENT = "  "


class ExportKind(Enum):
    PHASE = "Milestone"
    ITEM = "Task"
    UNASSIGNED_ITEM = "Task (Unassigned)"


@dataclass(frozen=True)
class ExportRow:
    kind: ExportKind
    title: str
    status: str
    start_date: date | None = None
    end_date: date | None = None
    progress: int | None = None

    def as_fields(self) -> tuple[str, ...]:
        return (
            self.kind.value,
            self.title,
            self.status,
            _iso(self.start_date),
            _iso(self.end_date),
            "" if self.progress is None else f"{self.progress}%",
        )


def flatten(data: GanttData) -> list[ExportRow]:
    """
    Flatten a snapshot into export rows.

    Phases come first in input order, each followed by its sub-items (titles
    indented); unassigned sub-items close the list. Expansion state plays no
    part: the export always carries every item.
    """

    rows: list[ExportRow] = []

    for phase in data.milestones:
        rows.append(_phase_row(phase))
        for item in phase.tasks:
            rows.append(_item_row(item, ExportKind.ITEM, indent=TITLE_INDENT))

    for item in data.unassigned_tasks:
        rows.append(_item_row(item, ExportKind.UNASSIGNED_ITEM))

    return rows


def to_csv(rows: list[ExportRow]) -> str:
    """Serialize rows with a header; every field quoted, rows joined by newlines."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for row in rows:
        writer.writerow(row.as_fields())
    return buffer.getvalue().rstrip("\n")


def export_filename(today: date) -> str:
    return f"roadmap-{today.isoformat()}.csv"


def write_csv(data: GanttData, out_path: str | Path, today: date) -> Path:
    """
    Write the flattened snapshot as CSV.

    `out_path` may be a directory, in which case the dated default file name
    is used inside it.
    """

    path = Path(out_path)
    if path.is_dir():
        path = path / export_filename(today)
    path.parent.mkdir(parents=True, exist_ok=True)

    rows = flatten(data)
    path.write_text(to_csv(rows), encoding="utf-8")
    logger.info("wrote %d roadmap rows to %s", len(rows), path)
    return path


def _phase_row(phase: Phase) -> ExportRow:
    return ExportRow(
        kind=ExportKind.PHASE,
        title=phase.title,
        status=phase.status.value,
        start_date=phase.start_date,
        end_date=phase.end_date,
        progress=phase.progress_percent,
    )


def _item_row(item: SubItem, kind: ExportKind, indent: str = "") -> ExportRow:
    return ExportRow(
        kind=kind,
        title=f"{indent}{item.title}",
        status=item.status.value,
        start_date=item.start_date,
        end_date=item.end_date,
    )


def _iso(value: date | None) -> str:
    return value.isoformat() if value is not None else ""
