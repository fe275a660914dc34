"""Timeline layout engine for the portfolio roadmap (Gantt) view."""

from .columns import generate_columns
from .expansion import ExpansionState
from .export import ExportKind, ExportRow, export_filename, flatten, to_csv, write_csv
from .geometry import (
    MIN_BAR_WIDTH,
    LayoutSettings,
    date_to_offset,
    layout_bar,
    locate_now,
    pixels_per_day,
)
from .layout import LayoutCache, build_layout
from .parse_snapshot import SnapshotValidationError, derive_date_range, load_snapshot, parse_snapshot
from .responsive import ResponsiveSelector, ViewMode, ViewportRegion, compact_entries, select_mode
from .schedule_models import (
    AxisColumn,
    BarGeometry,
    GanttData,
    ItemStatus,
    LayoutRow,
    Phase,
    PhaseStatus,
    RoadmapLayout,
    SubItem,
    TimelineRange,
    ZoomMode,
)
from .scroll_sync import ScrollRegion, ScrollSynchronizer, SyncState
