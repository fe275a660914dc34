from __future__ import annotations

import logging
from pathlib import Path

import matplotlib

matplotlib.use("Agg")  # ensure headless, deterministic output
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from .schedule_models import LayoutRow, Phase, RoadmapLayout, StatusTier

logger = logging.getLogger(__name__)

# Drawing knobs, in layout pixels unless noted.
PX_PER_INCH = 96.0
HEADER_HEIGHT = 48.0
PHASE_ROW_HEIGHT = 36.0
ITEM_ROW_HEIGHT = 28.0
PHASE_BAR_HEIGHT = 24.0
ITEM_BAR_HEIGHT = 16.0
LABEL_PANE_WIDTH = 280.0
LABEL_INDENT = 24.0
BAR_TITLE_MIN_WIDTH = 60.0
FONT_SIZE = 8
TITLE_FONT = 12

TIER_COLORS: dict[StatusTier, str] = {
    "neutral": "#737373",
    "active": "#06b6d4",
    "success": "#10b981",
    "warning": "#f59e0b",
    "danger": "#f43f5e",
    "muted": "#525252",
}
CURRENT_PERIOD_COLOR = "#8b5cf6"
GRID_COLOR = "#d4d4d4"


def render_svg(layout: RoadmapLayout, out_path: str, title: str = "") -> None:
    """
    Render a computed roadmap layout to a static SVG at `out_path`.

    - The left strip holds row labels, the right area the timeline.
    - Header cells of the current period and the now-marker are highlighted.
    - Phase bars carry a lighter overlay proportional to their progress.
    """

    if not layout.columns:
        raise ValueError("layout has no axis columns to draw")

    heights = [_row_height(row) for row in layout.rows]
    body_height = sum(heights)
    total_height = HEADER_HEIGHT + body_height
    chart_width = max(layout.total_width, max((r.bar.end_px for r in layout.rows if r.bar), default=0.0))
    total_width = LABEL_PANE_WIDTH + chart_width

    fig = plt.figure(figsize=(total_width / PX_PER_INCH, max(total_height, HEADER_HEIGHT * 2) / PX_PER_INCH))
    ax = fig.add_axes([0, 0, 1, 1])
    ax.set_xlim(-LABEL_PANE_WIDTH, chart_width)
    ax.set_ylim(total_height, 0)
    ax.axis("off")

    if title:
        ax.text(-LABEL_PANE_WIDTH + 8, HEADER_HEIGHT / 2, title, ha="left", va="center",
                fontsize=TITLE_FONT, fontweight="bold")

    _draw_header(ax, layout, total_height)

    y = HEADER_HEIGHT
    for row, height in zip(layout.rows, heights):
        _draw_row(ax, row, y, height)
        y += height

    if layout.now_offset is not None:
        ax.plot([layout.now_offset, layout.now_offset], [HEADER_HEIGHT, total_height],
                color=CURRENT_PERIOD_COLOR, linewidth=1.5, zorder=5)

    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(out_path, format="svg")
    plt.close(fig)
    logger.info("rendered %d rows and %d columns to %s", len(layout.rows), len(layout.columns), out_path)


def _row_height(row: LayoutRow) -> float:
    return PHASE_ROW_HEIGHT if row.kind == "phase" else ITEM_ROW_HEIGHT


def _draw_header(ax, layout: RoadmapLayout, total_height: float) -> None:
    width = layout.column_width
    for idx, column in enumerate(layout.columns):
        x = idx * width
        if column.is_current_period:
            ax.add_patch(Rectangle((x, 0), width, total_height, facecolor=CURRENT_PERIOD_COLOR,
                                   alpha=0.08, edgecolor="none", zorder=0))
        ax.plot([x, x], [0, total_height], color=GRID_COLOR, linewidth=0.5, zorder=1)
        ax.text(x + width / 2, HEADER_HEIGHT / 2, column.label, ha="center", va="center",
                fontsize=FONT_SIZE, color=CURRENT_PERIOD_COLOR if column.is_current_period else "#525252")
    ax.plot([-LABEL_PANE_WIDTH, layout.total_width], [HEADER_HEIGHT, HEADER_HEIGHT],
            color=GRID_COLOR, linewidth=0.8)


def _draw_row(ax, row: LayoutRow, top: float, height: float) -> None:
    center = top + height / 2
    is_phase = row.kind == "phase"
    ax.text(-LABEL_PANE_WIDTH + 8 + row.depth * LABEL_INDENT, center, row.item.title,
            ha="left", va="center", fontsize=FONT_SIZE, fontweight="bold" if is_phase else "normal")

    if row.bar is None:
        return

    bar_height = PHASE_BAR_HEIGHT if is_phase else ITEM_BAR_HEIGHT
    color = TIER_COLORS[row.item.status.style.tier]
    bar_top = center - bar_height / 2
    ax.add_patch(Rectangle((row.bar.offset_px, bar_top), row.bar.width_px, bar_height,
                           facecolor=color, alpha=0.85 if is_phase else 0.7, edgecolor="none", zorder=3))

    if isinstance(row.item, Phase):
        done_width = row.bar.width_px * row.item.progress_percent / 100
        ax.add_patch(Rectangle((row.bar.offset_px, bar_top), done_width, bar_height,
                               facecolor="white", alpha=0.2, edgecolor="none", zorder=4))
        if row.bar.width_px > BAR_TITLE_MIN_WIDTH:
            ax.text(row.bar.offset_px + row.bar.width_px / 2, center, row.item.title, ha="center",
                    va="center", fontsize=FONT_SIZE, color="white", clip_on=True, zorder=6)
