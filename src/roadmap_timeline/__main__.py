from __future__ import annotations

import argparse
import datetime as dt
import logging
import sys
import webbrowser
from pathlib import Path

import yaml

from .expansion import ExpansionState
from .export import write_csv
from .layout import build_layout
from .parse_snapshot import SnapshotValidationError, load_snapshot
from .render_svg import render_svg
from .responsive import ViewMode, compact_entries, format_compact, select_mode
from .schedule_models import TimelineRange, ZoomMode

logger = logging.getLogger(__name__)


def _parse_date(value: str) -> dt.date:
    try:
        return dt.date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid date '{value}', expected YYYY-MM-DD") from exc


def _parse_zoom(value: str) -> ZoomMode:
    try:
        return ZoomMode.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="roadmap-timeline",
        description="Roadmap timeline layout: render a snapshot as SVG or export it as CSV",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("snapshot", help="Path to roadmap snapshot (YAML or JSON)")
    parser.add_argument("--out", default="output/roadmap.svg", help="Output SVG path")
    parser.add_argument("--start", type=_parse_date, help="Override the snapshot range start (YYYY-MM-DD)")
    parser.add_argument("--end", type=_parse_date, help="Override the snapshot range end (YYYY-MM-DD)")
    parser.add_argument("--zoom", type=_parse_zoom, default=ZoomMode.DAYS, help="Column size: days, weeks or months")
    parser.add_argument("--today", type=_parse_date, help="Date used for the now-marker; defaults to the local date")
    parser.add_argument(
        "--csv",
        nargs="?",
        const=".",
        help="Also export CSV; bare flag writes roadmap-<date>.csv in the current directory",
    )
    parser.add_argument(
        "--collapse",
        action="append",
        default=[],
        metavar="PHASE_ID",
        help="Collapse a phase in the rendered chart (repeatable)",
    )
    parser.add_argument(
        "--viewport-width",
        type=int,
        help="Viewport width in pixels; narrow widths print the compact list instead of the chart",
    )
    parser.add_argument(
        "--view",
        dest="view",
        action="store_true",
        default=True,
        help="Best-effort open the output file after rendering",
    )
    parser.add_argument(
        "--no-view",
        dest="view",
        action="store_false",
        help="Do not open the output file after rendering",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    today = args.today or dt.date.today()
    snapshot_path = Path(args.snapshot)

    try:
        data = load_snapshot(str(snapshot_path), today)
    except (yaml.YAMLError, SnapshotValidationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except FileNotFoundError:
        print(f"Error: snapshot file not found: {snapshot_path}", file=sys.stderr)
        return 1
    except Exception as exc:  # Unexpected
        logger.exception("failed to load snapshot")
        print(f"Unexpected error while loading snapshot: {exc}", file=sys.stderr)
        return 1

    timeline_range = TimelineRange(
        args.start or data.date_range.start,
        args.end or data.date_range.end,
    )
    if not timeline_range.is_valid:
        print(f"Error: range start {timeline_range.start} is after end {timeline_range.end}", file=sys.stderr)
        return 2

    if args.csv is not None:
        try:
            csv_path = write_csv(data, args.csv, today)
        except OSError as exc:
            print(f"Error: cannot write CSV: {exc}", file=sys.stderr)
            return 1
        print(f"Exported {csv_path}")

    if args.viewport_width is not None and select_mode(args.viewport_width) is ViewMode.COMPACT:
        print(format_compact(compact_entries(data)))
        return 0

    expansion = ExpansionState.all_expanded(data)
    for phase_id in args.collapse:
        if expansion.is_expanded(phase_id):
            expansion = expansion.toggle(phase_id)
        else:
            logger.warning("no expanded phase with id %s", phase_id)

    layout = build_layout(data, timeline_range, args.zoom, today, expansion)

    try:
        render_svg(layout, out_path=args.out, title=snapshot_path.stem)
    except Exception as exc:
        logger.exception("failed to render roadmap")
        print(f"Unexpected error while rendering: {exc}", file=sys.stderr)
        return 1

    if args.view:
        try:
            webbrowser.open(Path(args.out).resolve().as_uri())
        except Exception:
            logger.debug("could not open %s in a browser", args.out)

    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
