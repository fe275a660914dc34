import datetime as dt

import pytest

from roadmap_timeline.expansion import ExpansionState
from roadmap_timeline.responsive import COMPACT_BREAKPOINT_PX, ViewMode, compact_entries, format_compact, select_mode
from roadmap_timeline.schedule_models import (
    ITEM_STATUS_STYLES,
    PHASE_STATUS_STYLES,
    GanttData,
    ItemStatus,
    Phase,
    PhaseStatus,
    SubItem,
    ZoomMode,
)


def _data(*phase_ids):
    return GanttData(milestones=tuple(Phase(id=pid, title=pid.upper()) for pid in phase_ids))


def test_all_phases_start_expanded():
    state = ExpansionState.all_expanded(_data("a", "b"))

    assert state.is_expanded("a")
    assert state.is_expanded("b")


def test_toggle_flips_single_phase_and_returns_new_value():
    state = ExpansionState.all_expanded(_data("a", "b"))

    collapsed = state.toggle("a")

    assert not collapsed.is_expanded("a")
    assert collapsed.is_expanded("b")
    assert state.is_expanded("a")
    assert collapsed.toggle("a").is_expanded("a")


def test_reconcile_keeps_choices_and_opens_new_phases():
    state = ExpansionState.all_expanded(_data("a", "b", "c")).toggle("b")

    reconciled = state.reconcile(_data("a", "b", "d"))

    assert reconciled.is_expanded("a")
    assert not reconciled.is_expanded("b")
    assert not reconciled.is_expanded("c")
    assert reconciled.is_expanded("d")


def test_reload_resets_to_all_expanded():
    data = _data("a", "b")
    state = ExpansionState.all_expanded(data).toggle("a").toggle("b")

    assert not state.is_expanded("a")
    assert ExpansionState.all_expanded(data).is_expanded("a")


def test_select_mode_breakpoint():
    assert select_mode(COMPACT_BREAKPOINT_PX - 1) is ViewMode.COMPACT
    assert select_mode(COMPACT_BREAKPOINT_PX) is ViewMode.FULL
    assert select_mode(1920) is ViewMode.FULL


def test_compact_entries_group_items_under_phases():
    task = SubItem(id="t1", title="Wireframes", status=ItemStatus.DONE, end_date=dt.date(2024, 1, 10))
    loose = SubItem(id="t2", title="Loose end")
    phase = Phase(
        id="m1",
        title="Design",
        status=PhaseStatus.IN_PROGRESS,
        start_date=dt.date(2024, 1, 1),
        end_date=dt.date(2024, 2, 5),
        progress_percent=40,
        tasks=(task,),
    )

    entries = compact_entries(GanttData(milestones=(phase,), unassigned_tasks=(loose,)))

    assert [(e.item.id, e.parent.id if e.parent else None, e.depth) for e in entries] == [
        ("m1", None, 0),
        ("t1", "m1", 1),
        ("t2", None, 0),
    ]
    assert entries[0].dates == "1 janv. → 5 févr."
    assert entries[1].dates == "10 janv."
    assert entries[2].dates == ""

    text = format_compact(entries)
    assert text.splitlines()[0] == "[In progress] Design  (1 janv. → 5 févr.)  40%"
    assert text.splitlines()[1].startswith("    [Done] Wireframes")


def test_every_status_has_presentation_style():
    assert set(PHASE_STATUS_STYLES) == set(PhaseStatus)
    assert set(ITEM_STATUS_STYLES) == set(ItemStatus)
    assert PhaseStatus.DELAYED.style.tier == "warning"
    assert ItemStatus.BLOCKED.style.tier == "danger"


def test_progress_must_be_percentage():
    with pytest.raises(ValueError):
        Phase(id="m", title="M", progress_percent=101)


@pytest.mark.parametrize(
    "text,mode",
    [("days", ZoomMode.DAYS), ("Week", ZoomMode.WEEKS), ("months", ZoomMode.MONTHS), ("quarters", ZoomMode.MONTHS)],
)
def test_zoom_mode_parse(text, mode):
    assert ZoomMode.parse(text) is mode


def test_zoom_mode_parse_rejects_unknown():
    with pytest.raises(ValueError):
        ZoomMode.parse("years")


def test_package_exports_engine_api_without_helpers():
    import roadmap_timeline

    assert roadmap_timeline.ResponsiveSelector is not None
    assert roadmap_timeline.build_layout is not None
    assert not hasattr(roadmap_timeline, "week_number")
    assert not hasattr(roadmap_timeline, "days_between")
