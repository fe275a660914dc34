from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Protocol

logger = logging.getLogger(__name__)

Unsubscribe = Callable[[], None]


class ScrollRegion(Protocol):
    """A vertically scrollable pane, whatever toolkit draws it."""

    def get_offset(self) -> float: ...

    def set_offset(self, offset: float) -> None:
        """Jump to `offset` immediately; programmatic scrolls must not animate."""
        ...

    def on_scroll(self, callback: Callable[[], None]) -> Unsubscribe: ...


class SyncState(Enum):
    IDLE = "idle"
    SYNCING_FROM_LIST = "syncing_from_list"
    SYNCING_FROM_TIMELINE = "syncing_from_timeline"


class ScrollSynchronizer:
    """
    Keeps the list pane and the timeline pane at the same vertical offset.

    Each scroll event copies the source offset to the other pane. The write
    happens only when offsets differ, and events arriving while a copy is in
    flight are echoes of that copy, so a round-trip settles instead of looping.
    """

    def __init__(self, list_pane: ScrollRegion, timeline_pane: ScrollRegion) -> None:
        self.list_pane = list_pane
        self.timeline_pane = timeline_pane
        self.state = SyncState.IDLE
        self._unsubscribers: list[Unsubscribe] = []

    @property
    def attached(self) -> bool:
        return bool(self._unsubscribers)

    def attach(self) -> "ScrollSynchronizer":
        if self.attached:
            return self
        self._unsubscribers = [
            self.list_pane.on_scroll(self.on_list_scroll),
            self.timeline_pane.on_scroll(self.on_timeline_scroll),
        ]
        logger.debug("scroll sync attached")
        return self

    def detach(self) -> None:
        while self._unsubscribers:
            self._unsubscribers.pop()()
        self.state = SyncState.IDLE
        logger.debug("scroll sync detached")

    def __enter__(self) -> "ScrollSynchronizer":
        return self.attach()

    def __exit__(self, *exc_info) -> None:
        self.detach()

    def on_list_scroll(self) -> None:
        self._sync(SyncState.SYNCING_FROM_LIST, self.list_pane, self.timeline_pane)

    def on_timeline_scroll(self) -> None:
        self._sync(SyncState.SYNCING_FROM_TIMELINE, self.timeline_pane, self.list_pane)

    def _sync(self, syncing: SyncState, source: ScrollRegion, target: ScrollRegion) -> None:
        if self.state is not SyncState.IDLE:
            return
        self.state = syncing
        try:
            offset = source.get_offset()
            if target.get_offset() != offset:
                target.set_offset(offset)
        finally:
            self.state = SyncState.IDLE
