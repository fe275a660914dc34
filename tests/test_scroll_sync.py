from roadmap_timeline.scroll_sync import ScrollSynchronizer, SyncState


class FakePane:
    """Scroll region that fires its listeners synchronously, like a DOM element."""

    def __init__(self, offset=0.0):
        self.offset = offset
        self.listeners = []
        self.writes = 0

    def get_offset(self):
        return self.offset

    def set_offset(self, offset):
        self.writes += 1
        self.scroll_to(offset)

    def scroll_to(self, offset):
        self.offset = offset
        for callback in list(self.listeners):
            callback()

    def on_scroll(self, callback):
        self.listeners.append(callback)
        return lambda: self.listeners.remove(callback)


def test_list_scroll_moves_timeline():
    list_pane, timeline_pane = FakePane(), FakePane()

    with ScrollSynchronizer(list_pane, timeline_pane):
        list_pane.scroll_to(120)

    assert timeline_pane.offset == 120
    assert timeline_pane.writes == 1
    assert list_pane.writes == 0


def test_timeline_scroll_moves_list():
    list_pane, timeline_pane = FakePane(), FakePane()

    with ScrollSynchronizer(list_pane, timeline_pane):
        timeline_pane.scroll_to(64)

    assert list_pane.offset == 64


def test_round_trip_does_not_drift_or_loop():
    list_pane, timeline_pane = FakePane(), FakePane()
    sync = ScrollSynchronizer(list_pane, timeline_pane).attach()

    list_pane.scroll_to(300)
    sync.on_timeline_scroll()

    assert list_pane.offset == timeline_pane.offset == 300
    assert list_pane.writes == 0
    assert timeline_pane.writes == 1
    assert sync.state is SyncState.IDLE


def test_deferred_echo_is_a_no_op():
    list_pane, timeline_pane = FakePane(), FakePane()
    sync = ScrollSynchronizer(list_pane, timeline_pane)

    list_pane.offset = 42
    sync.on_list_scroll()
    # The toolkit delivers the timeline's echo later, once the sync is done.
    sync.on_timeline_scroll()

    assert list_pane.offset == timeline_pane.offset == 42
    assert list_pane.writes == 0


def test_attach_registers_once_and_detach_removes_listeners():
    list_pane, timeline_pane = FakePane(), FakePane()
    sync = ScrollSynchronizer(list_pane, timeline_pane)

    sync.attach()
    sync.attach()
    assert len(list_pane.listeners) == 1
    assert len(timeline_pane.listeners) == 1

    sync.detach()
    assert list_pane.listeners == []
    assert timeline_pane.listeners == []
    assert not sync.attached

    list_pane.scroll_to(10)
    assert timeline_pane.offset == 0


def test_repeated_mounts_do_not_duplicate_writes():
    list_pane, timeline_pane = FakePane(), FakePane()

    for _ in range(3):
        with ScrollSynchronizer(list_pane, timeline_pane):
            pass

    with ScrollSynchronizer(list_pane, timeline_pane):
        list_pane.scroll_to(5)

    assert timeline_pane.writes == 1
