"""Tests for the per-source tab state and the dump viewer."""

import pytest

from probedash.models import (
    ActorNode,
    ConnectionMetrics,
    Fiber,
    FiberStatus,
    PoolConfig,
    PoolMetrics,
    StatusTally,
)
from probedash.tabs import ActorTreeTab, DumpViewer, FiberTab, PoolTab


@pytest.fixture
def worked_example():
    return [
        Fiber(1, None, FiberStatus.RUNNING, "1"),
        Fiber(2, 1, FiberStatus.SUSPENDED, "2"),
        Fiber(4, None, FiberStatus.DONE, "4"),
    ]


class TestDumpViewer:

    def test_show_resets_offset_and_counts_lines(self):
        viewer = DumpViewer()
        viewer.show("a\nb\nc")
        viewer.scroll_down()
        viewer.show("x\ny")
        assert viewer.offset == 0
        assert viewer.line_count == 2
        assert viewer.text == "x\ny"

    def test_scroll_up_floors_at_zero(self):
        viewer = DumpViewer()
        viewer.show("a\nb")
        viewer.scroll_up()
        assert viewer.offset == 0

    def test_scroll_down_caps_at_line_count(self):
        viewer = DumpViewer()
        viewer.show("a\nb\nc")
        for _ in range(10):
            viewer.scroll_down()
        assert viewer.offset == 3
        viewer.scroll_up()
        assert viewer.offset == 2

    @pytest.mark.parametrize("text, expected", [
        ("a\rb\x0cc", 1),
        ("a\nb\n", 2),
        ("a\r\nb", 2),
        ("a\u2028b\n\nc", 3),
    ])
    def test_counts_newline_separated_lines(self, text, expected):
        viewer = DumpViewer()
        viewer.show(text)
        assert viewer.line_count == expected

    def test_empty_text_cannot_scroll(self):
        viewer = DumpViewer()
        viewer.show("")
        viewer.scroll_down()
        assert viewer.offset == 0
        assert viewer.line_count == 0


class TestFiberTab:
    """Fiber tree replacement, selection and tally history."""

    def test_replace_fiber_dump(self, worked_example):
        tab = FiberTab()
        tab.replace_fiber_dump(worked_example)

        assert tab.dumps == ["1", "2", "4"]
        assert tab.fibers.items == [
            "├─#1   Running",
            "│ └─#2 Suspended",
            "└─#4   Done",
        ]
        assert tab.fibers.selected == 0
        assert tab.selected_dump == "1"

    def test_selection_follows_dump(self, worked_example):
        tab = FiberTab()
        tab.replace_fiber_dump(list(reversed(worked_example)))
        for k in range(len(worked_example)):
            label = tab.fibers.items[tab.fibers.selected]
            assert label.split("#")[1].split()[0] == tab.selected_dump
            assert tab.dumps[k] == tab.selected_dump
            tab.select_next()

    def test_select_previous_wraps_to_last_dump(self, worked_example):
        tab = FiberTab()
        tab.replace_fiber_dump(worked_example)
        tab.select_previous()
        assert tab.fibers.selected == 2
        assert tab.selected_dump == "4"

    def test_selection_change_resets_scroll(self):
        tab = FiberTab()
        tab.replace_fiber_dump([
            Fiber(1, None, FiberStatus.RUNNING, "a\nb\nc"),
            Fiber(2, None, FiberStatus.RUNNING, "d\ne"),
        ])
        tab.scroll_down()
        tab.scroll_down()
        assert tab.viewer.offset == 2
        tab.select_next()
        assert tab.viewer.offset == 0
        assert tab.viewer.line_count == 2

    def test_new_snapshot_resets_selection(self, worked_example):
        tab = FiberTab()
        tab.replace_fiber_dump(worked_example)
        tab.select_next()
        tab.select_next()
        tab.replace_fiber_dump(worked_example)
        assert tab.fibers.selected == 0
        assert tab.selected_dump == "1"

    def test_empty_snapshot(self, worked_example):
        tab = FiberTab()
        tab.replace_fiber_dump(worked_example)
        tab.replace_fiber_dump([])
        assert tab.fibers.selected is None
        assert tab.dumps == []
        assert tab.selected_dump == ""
        tab.select_next()
        tab.select_previous()
        tab.scroll_down()
        assert tab.fibers.selected is None
        assert tab.viewer.offset == 0

    def test_append_tally_counts_statuses(self, worked_example):
        tab = FiberTab()
        tab.append_tally(worked_example + [Fiber(9, None, FiberStatus.RUNNING, "")])
        assert tab.tallies.latest == StatusTally(done=1, suspended=1, running=2, finishing=0)
        assert tab.tallies.latest.total == 4

    def test_tally_history_grows_without_tree_change(self, worked_example):
        tab = FiberTab()
        tab.replace_fiber_dump(worked_example)
        for expected in range(1, 4):
            tab.append_tally(worked_example)
            assert len(tab.tallies) == expected
        assert tab.fibers.items[0] == "├─#1   Running"

    def test_tally_capacity(self, worked_example):
        tab = FiberTab(tally_capacity=2)
        for _ in range(5):
            tab.append_tally(worked_example)
        assert len(tab.tallies) == 2


class TestPoolTab:

    def test_defaults(self):
        tab = PoolTab()
        assert tab.has_connections is False
        assert tab.config == PoolConfig(0, 0)
        assert len(tab.metrics) == 0

    def test_config_is_overwritten(self):
        tab = PoolTab()
        tab.replace_config(PoolConfig(10, 100))
        tab.replace_config(PoolConfig(20, 1000))
        assert tab.config == PoolConfig(20, 1000)

    def test_connections_set_flag(self):
        tab = PoolTab()
        tab.append_metrics(PoolMetrics(1, 0))
        assert tab.has_connections is False
        tab.append_connections(ConnectionMetrics(1, 2, 0, 3))
        assert tab.has_connections is True
        assert tab.connections.latest == ConnectionMetrics(1, 2, 0, 3)

    def test_separate_retention_windows(self):
        tab = PoolTab(metrics_capacity=2, connections_capacity=4)
        for i in range(6):
            tab.append_metrics(PoolMetrics(i, 0))
            tab.append_connections(ConnectionMetrics(i, 0, 0, i))
        assert [m.active_threads for m in tab.metrics] == [4, 5]
        assert [c.active for c in tab.connections] == [2, 3, 4, 5]


class TestActorTreeTab:

    def test_replace_tree_renders_without_status(self):
        tab = ActorTreeTab()
        tab.replace_tree([
            ActorNode(2, 1, "worker"),
            ActorNode(1, None, "user"),
            ActorNode(3, None, "system"),
        ])
        assert tab.actors.items == ["├─#user", "│ └─#worker", "└─#system"]
        assert tab.actors.selected == 0
        assert tab.selected_actor.name == "user"

    def test_navigation_wraps(self):
        tab = ActorTreeTab()
        tab.replace_tree([ActorNode(1, None, "a"), ActorNode(2, None, "b")])
        tab.select_previous()
        assert tab.selected_actor.name == "b"
        tab.select_next()
        assert tab.selected_actor.name == "a"

    def test_navigation_on_empty_tree(self):
        tab = ActorTreeTab()
        tab.select_next()
        tab.select_previous()
        assert tab.actors.selected is None
        assert tab.selected_actor is None

    def test_counts_history(self):
        tab = ActorTreeTab(count_capacity=3)
        for count in [5, 6, 7, 8]:
            tab.append_count(count)
        assert list(tab.counts) == [6, 7, 8]
