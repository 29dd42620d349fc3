"""probedash Textual TUI app.

Launch with: python -m probedash
"""

from __future__ import annotations

import logging

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import ContentSwitcher, Footer, Header, Label, Sparkline, Static

from .engine import DashboardEngine
from .events import Key, ProbeFailed, TabKind
from .exceptions import UnconfiguredSourceError
from .poller import PollerGroup
from .tabs import dump_lines

logger = logging.getLogger(__name__)

FRAME_INTERVAL = 0.25

PANE_IDS = {
    TabKind.FIBERS: "fibers-pane",
    TabKind.POOL: "pool-pane",
    TabKind.ACTORS: "actors-pane",
}
EMPTY_PANE_ID = "empty-pane"


# ---------------------------------------------------------------------------
# Rendering helpers (pure, engine state in, rich Text out)
# ---------------------------------------------------------------------------

def render_tab_bar(titles: list[str], active: int) -> Text:
    text = Text()
    for i, title in enumerate(titles):
        style = "bold black on cyan" if i == active else "cyan"
        text.append(f" {title} ", style=style)
        text.append(" ")
    return text


def render_selection(items: list[str], selected: int | None, height: int) -> Text:
    """Render the window of ``items`` that keeps ``selected`` visible."""
    text = Text(no_wrap=True, overflow="ellipsis")
    if not items:
        text.append("(no data yet)", style="dim")
        return text
    height = max(1, height)
    start = 0
    if selected is not None and selected >= height:
        start = selected - height + 1
    for i, item in enumerate(items[start:start + height], start=start):
        if i > start:
            text.append("\n")
        if i == selected:
            text.append(f"> {item}", style="bold reverse")
        else:
            text.append(f"  {item}")
    return text


def render_dump(dump: str, offset: int, height: int) -> str:
    lines = dump_lines(dump)
    return "\n".join(lines[offset:offset + max(1, height)])


def ratio(value: int, limit: int) -> str:
    if limit <= 0:
        return f"{value}"
    return f"{value}/{limit} ({100 * value // limit}%)"


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

class ProbeDashboard(App[str | None]):
    """Tabbed view over the dashboard engine.

    A frame timer drains the pollers, applies what arrived, then repaints from
    the engine, so a frame never shows a half-applied snapshot. The app's
    return value is the engine's exit reason.
    """

    TITLE = "probedash"

    DEFAULT_CSS = """
    #tab-bar { height: 1; padding: 0 1; }
    ContentSwitcher { height: 1fr; }
    .list-column { width: 1fr; height: 100%; padding: 0 1; }
    .detail-column { width: 2fr; height: 100%; padding: 0 1; border-left: solid $panel-darken-2; }
    .selection { height: 1fr; }
    .section-header { text-style: bold; color: $accent; }
    Sparkline { height: 3; margin-bottom: 1; }
    #fiber-dump { height: 1fr; }
    #pool-pane { padding: 0 1; }
    """

    BINDINGS = [
        Binding("q", "quit_dashboard", "Quit", show=True),
        Binding("up,k", "nav('up')", "Up", show=True),
        Binding("down,j", "nav('down')", "Down", show=True),
        Binding("left,h", "nav('left')", "Prev tab", show=True),
        Binding("right,l", "nav('right')", "Next tab", show=True),
        Binding("pageup", "nav('page_up')", "Scroll up", show=True),
        Binding("pagedown", "nav('page_down')", "Scroll down", show=True),
    ]

    def __init__(self, engine: DashboardEngine, pollers: PollerGroup, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self.engine = engine
        self.pollers = pollers
        self.title = engine.title
        self._finished = False

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(id="tab-bar")
        kind = self.engine.active_kind
        with ContentSwitcher(initial=PANE_IDS[kind] if kind else EMPTY_PANE_ID):
            if self.engine.fiber_tab is not None:
                with Horizontal(id=PANE_IDS[TabKind.FIBERS]):
                    with Vertical(classes="list-column"):
                        yield Label("FIBERS", classes="section-header")
                        yield Static(id="fiber-list", classes="selection")
                        yield Static(id="fiber-tally")
                        yield Sparkline([], id="fiber-sparkline")
                    with Vertical(classes="detail-column"):
                        yield Label("DUMP", classes="section-header")
                        yield Static(id="fiber-dump")
            if self.engine.pool_tab is not None:
                with Vertical(id=PANE_IDS[TabKind.POOL]):
                    yield Static(id="pool-stats")
                    yield Label("Active threads", classes="section-header")
                    yield Sparkline([], id="pool-threads")
                    yield Label("Queue size", classes="section-header")
                    yield Sparkline([], id="pool-queue")
                    yield Label("Active connections", classes="section-header", id="pool-connections-header")
                    yield Sparkline([], id="pool-connections")
            if self.engine.actor_tab is not None:
                with Horizontal(id=PANE_IDS[TabKind.ACTORS]):
                    with Vertical(classes="list-column"):
                        yield Label("ACTORS", classes="section-header")
                        yield Static(id="actor-list", classes="selection")
                    with Vertical(classes="detail-column"):
                        yield Static(id="actor-detail")
                        yield Label("Actor count", classes="section-header")
                        yield Sparkline([], id="actor-sparkline")
            yield Static("No data sources configured. Press q to quit.", id=EMPTY_PANE_ID)
        yield Footer()

    def on_mount(self) -> None:
        self.pollers.start()
        self._frame()
        self.set_interval(FRAME_INTERVAL, self._frame)

    def on_unmount(self) -> None:
        self.pollers.stop()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def action_nav(self, key: str) -> None:
        self.engine.dispatch(Key(key))
        self._paint()

    def action_quit_dashboard(self) -> None:
        self.engine.quit()
        self._finish()

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------

    def _frame(self) -> None:
        for message in self.pollers.drain():
            if isinstance(message, ProbeFailed):
                self.notify(message.message, title=f"{message.source.value} probe failed",
                            severity="error", timeout=4)
                continue
            try:
                self.engine.apply(message)
            except UnconfiguredSourceError as e:
                logger.exception("Update delivered for an unconfigured source")
                self.engine.quit(f"wiring error: {e}")
                break
        if self.engine.should_quit:
            self._finish()
            return
        self._paint()

    def _finish(self) -> None:
        if self._finished:
            return
        self._finished = True
        self.pollers.stop()
        self.exit(self.engine.exit_reason)

    def _paint(self) -> None:
        engine = self.engine
        self.query_one("#tab-bar", Static).update(render_tab_bar(engine.titles(), engine.tabs.index))
        kind = engine.active_kind
        if kind is None:
            return
        self.query_one(ContentSwitcher).current = PANE_IDS[kind]
        if kind == TabKind.FIBERS:
            self._paint_fibers()
        elif kind == TabKind.POOL:
            self._paint_pool()
        elif kind == TabKind.ACTORS:
            self._paint_actors()

    def _paint_fibers(self) -> None:
        tab = self.engine.fiber_tab
        fiber_list = self.query_one("#fiber-list", Static)
        fiber_list.update(render_selection(tab.fibers.items, tab.fibers.selected, fiber_list.size.height))

        tally = tab.tallies.latest
        if tally is not None:
            self.query_one("#fiber-tally", Static).update(
                f"running {tally.running}  suspended {tally.suspended}  "
                f"finishing {tally.finishing}  done {tally.done}"
            )
        self.query_one("#fiber-sparkline", Sparkline).data = [t.total for t in tab.tallies]

        dump = self.query_one("#fiber-dump", Static)
        dump.update(render_dump(tab.viewer.text, tab.viewer.offset, dump.size.height))

    def _paint_pool(self) -> None:
        tab = self.engine.pool_tab
        latest = tab.metrics.latest
        lines = [
            f"Max threads: {tab.config.max_threads}    Max queue size: {tab.config.max_queue_size}",
        ]
        if latest is not None:
            lines.append(f"Active threads: {ratio(latest.active_threads, tab.config.max_threads)}")
            lines.append(f"Queue size: {ratio(latest.queue_size, tab.config.max_queue_size)}")
        connections = tab.connections.latest
        if tab.has_connections and connections is not None:
            lines.append(
                f"Connections: {connections.active} active, {connections.idle} idle, "
                f"{connections.waiting} waiting, {connections.total} total"
            )
        self.query_one("#pool-stats", Static).update("\n".join(lines))
        self.query_one("#pool-threads", Sparkline).data = [m.active_threads for m in tab.metrics]
        self.query_one("#pool-queue", Sparkline).data = [m.queue_size for m in tab.metrics]
        self.query_one("#pool-connections-header", Label).display = tab.has_connections
        sparkline = self.query_one("#pool-connections", Sparkline)
        sparkline.display = tab.has_connections
        sparkline.data = [c.active for c in tab.connections]

    def _paint_actors(self) -> None:
        tab = self.engine.actor_tab
        actor_list = self.query_one("#actor-list", Static)
        actor_list.update(render_selection(tab.actors.items, tab.actors.selected, actor_list.size.height))

        actor = tab.selected_actor
        detail = "No actor selected."
        if actor is not None:
            parent = actor.parent_id if actor.parent_id is not None else "-"
            detail = f"Name: {actor.name}\nId: {actor.id}\nParent: {parent}"
        self.query_one("#actor-detail", Static).update(detail)
        self.query_one("#actor-sparkline", Sparkline).data = list(tab.counts)
