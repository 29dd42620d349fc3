"""Background polling: one worker thread and one bounded channel per source.

Workers hand immutable snapshot updates to the control loop through their
channel; the control loop drains every channel between frames. Nothing else is
shared between threads.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, Union

from .events import ProbeFailed, SnapshotUpdate, TabKind
from .exceptions import ProbeError

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL_SIZE = 64

Message = Union[SnapshotUpdate, ProbeFailed]


class SourcePoller:
    """Calls ``poll`` every ``interval`` seconds on a daemon thread."""

    def __init__(
        self,
        source: TabKind,
        poll: Callable[[], list[SnapshotUpdate]],
        interval: float,
        stop: threading.Event | None = None,
        channel_size: int = DEFAULT_CHANNEL_SIZE,
    ) -> None:
        self.source = source
        self._poll = poll
        self.interval = interval
        self.stop_event = stop or threading.Event()
        self.channel: queue.Queue[Message] = queue.Queue(maxsize=channel_size)
        self._thread = threading.Thread(
            target=self._run, name=f"poller-{source.value}", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self.stop_event.set()

    def join(self, timeout: float | None = None) -> None:
        if self._thread.is_alive():
            self._thread.join(timeout)

    @property
    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def _run(self) -> None:
        """Poll immediately, then once per interval until stopped."""
        while not self.stop_event.is_set():
            self.poll_once()
            self.stop_event.wait(timeout=self.interval)

    def poll_once(self) -> None:
        try:
            updates = self._poll()
        except ProbeError as e:
            logger.warning("%s probe failed: %s", self.source.value, e)
            self._send(ProbeFailed(self.source, str(e)))
            return
        except Exception as e:
            logger.exception("%s probe crashed", self.source.value)
            self._send(ProbeFailed(self.source, f"{type(e).__name__}: {e}"))
            return
        for update in updates:
            self._send(update)

    def _send(self, message: Message) -> None:
        if self.stop_event.is_set():
            return
        try:
            self.channel.put_nowait(message)
        except queue.Full:
            logger.debug("%s channel full, dropping %s", self.source.value, type(message).__name__)

    def drain(self) -> list[Message]:
        """Everything queued right now, without blocking."""
        messages: list[Message] = []
        while True:
            try:
                messages.append(self.channel.get_nowait())
            except queue.Empty:
                return messages


class PollerGroup:
    """The pollers of all configured sources, sharing one stop signal."""

    def __init__(self) -> None:
        self.stop_event = threading.Event()
        self.pollers: list[SourcePoller] = []

    def add(self, source: TabKind, poll: Callable[[], list[SnapshotUpdate]], interval: float) -> SourcePoller:
        poller = SourcePoller(source, poll, interval, stop=self.stop_event)
        self.pollers.append(poller)
        return poller

    def start(self) -> None:
        for poller in self.pollers:
            poller.start()

    def stop(self, timeout: float = 1.0) -> None:
        self.stop_event.set()
        for poller in self.pollers:
            poller.join(timeout)

    def drain(self) -> list[Message]:
        """Drain every channel, sources in the order they were added."""
        messages: list[Message] = []
        for poller in self.pollers:
            messages.extend(poller.drain())
        return messages
