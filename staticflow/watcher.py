"""
Source tree watching with serialized, coalesced rebuilds.

A watchdog handler (running in the observer's thread) only produces
`ChangeEvent` objects onto a queue; `Watcher.dispatch_pending` is the single
consumer, announcing every event and triggering one rebuild per batch.
"""

import os
import queue
import time
from collections import namedtuple
from typing import TYPE_CHECKING, Callable, Optional

from invoke.exceptions import ThreadException
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.polling import PollingObserver

from .util import debug

if TYPE_CHECKING:
    from .server import StaticServer


#: A single filesystem change: ``kind`` is one of `KINDS`.
ChangeEvent = namedtuple("ChangeEvent", "path kind")

KINDS = ("created", "modified", "deleted", "moved")


class ChangeHandler(FileSystemEventHandler):
    """
    Turn file (not directory) events into `ChangeEvent` queue entries.
    """

    def __init__(self, events: "queue.Queue[ChangeEvent]") -> None:
        super().__init__()
        self.events = events

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in KINDS:
            return
        path = event.src_path
        if isinstance(path, bytes):
            path = os.fsdecode(path)
        self.events.put(ChangeEvent(path, event.event_type))


class Watcher:
    """
    Watch ``root`` and call ``rebuild()`` after changes.

    :param root: Directory to watch, recursively.

    :param rebuild: Zero-argument callable run once per batch of events.

    :param float debounce:
        Seconds to wait after the first event of a batch for more events to
        arrive before rebuilding.

    :param bool polling:
        Use watchdog's `PollingObserver` (stat-based, works everywhere)
        instead of the platform's native observer.

    :param float poll_interval: Polling observer scan interval, in seconds.
    """

    def __init__(
        self,
        root: str,
        rebuild: Callable[[], object],
        debounce: float = 0.1,
        polling: bool = False,
        poll_interval: float = 1.0,
    ) -> None:
        self.root = os.path.abspath(root)
        self.rebuild = rebuild
        self.debounce = debounce
        self.polling = polling
        self.poll_interval = poll_interval
        self.events: "queue.Queue[ChangeEvent]" = queue.Queue()
        self.handler = ChangeHandler(self.events)
        self.observer = None
        self.rebuilds = 0

    def __repr__(self) -> str:
        return "<{} {!r}>".format(self.__class__.__name__, self.root)

    def start(self) -> None:
        if self.polling:
            observer = PollingObserver(timeout=self.poll_interval)
        else:
            observer = Observer()
        observer.schedule(self.handler, self.root, recursive=True)
        observer.start()
        self.observer = observer
        debug("Watching {!r} with {!r}".format(self.root, observer))

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        if self.observer is None:
            return
        self.observer.stop()
        self.observer.join(timeout)
        self.observer = None
        debug("Stopped watching {!r}".format(self.root))

    def announce(self, event: ChangeEvent) -> None:
        print(
            "File {} was {}, running tasks...".format(event.path, event.kind),
            flush=True,
        )

    def dispatch_pending(self, timeout: Optional[float] = None) -> int:
        """
        Wait for changes and handle one batch of them.

        Blocks up to ``timeout`` seconds (forever if ``None``) for a first
        event, waits out the debounce window, then announces every queued
        event and runs a single rebuild. Events showing up during that rebuild
        stay queued for the next batch.

        :returns: The number of events handled (``0`` on timeout).
        """
        try:
            event = self.events.get(timeout=timeout)
        except queue.Empty:
            return 0
        self.announce(event)
        count = 1
        if self.debounce:
            time.sleep(self.debounce)
        while True:
            try:
                event = self.events.get_nowait()
            except queue.Empty:
                break
            self.announce(event)
            count += 1
        debug("Rebuilding after {} change(s)".format(count))
        self.rebuild()
        self.rebuilds += 1
        return count

    def run(
        self,
        server: Optional["StaticServer"] = None,
        should_stop: Optional[Callable[[], bool]] = None,
        poll: float = 0.5,
    ) -> None:
        """
        Start watching and dispatch batches until told to stop.

        Stops when ``should_stop()`` returns true, or raises
        `.ThreadException` if ``server``'s thread died. Exceptions from
        ``rebuild`` propagate (after the observer is stopped).
        """
        self.start()
        try:
            while not (should_stop and should_stop()):
                if server is not None and server.is_dead:
                    raise ThreadException([server.exception()])
                self.dispatch_pending(timeout=poll)
        finally:
            self.stop()
