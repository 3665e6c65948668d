"""Turns change notifications into restarts of the supervised process.

Only one restart (stop, build, start) runs at a time. A restart is handed
to its own thread and the coordinator goes straight back to reading
events; anything that qualifies while a restart is in flight is dropped
rather than queued, so a burst of saves produces a single restart and the
next edit after it finishes produces the next one.
"""
import logging
import threading

from devloop.supervisor import ProcessSupervisor  # noqa
from devloop.watcher.shared import ChangeEvent
from devloop.watcher.shared import WatchError

from typing import Any, Optional  # noqa


LOGGER = logging.getLogger(__name__)

_SHUTDOWN = object()


class ChangeCoordinator(object):
    def __init__(self, events, supervisor):
        # type: (Any, ProcessSupervisor) -> None
        self._events = events
        self._supervisor = supervisor
        self._restart_slot = threading.BoundedSemaphore(1)
        self._stopped = threading.Event()
        self._thread = None  # type: Optional[threading.Thread]

    def start(self):
        # type: () -> None
        t = threading.Thread(target=self._run)
        t.daemon = True
        t.start()
        self._thread = t

    def stop(self):
        # type: () -> None
        # In-flight restarts are left to finish (or not) on their own.
        self._stopped.set()
        self._events.put(_SHUTDOWN)

    def join(self, timeout=None):
        # type: (Optional[float]) -> None
        if self._thread is not None:
            self._thread.join(timeout)

    def _run(self):
        # type: () -> None
        while True:
            item = self._events.get()
            if item is _SHUTDOWN or self._stopped.is_set():
                return
            self.handle(item)

    def handle(self, item):
        # type: (Any) -> Optional[threading.Thread]
        """Process one item from the event stream.

        Returns the thread running the restart if one was dispatched.
        """
        if isinstance(item, WatchError):
            LOGGER.error('Watcher error: %s', item.error)
            return None
        if not isinstance(item, ChangeEvent) or not item.is_modification:
            LOGGER.debug('Ignoring %r', item)
            return None
        if not self._restart_slot.acquire(False):
            LOGGER.debug('Restart in progress, dropping change to %s',
                         item.path)
            return None
        LOGGER.info('Change detected: %s', item.path)
        t = threading.Thread(target=self._restart)
        t.daemon = True
        t.start()
        return t

    def _restart(self):
        # type: () -> None
        try:
            self._supervisor.restart()
        except Exception:
            LOGGER.exception('Restart sequence failed')
        finally:
            self._restart_slot.release()
