import logging

from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler
from watchdog.events import FileSystemEvent  # noqa
from watchdog.events import EVENT_TYPE_CREATED
from watchdog.events import EVENT_TYPE_MODIFIED
from watchdog.events import EVENT_TYPE_MOVED

from devloop.watcher.shared import ChangeEvent
from devloop.watcher.shared import Watcher
from devloop.watcher.shared import WatcherUnavailableError

from typing import Any, Callable, Optional  # noqa


LOGGER = logging.getLogger(__name__)

# Deletions and open/close notifications never change what would be built.
MODIFYING_EVENT_TYPES = frozenset([
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_CREATED,
    EVENT_TYPE_MOVED,
])


class WatchDogEventAdapter(FileSystemEventHandler):
    """Filters out watchdog directory events."""
    def __init__(self, watcher):
        # type: (Watcher) -> None
        self._watcher = watcher

    def on_any_event(self, event):
        # type: (FileSystemEvent) -> None
        if event.is_directory:
            return
        self._watcher.notify_change(ChangeEvent(
            path=event.src_path,
            event_type=event.event_type,
            is_modification=event.event_type in MODIFYING_EVENT_TYPES,
        ))


class WatchdogFileWatcher(Watcher):
    """Uses watchdog to watch individual directories for changes."""
    def __init__(self, observer_factory=Observer):
        # type: (Callable[[], Any]) -> None
        super(WatchdogFileWatcher, self).__init__()
        self._observer_factory = observer_factory
        self._observer = None  # type: Optional[Any]
        self._adapter = WatchDogEventAdapter(self)

    def open(self):
        # type: () -> None
        try:
            observer = self._observer_factory()
            observer.start()
        except (OSError, RuntimeError) as e:
            raise WatcherUnavailableError(str(e))
        self._observer = observer

    def subscribe(self, path):
        # type: (str) -> bool
        if self._observer is None:
            raise RuntimeError('subscribe() called before open()')
        try:
            self._observer.schedule(self._adapter, path, recursive=False)
        except OSError as e:
            self.notify_error(e)
            return False
        LOGGER.debug('Subscribed %s', path)
        return True

    def close(self):
        # type: () -> None
        if self._observer is None:
            return
        observer = self._observer
        self._observer = None
        observer.unschedule_all()
        observer.stop()
        observer.join()
