import queue

from typing import Any  # noqa


class WatcherUnavailableError(Exception):
    """The underlying OS watch facility could not be set up."""


class ChangeEvent(object):
    def __init__(self, path, event_type, is_modification):
        # type: (str, str, bool) -> None
        self.path = path
        self.event_type = event_type
        self.is_modification = is_modification

    def __repr__(self):
        # type: () -> str
        return 'ChangeEvent(%r, %r, is_modification=%r)' % (
            self.path, self.event_type, self.is_modification)


class WatchError(object):
    def __init__(self, error):
        # type: (Exception) -> None
        self.error = error

    def __repr__(self):
        # type: () -> str
        return 'WatchError(%r)' % (self.error,)


class Watcher(object):
    """Event source delivering ChangeEvent and WatchError items.

    Everything a watcher observes ends up on ``self.events`` in the order
    it was noticed.
    """
    def __init__(self):
        # type: () -> None
        self.events = queue.Queue()  # type: queue.Queue

    def open(self):
        # type: () -> None
        raise NotImplementedError('open')

    def subscribe(self, path):
        # type: (str) -> bool
        raise NotImplementedError('subscribe')

    def close(self):
        # type: () -> None
        raise NotImplementedError('close')

    def notify_change(self, event):
        # type: (ChangeEvent) -> None
        self.events.put(event)

    def notify_error(self, error):
        # type: (Exception) -> None
        self.events.put(WatchError(error))
