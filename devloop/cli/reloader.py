import logging
import threading

from devloop.coordinator import ChangeCoordinator
from devloop.supervisor import ProcessSupervisor  # noqa
from devloop.watcher.registrar import DirectoryRegistrar
from devloop.watcher.shared import Watcher  # noqa

from typing import Any, Optional  # noqa


LOGGER = logging.getLogger(__name__)


class LifecycleController(object):
    """Runs the watch loop from startup until an interrupt arrives.

    ``main`` raises ``WatcherUnavailableError`` if the watcher cannot be
    opened. Otherwise it blocks until ``request_shutdown`` is called and
    returns 0. Shutdown does not wait for a restart that is still running.
    """
    def __init__(self, watcher, supervisor, registrar=None):
        # type: (Watcher, ProcessSupervisor, Optional[DirectoryRegistrar]) -> None
        self._watcher = watcher
        self._supervisor = supervisor
        if registrar is None:
            registrar = DirectoryRegistrar(watcher)
        self._registrar = registrar
        self._shutdown = threading.Event()
        self.coordinator = None  # type: Optional[ChangeCoordinator]

    def request_shutdown(self, *args):
        # type: (Any) -> None
        # Signature allows use as a signal handler.
        self._shutdown.set()

    def main(self, root):
        # type: (str) -> int
        LOGGER.info('Starting watcher')
        self._watcher.open()
        self._supervisor.start()
        coordinator = ChangeCoordinator(self._watcher.events, self._supervisor)
        self.coordinator = coordinator
        coordinator.start()
        watched = self._registrar.register(root)
        LOGGER.info('Watching directory: %s (%s directories)', root, watched)
        self._shutdown.wait()
        LOGGER.info('Shutting down watcher.')
        self._watcher.close()
        coordinator.stop()
        LOGGER.info('Quit watcher.')
        return 0
