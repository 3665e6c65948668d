import logging

from devloop.target import TargetProgram  # noqa
from devloop.utils import OSUtils

from typing import Optional  # noqa


LOGGER = logging.getLogger(__name__)


class ProcessSupervisor(object):
    """Owns the one child process the reload loop keeps running.

    ``pid`` is the id of the most recently launched child, or 0 when none
    is tracked. Callers must not run two restarts at once; the supervisor
    does no locking of its own.
    """
    def __init__(self, target, osutils=None):
        # type: (TargetProgram, Optional[OSUtils]) -> None
        self._target = target
        if osutils is None:
            osutils = OSUtils()
        self._osutils = osutils
        self.pid = 0

    def start(self):
        # type: () -> None
        if not self._build():
            self.pid = 0
            return
        command = self._target.run_command
        LOGGER.info('Starting app %s', self._target.program)
        try:
            process = self._osutils.popen(command, env=self._target.env)
        except OSError as e:
            LOGGER.error('Command %r failed, with error %s', command, e)
            self.pid = 0
            return
        self.pid = process.pid
        LOGGER.debug('Started process id %s', self.pid)

    def stop(self):
        # type: () -> None
        if self.pid <= 0:
            return
        LOGGER.info('Killing old process id %s', self.pid)
        try:
            self._osutils.kill(self.pid)
        except OSError as e:
            LOGGER.warning('Unable to kill process %s: %s', self.pid, e)
        self.pid = 0

    def restart(self):
        # type: () -> None
        self.stop()
        self.start()

    def _build(self):
        # type: () -> bool
        command = self._target.build_command
        if command is None:
            return True
        LOGGER.info('Building %s', self._target.program)
        try:
            rc = self._osutils.run(command, env=self._target.env)
        except OSError as e:
            LOGGER.error('Build command %r failed, with error %s', command, e)
            return False
        if rc != 0:
            LOGGER.error('Build of %s failed with exit status %s',
                         self._target.program, rc)
            return False
        return True
