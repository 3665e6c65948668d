import logging
import os

from devloop.utils import OSUtils
from devloop.watcher.shared import Watcher  # noqa

from typing import Optional  # noqa


LOGGER = logging.getLogger(__name__)

HIDDEN_PREFIX = '.'


def is_hidden(name):
    # type: (str) -> bool
    """Return True if a single path component names a hidden entry.

    Only the component itself is checked, never a full path, so
    ``is_hidden('/home/me/.config')`` is False.
    """
    return name.startswith(HIDDEN_PREFIX)


class DirectoryRegistrar(object):
    """Subscribes a directory tree with a watcher, one directory at a time.

    Hidden directories and symlinks are not descended into. A directory
    that cannot be listed is logged and skipped along with everything
    below it.
    """
    def __init__(self, watcher, osutils=None):
        # type: (Watcher, Optional[OSUtils]) -> None
        self._watcher = watcher
        if osutils is None:
            osutils = OSUtils()
        self._osutils = osutils

    def register(self, root):
        # type: (str) -> int
        """Register ``root`` and its visible subdirectories.

        Returns the number of directories actually subscribed, including
        the root itself.
        """
        try:
            names = self._osutils.subdirectories(root)
        except OSError as e:
            LOGGER.error('Unable to list directory %s: %s', root, e)
            return 0
        watched = 0
        if self._watcher.subscribe(root):
            watched += 1
        for name in names:
            if is_hidden(name):
                continue
            watched += self.register(os.path.join(root, name))
        return watched
