import os
import signal
import subprocess

from typing import Dict, List, Optional  # noqa


class OSUtils(object):
    def subdirectories(self, path):
        # type: (str) -> List[str]
        """Return the names of the real directories directly under ``path``.

        Symlinks are never reported, even when they point to a directory.
        Raises ``OSError`` if ``path`` cannot be listed.
        """
        with os.scandir(path) as entries:
            return [entry.name for entry in entries
                    if entry.is_dir(follow_symlinks=False)]

    def run(self, command, env=None):
        # type: (List[str], Optional[Dict[str, str]]) -> int
        return subprocess.call(command, env=env)

    def popen(self, command, env=None):
        # type: (List[str], Optional[Dict[str, str]]) -> subprocess.Popen
        return subprocess.Popen(command, env=env)

    def kill(self, pid):
        # type: (int) -> None
        os.kill(pid, signal.SIGKILL)
