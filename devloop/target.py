import os
import sys
import tempfile

from typing import Dict, List, Optional, Sequence  # noqa


PYCACHE_DIRNAME = 'devloop-pycache'


class TargetProgram(object):
    """The program being rebuilt and restarted.

    A ``.py`` file or a directory is treated as Python source: it is
    byte-compiled as the build step and then run with the current
    interpreter. Anything else is assumed to be a ready-to-run executable
    and has no build step.

    Python targets are given a bytecode cache outside the watched tree,
    otherwise writing ``__pycache__`` entries would itself look like a
    source change and restart the program again.
    """
    def __init__(self, program, args=(), python=None, environ=None):
        # type: (str, Sequence[str], Optional[str], Optional[Dict[str, str]]) -> None
        self.program = program
        self.args = list(args)
        if python is None:
            python = sys.executable
        self._python = python
        if environ is None:
            environ = dict(os.environ)
        self._environ = environ

    @property
    def is_python(self):
        # type: () -> bool
        return self.program.endswith('.py') or os.path.isdir(self.program)

    @property
    def build_command(self):
        # type: () -> Optional[List[str]]
        if os.path.isdir(self.program):
            return [self._python, '-m', 'compileall', '-q', self.program]
        if self.program.endswith('.py'):
            return [self._python, '-m', 'py_compile', self.program]
        return None

    @property
    def run_command(self):
        # type: () -> List[str]
        if self.is_python:
            return [self._python, self.program] + self.args
        return [self.program] + self.args

    @property
    def env(self):
        # type: () -> Optional[Dict[str, str]]
        if not self.is_python:
            return None
        env = dict(self._environ)
        env['PYTHONPYCACHEPREFIX'] = os.path.join(
            tempfile.gettempdir(), PYCACHE_DIRNAME)
        return env
