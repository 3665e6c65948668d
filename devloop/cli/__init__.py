import logging
import os
import signal

import click

from devloop.cli.reloader import LifecycleController
from devloop.supervisor import ProcessSupervisor
from devloop.target import TargetProgram
from devloop.watcher.eventbased import WatchdogFileWatcher
from devloop.watcher.shared import WatcherUnavailableError

from typing import Sequence  # noqa


CONTEXT_SETTINGS = dict(
    help_option_names=['-h', '--help'],
    ignore_unknown_options=True,
    allow_interspersed_args=False,
)
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(message)s'


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option('--dir', 'root', default=os.getcwd,
              type=click.Path(file_okay=False, resolve_path=True),
              help='Directory to watch (default: current directory).')
@click.argument('target')
@click.argument('args', nargs=-1, type=click.UNPROCESSED)
def main(root, target, args):
    # type: (str, str, Sequence[str]) -> None
    """Rebuild and restart TARGET whenever a file under --dir changes.

    TARGET is a Python file, a Python package directory or an executable.
    Any ARGS are passed through to it. Stop with Ctrl-C.
    """
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    supervisor = ProcessSupervisor(TargetProgram(target, args))
    controller = LifecycleController(WatchdogFileWatcher(), supervisor)
    signal.signal(signal.SIGINT, controller.request_shutdown)
    try:
        controller.main(root)
    except WatcherUnavailableError as e:
        raise click.ClickException('Unable to watch %s: %s' % (root, e))
