import os
import sys
import threading
import time

import pytest
from click.testing import CliRunner

from devloop import cli
from devloop.cli.reloader import LifecycleController
from devloop.supervisor import ProcessSupervisor
from devloop.target import TargetProgram
from devloop.watcher.eventbased import WatchdogFileWatcher
from devloop.watcher.shared import WatcherUnavailableError


DEFAULT_DELAY = 0.5
MAX_TIMEOUT = 10.0

SLEEPER = 'import time\ntime.sleep(30)\n'


def modify_file_after_n_seconds(filename, contents, delay=DEFAULT_DELAY):
    t = threading.Timer(delay, function=modify_file, args=(filename, contents))
    t.daemon = True
    t.start()


def modify_file(filename, contents):
    with open(filename, 'w') as f:
        f.write(contents)


def wait_for(predicate, timeout=MAX_TIMEOUT):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.05)
    return False


def kill_quietly(pid):
    if pid > 0:
        try:
            os.kill(pid, 9)
        except OSError:
            pass


@pytest.fixture
def app_dir(tmpdir):
    tmpdir.join('app.py').write(SLEEPER)
    tmpdir.mkdir('subdir')
    tmpdir.mkdir('.git')
    return tmpdir


def start_controller(root, program):
    supervisor = ProcessSupervisor(TargetProgram(program))
    controller = LifecycleController(WatchdogFileWatcher(), supervisor)
    result = {}

    def target():
        result['rc'] = controller.main(root)
    t = threading.Thread(target=target)
    t.daemon = True
    t.start()
    return controller, supervisor, t, result


def assert_restart_happens(app_dir, when_modified_file):
    program = app_dir.join('app.py').strpath
    controller, supervisor, t, result = start_controller(
        app_dir.strpath, program)
    pids = set()
    try:
        assert wait_for(lambda: supervisor.pid > 0)
        first_pid = supervisor.pid
        pids.add(first_pid)
        modify_file_after_n_seconds(when_modified_file, 'contents')
        assert wait_for(lambda: supervisor.pid not in (0, first_pid))
        pids.add(supervisor.pid)
    finally:
        controller.request_shutdown()
        t.join(MAX_TIMEOUT)
        pids.add(supervisor.pid)
        for pid in pids:
            kill_quietly(pid)
    assert result['rc'] == 0


class TestWatchdogReload(object):
    def test_can_restart_when_file_modified(self, app_dir):
        assert_restart_happens(
            app_dir, when_modified_file=app_dir.join('app.py').strpath)

    def test_can_restart_when_subdir_file_created(self, app_dir):
        assert_restart_happens(
            app_dir,
            when_modified_file=app_dir.join('subdir', 'foo.py').strpath)

    def test_hidden_dir_changes_do_not_restart(self, app_dir):
        program = app_dir.join('app.py').strpath
        controller, supervisor, t, result = start_controller(
            app_dir.strpath, program)
        first_pid = 0
        try:
            assert wait_for(lambda: supervisor.pid > 0)
            first_pid = supervisor.pid
            modify_file(app_dir.join('.git', 'HEAD').strpath, 'ref')
            time.sleep(1.0)
            assert supervisor.pid == first_pid
        finally:
            controller.request_shutdown()
            t.join(MAX_TIMEOUT)
            kill_quietly(supervisor.pid)
            kill_quietly(first_pid)
        assert result['rc'] == 0

    def test_shutdown_without_changes(self, app_dir):
        program = app_dir.join('app.py').strpath
        controller, supervisor, t, result = start_controller(
            app_dir.strpath, program)
        try:
            assert wait_for(lambda: supervisor.pid > 0)
        finally:
            controller.request_shutdown()
            t.join(MAX_TIMEOUT)
            kill_quietly(supervisor.pid)
        assert not t.is_alive()
        assert result['rc'] == 0

    def test_bad_command_recovers_on_next_change(self, app_dir):
        missing = app_dir.join('not-there').strpath
        controller, supervisor, t, result = start_controller(
            app_dir.strpath, missing)
        try:
            # The initial launch has failed by the time the coordinator exists.
            assert wait_for(lambda: controller.coordinator is not None)
            assert supervisor.pid == 0
            time.sleep(DEFAULT_DELAY)
            # Build the executable outside the watched directories and move
            # it in, so it appears with a single event.
            exe = app_dir.join('.git', 'not-there')
            exe.write('#!%s\nimport time\ntime.sleep(30)\n' % sys.executable)
            exe.chmod(0o755)
            os.rename(exe.strpath, missing)
            assert wait_for(lambda: supervisor.pid > 0)
        finally:
            controller.request_shutdown()
            t.join(MAX_TIMEOUT)
            kill_quietly(supervisor.pid)
        assert result['rc'] == 0


def test_cli_reports_unavailable_watcher(monkeypatch, tmpdir):
    def fail(self, root):
        raise WatcherUnavailableError('inotify unavailable')
    monkeypatch.setattr(LifecycleController, 'main', fail)
    monkeypatch.setattr(cli.signal, 'signal', lambda *args: None)

    runner = CliRunner()
    result = runner.invoke(cli.main, ['--dir', tmpdir.strpath, 'app.py'])

    assert result.exit_code == 1
    assert 'Unable to watch' in result.output
    assert 'inotify unavailable' in result.output


def test_cli_passes_arguments_through(monkeypatch, tmpdir):
    seen = {}

    def fake_main(self, root):
        seen['root'] = root
        seen['target'] = self._supervisor._target
        return 0
    monkeypatch.setattr(LifecycleController, 'main', fake_main)
    monkeypatch.setattr(cli.signal, 'signal', lambda *args: None)

    runner = CliRunner()
    result = runner.invoke(
        cli.main, ['--dir', tmpdir.strpath, './server', '--port', '8000'])

    assert result.exit_code == 0
    assert seen['root'] == os.path.realpath(tmpdir.strpath)
    assert seen['target'].program == './server'
    assert seen['target'].args == ['--port', '8000']


def test_cli_defaults_to_current_directory(monkeypatch, tmpdir):
    seen = {}

    def fake_main(self, root):
        seen['root'] = root
        return 0
    monkeypatch.setattr(LifecycleController, 'main', fake_main)
    monkeypatch.setattr(cli.signal, 'signal', lambda *args: None)
    monkeypatch.chdir(tmpdir)

    result = CliRunner().invoke(cli.main, ['./server'])

    assert result.exit_code == 0
    assert seen['root'] == os.getcwd()
