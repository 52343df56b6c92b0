"""
Unit tests for build tool process launch and process tree termination.
"""

import sys
import time

import psutil
import pytest

from unitybuildrunner.orchestration import ProcessController
from unitybuildrunner.validation import ProcessLaunchError

SLEEPER = [
    "-c",
    "import subprocess, sys, time\n"
    "child = subprocess.Popen([sys.executable, '-c', 'import time; time.sleep(60)'])\n"
    "time.sleep(60)\n",
]


def wait_until_gone(pid: int, timeout: float = 5.0) -> bool:
    """Wait for a process to disappear or become a zombie."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            if psutil.Process(pid).status() == psutil.STATUS_ZOMBIE:
                return True
        except psutil.NoSuchProcess:
            return True
        time.sleep(0.05)
    return False


def wait_for_children(pid: int, timeout: float = 5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        children = psutil.Process(pid).children(recursive=True)
        if children:
            return children
        time.sleep(0.05)
    return []


@pytest.mark.unit
class TestProcessController:
    """Test cases for ProcessController and ProcessHandle."""

    def test_spawn_and_exit_code(self, temp_dir):
        controller = ProcessController(terminate_timeout=2.0)

        with controller.spawn(sys.executable, ["-c", "import sys; sys.exit(3)"], str(temp_dir)) as handle:
            handle._process.wait(timeout=10)
            assert handle.has_exited
            assert handle.exit_code == 3

    def test_exit_code_before_exit(self, temp_dir):
        controller = ProcessController(terminate_timeout=2.0)

        with controller.spawn(sys.executable, ["-c", "import time; time.sleep(60)"], str(temp_dir)) as handle:
            assert not handle.has_exited
            with pytest.raises(RuntimeError):
                handle.exit_code

    def test_working_directory(self, temp_dir):
        controller = ProcessController()
        script = "open('marker.txt', 'w').close()"

        with controller.spawn(sys.executable, ["-c", script], str(temp_dir)) as handle:
            handle._process.wait(timeout=10)

        assert (temp_dir / "marker.txt").exists()

    def test_spawn_missing_executable(self, temp_dir):
        controller = ProcessController()

        with pytest.raises(ProcessLaunchError) as exc_info:
            controller.spawn(str(temp_dir / "NoSuchUnity"), ["-quit"], str(temp_dir))

        assert exc_info.value.command == str(temp_dir / "NoSuchUnity")

    def test_terminate_kills_process_tree(self, temp_dir):
        controller = ProcessController(terminate_timeout=2.0)
        handle = controller.spawn(sys.executable, SLEEPER, str(temp_dir))
        children = wait_for_children(handle.pid)
        assert children

        handle.terminate(force=True)

        assert handle.has_exited
        for child in children:
            assert wait_until_gone(child.pid)
        handle.release()

    def test_graceful_terminate(self, temp_dir):
        controller = ProcessController(terminate_timeout=2.0)
        handle = controller.spawn(sys.executable, ["-c", "import time; time.sleep(60)"], str(temp_dir))

        handle.terminate(force=False)

        assert handle.has_exited
        handle.release()

    def test_context_exit_kills_running_process(self, temp_dir):
        controller = ProcessController(terminate_timeout=2.0)

        with controller.spawn(sys.executable, ["-c", "import time; time.sleep(60)"], str(temp_dir)) as handle:
            pid = handle.pid

        assert handle.has_exited
        assert wait_until_gone(pid)

    def test_terminate_after_exit_is_noop(self, temp_dir):
        controller = ProcessController()
        handle = controller.spawn(sys.executable, ["-c", "pass"], str(temp_dir))
        handle._process.wait(timeout=10)

        handle.terminate()
        handle.terminate()

        assert handle.exit_code == 0
        handle.release()
        handle.release()
