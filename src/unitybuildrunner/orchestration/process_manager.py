"""
Process management for the orchestration module.

This module handles the build tool's process lifecycle: launching it,
observing its exit, and terminating it together with every descendant.
"""

import logging
import os
import signal
import subprocess
from typing import List, Optional, Sequence

import psutil

from ..validation import ProcessLaunchError

logger = logging.getLogger(__name__)

_IS_POSIX = os.name == "posix"


class ProcessHandle:
    """
    A launched build tool process.

    Use as a context manager to guarantee the process tree is killed when
    the supervising code leaves, whichever way it leaves.
    """

    def __init__(self, process: subprocess.Popen, command: str, terminate_timeout: float = 5.0):
        self._process = process
        self.command = command
        self.terminate_timeout = terminate_timeout
        self._released = False

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def has_exited(self) -> bool:
        return self._process.poll() is not None

    @property
    def exit_code(self) -> int:
        """
        Exit code of the process.

        Raises:
            RuntimeError: If the process is still running
        """
        code = self._process.poll()
        if code is None:
            raise RuntimeError(f"Process {self.pid} has not exited yet")
        return code

    def terminate(self, force: bool = True) -> None:
        """
        Kill the process and all of its descendants.

        Descendants are collected before the parent is signalled, since they
        are re-parented once it dies. Errors are logged, never raised.

        Args:
            force: Skip the graceful SIGTERM phase and kill immediately
        """
        if self.has_exited:
            logger.debug(f"Process {self.pid} already exited, nothing to terminate")
            return

        children = self._get_process_children()
        phases = [("force_kill", True)] if force else [("graceful", False), ("force_kill", True)]

        for phase_name, phase_force in phases:
            try:
                logger.debug(f"Phase {phase_name}: terminating PID {self.pid} and {len(children)} children")
                children = self._apply_termination_signal(children, phase_force)
                self._signal_parent(phase_force)
                children = self._wait_for_termination(children)
                parent_stopped = self._wait_for_parent()

                if parent_stopped and not children:
                    logger.debug(f"All processes terminated in phase {phase_name}")
                    break
                logger.warning(f"Phase {phase_name}: {len(children) + (0 if parent_stopped else 1)} processes still alive")
            except Exception as e:
                logger.error(f"Error in termination phase {phase_name}: {e}")
                continue
        else:
            self._handle_stubborn_processes(children)

        self._cleanup_process_group()
        logger.info(f"Termination completed for {self.command} (PID: {self.pid})")

    def release(self) -> None:
        """Drop the operating system resources held for the process."""
        if self._released:
            return
        self._released = True
        for stream in (self._process.stdin, self._process.stdout, self._process.stderr):
            if stream is not None:
                stream.close()

    def __enter__(self) -> "ProcessHandle":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        try:
            if not self.has_exited:
                logger.info(f"Killing unterminated process. (pid: {self.pid})")
                self.terminate(force=True)
        finally:
            self.release()

    def _signal_parent(self, force: bool) -> None:
        # The parent is signalled through Popen so that Popen, not psutil,
        # reaps it and keeps its return code.
        try:
            if force:
                self._process.kill()
            else:
                self._process.terminate()
        except ProcessLookupError:
            pass

    def _wait_for_parent(self) -> bool:
        try:
            self._process.wait(timeout=self.terminate_timeout)
            return True
        except subprocess.TimeoutExpired:
            return False

    def _get_process_children(self) -> List[psutil.Process]:
        """Safely get all descendants of the process, handling race conditions."""
        children = []
        try:
            parent = psutil.Process(self.pid)
            for child in parent.children(recursive=True):
                if _is_process_alive(child):
                    children.append(child)
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            # Parent or children may have terminated during enumeration
            pass
        except Exception as e:
            logger.warning(f"Error getting process children: {e}")
        return children

    def _apply_termination_signal(self, processes: List[psutil.Process], force: bool) -> List[psutil.Process]:
        signalled = []
        for process in processes:
            try:
                if not _is_process_alive(process):
                    continue
                if force:
                    process.kill()
                else:
                    process.terminate()
                signalled.append(process)
            except psutil.NoSuchProcess:
                continue
            except psutil.AccessDenied:
                logger.warning(f"Access denied signalling PID {process.pid}")
                continue
        return signalled

    def _wait_for_termination(self, processes: List[psutil.Process]) -> List[psutil.Process]:
        """Wait for processes to terminate and return any that are still alive."""
        if not processes:
            return []
        try:
            _, still_alive = psutil.wait_procs(processes, timeout=self.terminate_timeout)
        except Exception as e:
            logger.warning(f"Error waiting for process termination: {e}")
            still_alive = processes
        # Zombies are effectively terminated
        return [process for process in still_alive if _is_process_alive(process)]

    def _handle_stubborn_processes(self, processes: List[psutil.Process]) -> None:
        """Log processes that survived SIGKILL."""
        if not processes and self.has_exited:
            return
        logger.error(f"Failed to terminate the process tree of {self.command} (PID: {self.pid})")
        for process in processes:
            try:
                logger.error(f"Stubborn process: PID {process.pid}, name: {process.name()}, "
                             f"status: {process.status()}")
            except Exception as e:
                logger.error(f"Could not get info for stubborn process PID {process.pid}: {e}")

    def _cleanup_process_group(self) -> None:
        """Kill leftovers in the process group the build tool leads."""
        if not _IS_POSIX:
            return
        try:
            os.killpg(self.pid, signal.SIGKILL)
            logger.debug(f"Sent SIGKILL to process group {self.pid}")
        except ProcessLookupError:
            # Process group doesn't exist or already cleaned up
            pass
        except PermissionError:
            logger.debug(f"No permission to kill process group {self.pid}")
        except Exception as e:
            logger.debug(f"Error cleaning process group {self.pid}: {e}")


class ProcessController:
    """Launches build tool processes."""

    def __init__(self, terminate_timeout: float = 5.0):
        self.terminate_timeout = terminate_timeout

    def spawn(self, command: str, args: Sequence[str], working_dir: Optional[str] = None) -> ProcessHandle:
        """
        Start `command` with `args` as separate argv entries.

        Output is not captured; the build tool writes to its log file. On POSIX
        the process leads a new session so its whole group can be killed.

        Raises:
            ProcessLaunchError: If the operating system refuses to start it
        """
        logger.info(f"Starting build process: {command}")
        try:
            process = subprocess.Popen(
                [command, *args],
                cwd=working_dir,
                stdin=subprocess.DEVNULL,
                start_new_session=_IS_POSIX,
            )
        except OSError as e:
            raise ProcessLaunchError(f"Failed to start build process: {e}", command) from e

        logger.info(f"Build process started with PID: {process.pid} in directory {working_dir or os.getcwd()}")
        return ProcessHandle(process, command, self.terminate_timeout)


def _is_process_alive(process: psutil.Process) -> bool:
    """Safely check if a process is still alive and not a zombie."""
    try:
        if not process.is_running():
            return False
        return process.status() not in (psutil.STATUS_ZOMBIE, psutil.STATUS_DEAD)
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return False
