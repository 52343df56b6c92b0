"""
Build supervision.

BuildSupervisor launches the build tool, waits for its log file, tails and
classifies the log while the build runs, and always finishes by killing the
process tree and reporting a BuildResult. It runs on the caller's thread and
every sleep is a cancellable wait on the run's CancellationToken.
"""

import logging
from typing import Optional, Tuple

from ..classification import ErrorClassifier, create_classifier
from ..models.build import BuildOutcome, BuildRequest, BuildResult, resolve_exit_code
from ..models.config import SupervisorConfig
from ..validation import LogFileOpenError, ProcessLaunchError
from .cancellation import CancellationToken
from .log_tailer import LogTailer, prepare_log_file
from .process_manager import ProcessController
from .shared_state import RuntimeState, SupervisorState

logger = logging.getLogger(__name__)

# Build tool log lines are echoed through their own logger so they can be
# filtered independently of the runner's messages.
build_log = logging.getLogger("unitybuildrunner.build_log")


class BuildSupervisor:
    """
    Supervises one build tool invocation at a time.

    The first terminating condition observed wins: a classified failure, a
    timeout, a cancellation or the process exiting on its own. Later
    conditions never overwrite it.
    """

    def __init__(
        self,
        config: Optional[SupervisorConfig] = None,
        classifier: Optional[ErrorClassifier] = None,
        process_controller: Optional[ProcessController] = None,
    ):
        self.config = config or SupervisorConfig()
        self.classifier = classifier or create_classifier()
        self.process_controller = process_controller or ProcessController(
            terminate_timeout=self.config.terminate_timeout
        )
        self.state = SupervisorState.DONE

    def run(self, request: BuildRequest, token: Optional[CancellationToken] = None) -> BuildResult:
        """
        Run the build described by `request` to completion.

        Never raises for build failures; every failure mode is reported
        through the returned BuildResult.

        Args:
            request: The validated build request
            token: Cancels the build when triggered from another thread or a
                signal handler

        Returns:
            The build result, including the exit code to report
        """
        state = RuntimeState(request=request, token=token or CancellationToken())
        self._set_state(SupervisorState.STARTING)

        try:
            logger.info("Initializing build runner.")
            prepare_log_file(
                request.log_file_path,
                attempts=self.config.log_delete_attempts,
                delay=self.config.log_delete_delay,
                sleep=lambda seconds: self._sleep(state, seconds),
            )

            if not self._latch_interruption(state):
                self._start_process(state)

            if state.process is not None and self._await_log_file(state):
                self._tail_log(state)

        except Exception as e:
            logger.critical(f"Stopping build. Error happened while building: {type(e).__name__}: {e}", exc_info=True)
            state.latch.latch(BuildOutcome.UNKNOWN_ERROR, f"{type(e).__name__}: {e}")
        finally:
            result = self._finalize(state)

        return result

    def _set_state(self, new_state: SupervisorState) -> None:
        logger.debug(f"Supervisor state: {self.state.value} -> {new_state.value}")
        self.state = new_state

    def _start_process(self, state: RuntimeState) -> None:
        request = state.request
        logger.info(
            f"Starting build. (UnityPath: {request.executable}, Arguments: {request.argument_string}, "
            f"WorkingDir: {request.working_dir}, Timeout: {request.timeout:g}s, LogFile: {request.log_file})"
        )
        try:
            state.process = self.process_controller.spawn(
                request.executable, request.args, request.working_dir
            )
        except ProcessLaunchError as e:
            logger.critical(f"Stopping build. {e}")
            state.latch.latch(BuildOutcome.PROCESS_LAUNCH_FAILED, str(e))

    def _await_log_file(self, state: RuntimeState) -> bool:
        """
        Wait for the build tool to create its log file.

        Returns:
            True if the log file exists and tailing should begin
        """
        self._set_state(SupervisorState.AWAITING_LOG_FILE)
        log_path = state.request.log_file_path
        process = state.process
        wait_started = state.elapsed()
        ceiling = min(self.config.log_wait_timeout, state.remaining())
        notified = False

        while True:
            if log_path.exists():
                logger.debug(f"Log file found: {log_path}")
                return True

            if process.has_exited:
                # The file may have been written just before exiting
                if log_path.exists():
                    return True
                state.native_exit_code = process.exit_code
                message = (
                    f"Build tool process exited before creating its log file. "
                    f"(exitCode: {state.native_exit_code})"
                )
                logger.critical(f"Stopping build. {message}")
                state.latch.latch(BuildOutcome.PROCESS_EXITED_IMMEDIATELY, message)
                return False

            if state.token.is_cancelled:
                self._latch_interruption(state)
                return False

            waited = state.elapsed() - wait_started
            if waited >= ceiling:
                message = (
                    f"Build tool process did not create log file within {waited:.0f}s. "
                    f"(logFile: {state.request.log_file}, fullPath: {log_path}) "
                    f"This might be a log file permission issue or a temporary failure; "
                    f"re-run the build to check whether it reproduces."
                )
                logger.critical(f"Stopping build. {message}")
                state.latch.latch(BuildOutcome.LOG_FILE_NEVER_APPEARED, message)
                return False

            if not notified and waited >= self.config.log_wait_notice:
                notified = True
                logger.info("Waiting for the build tool to create its log file. This is taking longer than usual.")

            state.token.wait(min(self.config.log_poll_interval, ceiling - waited))

    def _tail_log(self, state: RuntimeState) -> None:
        """
        Drain and classify the log until a terminating condition is latched.

        A cancellation is honoured before anything else is read, so log text
        that arrives after it cannot change the outcome. Whether the process
        had exited is sampled before each drain, so the drain after an exit is
        the final one and reads everything the process wrote. The deadline is
        checked after classification.
        """
        self._set_state(SupervisorState.TAILING)
        process = state.process

        try:
            tailer = LogTailer(state.request.log_file_path).open()
        except LogFileOpenError as e:
            logger.critical(f"Stopping build. {e}")
            state.latch.latch(BuildOutcome.UNKNOWN_ERROR, str(e))
            return

        with tailer:
            while True:
                if state.token.is_cancelled:
                    self._latch_interruption(state)
                    return

                exited = process.has_exited

                chunk = tailer.drain()
                if chunk and self._classify(state, chunk):
                    return

                if exited:
                    state.native_exit_code = process.exit_code
                    logger.info(f"Build tool process exited. (exitCode: {state.native_exit_code})")
                    return

                if self._latch_interruption(state):
                    return

                self._sleep(state, self.config.tail_poll_interval)

    def _classify(self, state: RuntimeState, chunk: str) -> bool:
        """Echo a log chunk and latch a failure if it matches a signature."""
        if self.config.echo_build_log:
            build_log.info(chunk.rstrip("\r\n"))

        matches = self.classifier.classify(chunk)
        if not matches:
            return False

        first = matches[0]
        message = f"Error filter caught error. (pattern: {first.pattern}, line: {first.line.strip()})"
        for other in matches[1:]:
            logger.debug(f"Additional failure signature matched: {other.pattern}")
        logger.critical(f"Stopping build. {message}")
        state.latch.latch(BuildOutcome.CLASSIFIED_FAILURE_DETECTED, message, classification=first)
        return True

    def _interruption(self, state: RuntimeState) -> Optional[Tuple[BuildOutcome, str]]:
        if state.token.is_cancelled:
            return BuildOutcome.CANCELLED, state.token.reason or "Operation cancelled."
        if state.remaining() <= 0:
            return BuildOutcome.TIMED_OUT, f"Timeout exceeded. ({state.request.timeout / 60:g}min)"
        return None

    def _latch_interruption(self, state: RuntimeState) -> bool:
        """Latch a cancellation or timeout if one has happened."""
        interruption = self._interruption(state)
        if interruption is None:
            return False
        outcome, message = interruption
        logger.critical(f"Stopping build. {message}")
        state.latch.latch(outcome, message)
        return True

    def _sleep(self, state: RuntimeState, seconds: float) -> bool:
        """
        Sleep without overrunning the build timeout.

        Returns:
            True if the run was cancelled or timed out while sleeping
        """
        if state.token.wait(min(seconds, state.remaining())):
            return True
        return state.remaining() <= 0

    def _finalize(self, state: RuntimeState) -> BuildResult:
        self._set_state(SupervisorState.FINALIZING)
        process = state.process
        pid = process.pid if process is not None else None

        if process is not None:
            try:
                with process:
                    if process.has_exited and state.native_exit_code is None:
                        state.native_exit_code = process.exit_code
            except Exception as e:
                logger.error(f"Failed to clean up build tool process {pid}: {e}", exc_info=True)

        if not state.latch.is_set:
            if state.native_exit_code:
                state.latch.latch(BuildOutcome.UNDERLYING_PROCESS_NON_ZERO_EXIT)
            else:
                state.latch.latch(BuildOutcome.SUCCESS)

        outcome = state.latch.outcome
        exit_code = resolve_exit_code(outcome, state.native_exit_code)
        result = BuildResult(
            outcome=outcome,
            exit_code=exit_code,
            native_exit_code=state.native_exit_code,
            elapsed_seconds=state.elapsed(),
            message=state.latch.message,
            classification=state.latch.classification,
            pid=pid,
        )

        summary = (
            f"(outcome: {outcome}, exitCode: {exit_code}, "
            f"nativeExitCode: {state.native_exit_code}, elapsed: {result.elapsed_seconds:.1f}s)"
        )
        if result.succeeded:
            logger.info(f"Build successfully completed. {summary}")
        else:
            logger.error(f"Build failed. {summary}")

        self._set_state(SupervisorState.DONE)
        return result
