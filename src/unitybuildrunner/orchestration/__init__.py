"""
Orchestration module for supervised builds.

Components:
- BuildSupervisor: Runs one build from launch to final report
- create_build_request: Input validation and request preparation
- ProcessController / ProcessHandle: Process launch and tree termination
- LogTailer: Incremental log file reading
- CancellationToken / SignalHandler: Cooperative cancellation
"""

from .build_configuration import create_build_request
from .cancellation import CancellationToken
from .log_tailer import LogTailer, prepare_log_file
from .process_manager import ProcessController, ProcessHandle
from .shared_state import OutcomeLatch, RuntimeState, SupervisorState
from .signal_handler import SignalHandler
from .supervisor import BuildSupervisor

__all__ = [
    "BuildSupervisor",
    "CancellationToken",
    "LogTailer",
    "OutcomeLatch",
    "ProcessController",
    "ProcessHandle",
    "RuntimeState",
    "SignalHandler",
    "SupervisorState",
    "create_build_request",
    "prepare_log_file",
]
