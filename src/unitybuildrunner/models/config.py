"""
Configuration data models.

This module contains the configuration structures for the supervisor, the
error classifier and the application as a whole, loaded from `config.toml`.
"""

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class SupervisorConfig:
    """
    Timing and housekeeping settings for a supervised build, loaded from
    the `[supervisor]` section of `config.toml`.
    """

    # Overall wall-clock limit for a build, in seconds.
    timeout: float = 7200.0
    # Ceiling for the editor to create its log file after launch. Large
    # projects can take minutes on a cold first launch.
    log_wait_timeout: float = 300.0
    # Log a "still waiting" notice once the log wait exceeds this many seconds.
    log_wait_notice: float = 10.0
    # Poll interval while waiting for the log file to appear.
    log_poll_interval: float = 0.1
    # Poll interval between log drains while tailing.
    tail_poll_interval: float = 0.5
    # Attempts and delay for deleting the previous run's log file.
    log_delete_attempts: int = 10
    log_delete_delay: float = 1.0
    # Bounded wait for the process tree to die after a kill.
    terminate_timeout: float = 5.0
    # Log file used when the arguments carry no valid -logFile value.
    default_log_file: str = "unitybuild.log"
    # Echo drained log text through the build log logger.
    echo_build_log: bool = True


@dataclass(frozen=True)
class ClassifierConfig:
    """
    Error classifier selection, loaded from the `[classifier]` section.
    """

    # "default" or "strict" (adds shader compilation failures).
    pattern_set: str = "default"
    # Additional regex signatures appended after the built-in set.
    extra_patterns: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    supervisor: SupervisorConfig = field(default_factory=SupervisorConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    # Root logging level name, from `[logging] level`.
    log_level: str = "INFO"
