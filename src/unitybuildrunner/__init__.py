"""
UnityBuildRunner: Headless Unity build supervision.

This package launches a Unity editor batch build, follows its log file while
it runs, stops the build early when a known failure signature appears, and
reports a stable exit code describing how the build ended.

The package is organized into specialized modules:
- config: Configuration management and validation
- models: Data structures and type definitions
- validation: Input validation and error handling
- system: Build tool argument handling and environment lookups
- classification: Failure signature matching
- orchestration: Process, log and lifecycle supervision
- cli: Command-line interface

Usage:
    From command line:
        unity-build-runner [options] -- <unity arguments>

    Programmatically:
        from unitybuildrunner import BuildSupervisor, create_build_request
        request = create_build_request(unity_path, args, "02:00:00")
        result = BuildSupervisor().run(request)
"""

__version__ = "1.0.0"

# Main interfaces
from .config import get_config, clear_config_cache, set_config_path
from .orchestration import (
    BuildSupervisor,
    CancellationToken,
    create_build_request,
)
from .cli import main_cli

# Model classes for external use
from .models import (
    AppConfig,
    BuildOutcome,
    BuildRequest,
    BuildResult,
    ClassificationResult,
    ClassifierConfig,
    SupervisorConfig,
    resolve_exit_code,
)

# Validation utilities
from .validation import (
    BuildRunnerError,
    ValidationError,
    validate_timeout,
)

# Classification utilities
from .classification import ErrorClassifier, create_classifier

__all__ = [
    "__version__",
    # Main interfaces
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "BuildSupervisor",
    "CancellationToken",
    "create_build_request",
    "main_cli",
    # Models
    "AppConfig",
    "BuildOutcome",
    "BuildRequest",
    "BuildResult",
    "ClassificationResult",
    "ClassifierConfig",
    "SupervisorConfig",
    "resolve_exit_code",
    # Validation
    "BuildRunnerError",
    "ValidationError",
    "validate_timeout",
    # Classification
    "ErrorClassifier",
    "create_classifier",
]
