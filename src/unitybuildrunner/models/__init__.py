"""
Data models for the build runner.

Configuration Models:
- Supervisor timing and housekeeping settings
- Error classifier selection
- Application-wide configuration

Build Models:
- Immutable build requests
- Classifier matches
- Build outcomes with their stable exit codes
- Final build results
"""

# Configuration models
from .config import AppConfig, ClassifierConfig, SupervisorConfig

# Build models
from .build import (
    BuildOutcome,
    BuildRequest,
    BuildResult,
    ClassificationResult,
    resolve_exit_code,
)

__all__ = [
    # Configuration
    "AppConfig",
    "ClassifierConfig",
    "SupervisorConfig",
    # Build
    "BuildOutcome",
    "BuildRequest",
    "BuildResult",
    "ClassificationResult",
    "resolve_exit_code",
]
