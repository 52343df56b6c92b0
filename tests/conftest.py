"""
Pytest configuration and shared fixtures for the build runner test suite.

This module provides common fixtures, test utilities, and configuration
for all test modules.
"""

import shutil
import sys
import tempfile
from pathlib import Path

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

FIXTURES_DIR = Path(__file__).parent / "fixtures"
FAKE_BUILD_TOOL = FIXTURES_DIR / "fake_build_tool.py"


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "e2e: mark test as an end-to-end test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def fake_tool_args():
    """
    Build tool arguments that run the fake build tool.

    The Python interpreter is the build tool executable and the fake tool
    script is its first argument.
    """
    def _make(scenario: str, *extra: str, log_file: str = "build.log"):
        args = [str(FAKE_BUILD_TOOL), "-scenario", scenario]
        if log_file is not None:
            args += ["-logFile", log_file]
        return args + list(extra)

    return _make


@pytest.fixture
def sample_config_data():
    """Sample configuration data for testing."""
    return {
        "supervisor": {
            "timeout": "00:30:00",
            "log_wait_timeout": 60.0,
            "log_wait_notice": 5.0,
            "log_poll_interval": 0.05,
            "tail_poll_interval": 0.2,
            "log_delete_attempts": 3,
            "log_delete_delay": 0.5,
            "terminate_timeout": 2.0,
            "default_log_file": "editor.log",
            "echo_build_log": False,
        },
        "classifier": {
            "pattern_set": "strict",
            "extra_patterns": [r"BuildFailedException"],
        },
        "logging": {
            "level": "DEBUG",
        },
    }


@pytest.fixture
def config_file(temp_dir, sample_config_data):
    """Write the sample configuration to a temporary config.toml."""
    import toml

    path = temp_dir / "config.toml"
    with open(path, "w") as f:
        toml.dump(sample_config_data, f)
    return path


@pytest.fixture(autouse=True)
def reset_config_after_test():
    """Automatically reset the configuration singleton after each test."""
    yield

    from unitybuildrunner.config import reset_config_path

    reset_config_path()
