"""
Command-line interface for the unitybuildrunner package.

This module provides the main CLI entry point for the build runner.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
