"""
Reading TOML configuration files from disk.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict

from ..validation import handle_config_error, ErrorSeverity

logger = logging.getLogger(__name__)


def load_toml_file(file_path: Path, description: str = "configuration file") -> Dict[str, Any]:
    """
    Parse ``file_path`` as TOML.

    Args:
        file_path: File to read
        description: Name of the file used in log and error messages

    Raises:
        FileNotFoundError: If ``file_path`` does not exist
        tomllib.TOMLDecodeError: If the content is not valid TOML
    """
    if not file_path.exists():
        message = f"{description} not found: {file_path}"
        logger.error(message)
        raise FileNotFoundError(message)

    logger.info(f"Reading {description}: {file_path}")
    try:
        with open(file_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        handle_config_error(e, f"parsing {description}", severity=ErrorSeverity.CRITICAL, logger=logger)
        raise

    logger.debug(f"{description} sections: {sorted(data)}")
    return data


def load_main_config(config_path: Path) -> Dict[str, Any]:
    """Read the runner's config.toml."""
    return load_toml_file(config_path, "main configuration file")
