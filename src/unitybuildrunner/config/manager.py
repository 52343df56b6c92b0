"""
Process-wide access to the runner configuration.

The configuration is read once and cached in this module. The CLI may point
the cache at a different file with set_config_path() before the first
get_config() call.
"""

import logging
from pathlib import Path
from typing import Optional

from ..models.config import AppConfig
from ..validation import handle_config_error, ErrorSeverity
from .loader import load_main_config
from .validators import validate_app_config

logger = logging.getLogger(__name__)

_CONFIG: Optional[AppConfig] = None

# conf/config.toml at the repository root. Built-in defaults apply when it is absent.
_DEFAULT_CONFIG_FILE_PATH = Path(__file__).parent.parent.parent.parent / "conf" / "config.toml"
_CONFIG_FILE_PATH = _DEFAULT_CONFIG_FILE_PATH
# A path chosen by the caller must exist.
_CONFIG_PATH_EXPLICIT = False


def _select_path(path: Path, explicit: bool) -> None:
    global _CONFIG_FILE_PATH, _CONFIG_PATH_EXPLICIT, _CONFIG
    _CONFIG_FILE_PATH = path
    _CONFIG_PATH_EXPLICIT = explicit
    _CONFIG = None


def set_config_path(config_path: Path) -> None:
    """Read configuration from ``config_path`` from now on, dropping any cached copy."""
    _select_path(Path(config_path), explicit=True)
    logger.info(f"Using configuration file: {config_path}")


def reset_config_path() -> None:
    """Go back to the default config.toml and drop the cache."""
    _select_path(_DEFAULT_CONFIG_FILE_PATH, explicit=False)


def clear_config_cache() -> None:
    global _CONFIG
    _CONFIG = None
    logger.debug("Configuration cache cleared")


def _load_config(config_path: Path, required: bool) -> AppConfig:
    """
    Read and validate the configuration at ``config_path``.

    When ``required`` is False a missing file yields the built-in defaults.

    Raises:
        FileNotFoundError: If a required file is missing
        ValidationError: If a value is out of range or of the wrong type
        tomllib.TOMLDecodeError: If the file is not valid TOML
    """
    if not config_path.exists() and not required:
        logger.debug(f"{config_path} not present, falling back to built-in defaults")
        return AppConfig()

    try:
        app_config = validate_app_config(load_main_config(config_path))
    except FileNotFoundError as e:
        handle_config_error(e, "locating configuration file", severity=ErrorSeverity.CRITICAL, logger=logger)
        raise
    except Exception as e:
        handle_config_error(e, "validating configuration", severity=ErrorSeverity.ERROR, logger=logger)
        raise

    logger.info(f"Configuration loaded from {config_path}")
    return app_config


def get_config() -> AppConfig:
    """
    Return the cached AppConfig, reading it on first use.

    Raises:
        FileNotFoundError: If a path set through set_config_path() is missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the file is not valid TOML
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _load_config(_CONFIG_FILE_PATH, required=_CONFIG_PATH_EXPLICIT)
    return _CONFIG


def is_config_loaded() -> bool:
    return _CONFIG is not None


def get_config_info() -> dict:
    """Describe where configuration comes from and whether it is cached."""
    return {
        "config_loaded": _CONFIG is not None,
        "config_path": str(_CONFIG_FILE_PATH),
        "config_path_explicit": _CONFIG_PATH_EXPLICIT,
        "pattern_set": _CONFIG.classifier.pattern_set if _CONFIG is not None else None,
    }
