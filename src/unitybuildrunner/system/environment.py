"""
Environment lookups.
"""

import logging
import os
from typing import Optional

from ..validation import ValidationError

logger = logging.getLogger(__name__)

# Environment variable holding the editor executable path.
BUILD_TOOL_ENV_KEY = "UnityPath"


def resolve_build_tool_path(cli_value: Optional[str] = None) -> str:
    """Resolve the build tool executable path.

    An explicit command-line value wins over the `UnityPath` environment
    variable.

    Raises:
        ValidationError: If neither source provides a path.
    """
    if cli_value and cli_value.strip():
        return cli_value.strip()

    env_value = os.environ.get(BUILD_TOOL_ENV_KEY, "")
    if env_value.strip():
        logger.debug(f"Using build tool path from ${BUILD_TOOL_ENV_KEY}: {env_value}")
        return env_value.strip()

    raise ValidationError(
        f"Unity path not specified. Please specify by '--unity-path' or EnvVar '{BUILD_TOOL_ENV_KEY}'.",
        field_name="unity_path",
    )
