"""
Command-line interface for the Unity build runner.

Options for the runner itself are long options. Everything else, or
everything after a literal `--`, is passed to the build tool unchanged and in
order. The process exits with the build's resolved exit code.
"""

import argparse
import logging
import sys
import tomllib
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .. import __version__
from ..classification import create_classifier
from ..config import get_config, set_config_path
from ..config.validators import LOG_LEVELS
from ..orchestration import BuildSupervisor, CancellationToken, SignalHandler, create_build_request
from ..system.environment import BUILD_TOOL_ENV_KEY, resolve_build_tool_path
from ..validation import ValidationError, handle_cli_error, validate_enum_choice

# --- Logging Setup ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)

ARGUMENT_SEPARATOR = "--"


def create_parser() -> argparse.ArgumentParser:
    """Build the parser for the runner's own options."""
    # No -h: build tool flags such as -hubIPC would be taken for it.
    parser = argparse.ArgumentParser(
        prog="unity-build-runner",
        description=(
            "Run a Unity batch build, tail its log, stop early on known errors "
            "and exit with a meaningful code."
        ),
        epilog="Example: unity-build-runner --timeout 00:30:00 -- -quit -batchmode -nographics "
               "-projectPath ./MyProject -executeMethod Build.Run",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("--help", action="help", help="Show this help message and exit.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--unity-path",
        type=str,
        help=f"Path to the Unity executable. Defaults to the '{BUILD_TOOL_ENV_KEY}' environment variable.",
    )
    parser.add_argument(
        "--timeout",
        type=str,
        help="Overall build timeout, as seconds or hh:mm:ss. Defaults to the configured value (02:00:00).",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Use the strict error patterns, which also catch shader compilation failures.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to a config.toml file.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help=f"Logging level, one of {', '.join(LOG_LEVELS)}.",
    )
    return parser


def parse_arguments(
    parser: argparse.ArgumentParser, argv: Sequence[str]
) -> Tuple[argparse.Namespace, List[str]]:
    """
    Split the command line into runner options and build tool arguments.

    Returns:
        Tuple of (runner options, build tool arguments)
    """
    argv = list(argv)
    if ARGUMENT_SEPARATOR in argv:
        index = argv.index(ARGUMENT_SEPARATOR)
        options = parser.parse_args(argv[:index])
        return options, argv[index + 1:]
    return parser.parse_known_args(argv)


def main_cli(argv: Optional[Sequence[str]] = None) -> None:
    """
    Main command-line interface for the Unity build runner.

    Raises:
        SystemExit: Always. The exit code is the build's resolved exit code,
            or 1 when the inputs are invalid.
    """
    parser = create_parser()
    options, tool_args = parse_arguments(parser, sys.argv[1:] if argv is None else argv)

    if options.config is not None:
        set_config_path(options.config)

    # Load application configuration
    try:
        app_config = get_config()
    except (FileNotFoundError, ValidationError, tomllib.TOMLDecodeError) as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=1,
            include_traceback=False,
            logger=logger,
        )

    try:
        log_level = validate_enum_choice(
            options.log_level or app_config.log_level,
            LOG_LEVELS,
            field_name="--log-level",
            case_sensitive=False,
        )
        logging.getLogger().setLevel(log_level)

        unity_path = resolve_build_tool_path(options.unity_path)
        supervisor_config = app_config.supervisor
        request = create_build_request(
            unity_path,
            tool_args,
            options.timeout if options.timeout is not None else supervisor_config.timeout,
            default_log_file=supervisor_config.default_log_file,
        )
        classifier = create_classifier(
            "strict" if options.strict else app_config.classifier.pattern_set,
            app_config.classifier.extra_patterns,
        )
    except ValidationError as e:
        handle_cli_error(
            error=e,
            context="argument validation",
            exit_code=1,
            include_traceback=False,
            logger=logger,
        )

    supervisor = BuildSupervisor(config=supervisor_config, classifier=classifier)
    token = CancellationToken()
    with SignalHandler(token):
        result = supervisor.run(request, token)

    if result.exit_code > 255 and sys.platform != "win32":
        logger.info(f"Exit code {result.exit_code} is reported modulo 256 on this platform.")
    sys.exit(result.exit_code)


if __name__ == "__main__":
    main_cli()
