"""
Configuration validation utilities.

This module turns raw TOML sections into validated configuration models.
Every key is optional; missing keys take the model defaults.
"""

import logging
from typing import Any, Dict

from ..models.config import AppConfig, ClassifierConfig, SupervisorConfig
from ..validation import (
    ValidationError,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
    validate_regex_pattern,
    validate_timeout,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def validate_supervisor_config(supervisor_data: Dict[str, Any]) -> SupervisorConfig:
    """
    Validate and create a SupervisorConfig from the `[supervisor]` section.

    Args:
        supervisor_data: Raw supervisor configuration from TOML

    Returns:
        Validated SupervisorConfig instance

    Raises:
        ValidationError: If validation fails
    """
    defaults = SupervisorConfig()

    timeout = validate_timeout(
        supervisor_data.get("timeout", defaults.timeout),
        field_name="supervisor.timeout",
    )

    log_wait_timeout = validate_positive_float(
        supervisor_data.get("log_wait_timeout", defaults.log_wait_timeout),
        min_value=0.1,
        max_value=3600.0,  # 1h maximum
        field_name="supervisor.log_wait_timeout",
    )

    log_wait_notice = validate_positive_float(
        supervisor_data.get("log_wait_notice", defaults.log_wait_notice),
        min_value=0.0,
        field_name="supervisor.log_wait_notice",
    )

    log_poll_interval = validate_positive_float(
        supervisor_data.get("log_poll_interval", defaults.log_poll_interval),
        min_value=0.001,  # 1ms minimum
        max_value=10.0,
        field_name="supervisor.log_poll_interval",
    )

    tail_poll_interval = validate_positive_float(
        supervisor_data.get("tail_poll_interval", defaults.tail_poll_interval),
        min_value=0.001,
        max_value=10.0,
        field_name="supervisor.tail_poll_interval",
    )

    log_delete_attempts = validate_positive_integer(
        supervisor_data.get("log_delete_attempts", defaults.log_delete_attempts),
        min_value=1,
        max_value=100,
        field_name="supervisor.log_delete_attempts",
    )

    log_delete_delay = validate_positive_float(
        supervisor_data.get("log_delete_delay", defaults.log_delete_delay),
        min_value=0.0,
        max_value=60.0,
        field_name="supervisor.log_delete_delay",
    )

    terminate_timeout = validate_positive_float(
        supervisor_data.get("terminate_timeout", defaults.terminate_timeout),
        min_value=0.1,
        max_value=120.0,
        field_name="supervisor.terminate_timeout",
    )

    default_log_file = supervisor_data.get("default_log_file", defaults.default_log_file)
    if not isinstance(default_log_file, str) or not default_log_file.strip() or default_log_file.strip() == "-":
        raise ValidationError(
            "supervisor.default_log_file must be a file name",
            field_name="supervisor.default_log_file",
            value=default_log_file,
        )

    echo_build_log = supervisor_data.get("echo_build_log", defaults.echo_build_log)
    if not isinstance(echo_build_log, bool):
        raise ValidationError(
            "supervisor.echo_build_log must be a boolean",
            field_name="supervisor.echo_build_log",
            value=echo_build_log,
        )

    return SupervisorConfig(
        timeout=timeout,
        log_wait_timeout=log_wait_timeout,
        log_wait_notice=log_wait_notice,
        log_poll_interval=log_poll_interval,
        tail_poll_interval=tail_poll_interval,
        log_delete_attempts=log_delete_attempts,
        log_delete_delay=log_delete_delay,
        terminate_timeout=terminate_timeout,
        default_log_file=default_log_file.strip(),
        echo_build_log=echo_build_log,
    )


def validate_classifier_config(classifier_data: Dict[str, Any]) -> ClassifierConfig:
    """
    Validate and create a ClassifierConfig from the `[classifier]` section.

    Raises:
        ValidationError: If validation fails
    """
    pattern_set = validate_enum_choice(
        classifier_data.get("pattern_set", "default"),
        choices=["default", "strict"],
        field_name="classifier.pattern_set",
        case_sensitive=False,
    )

    extra_patterns = classifier_data.get("extra_patterns", [])
    if not isinstance(extra_patterns, list):
        raise ValidationError(
            "classifier.extra_patterns must be a list of regex patterns",
            field_name="classifier.extra_patterns",
            value=extra_patterns,
        )
    validated_patterns = tuple(
        validate_regex_pattern(pattern, field_name=f"classifier.extra_patterns[{index}]")
        for index, pattern in enumerate(extra_patterns)
    )

    return ClassifierConfig(pattern_set=pattern_set, extra_patterns=validated_patterns)


def validate_logging_level(logging_data: Dict[str, Any]) -> str:
    """Validate `[logging] level` and return it upper-cased."""
    return validate_enum_choice(
        logging_data.get("level", "INFO"),
        choices=LOG_LEVELS,
        field_name="logging.level",
        case_sensitive=False,
    )


def validate_app_config(config_data: Dict[str, Any]) -> AppConfig:
    """
    Validate a complete parsed config.toml.

    Raises:
        ValidationError: If any section fails validation
    """
    supervisor = validate_supervisor_config(config_data.get("supervisor", {}))
    classifier = validate_classifier_config(config_data.get("classifier", {}))
    log_level = validate_logging_level(config_data.get("logging", {}))

    logger.debug(
        f"Validated configuration: timeout={supervisor.timeout}s, "
        f"pattern_set={classifier.pattern_set}, log_level={log_level}"
    )
    return AppConfig(supervisor=supervisor, classifier=classifier, log_level=log_level)
