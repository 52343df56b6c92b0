"""
Build tool argument handling.

The editor is driven entirely by its command line. The runner needs to know
where the editor writes its log, so it finds the `-logFile` flag in the
caller's arguments and injects one when it is missing or points nowhere.
"""

import logging
from typing import List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

LOG_FILE_FLAG = "-logFile"
DEFAULT_LOG_FILE_NAME = "unitybuild.log"


def parse_log_file(args: Sequence[str]) -> str:
    """Return the value following the first `-logFile` flag.

    The flag is matched case-insensitively. Returns an empty string when the
    flag is absent or is the last argument.

    Examples:
        >>> parse_log_file(["-batchmode", "-logfile", "build.log"])
        'build.log'
        >>> parse_log_file(["-batchmode"])
        ''
    """
    for index, arg in enumerate(args):
        if arg.lower() == LOG_FILE_FLAG.lower() and index + 1 < len(args):
            return args[index + 1]
    return ""


def is_valid_log_file_name(file_name: Optional[str]) -> bool:
    """Whether a `-logFile` value names a real file.

    A bare dash asks the editor to log to stdout and create no file, which
    leaves nothing to tail.
    """
    if not file_name:
        return False
    if file_name == "-":
        return False
    return True


def normalize_arguments(args: Sequence[str]) -> List[str]:
    """Drop empty and whitespace-only arguments."""
    return [arg for arg in args if arg and arg.strip()]


def strip_quotes(text: str) -> str:
    """Remove one pair of surrounding double quotes, if present."""
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        return text[1:-1]
    return text


def ensure_log_file_argument(
    args: Sequence[str], default_log_file: str = DEFAULT_LOG_FILE_NAME
) -> Tuple[List[str], str]:
    """Make sure the arguments carry a usable `-logFile` value.

    A valid existing value is kept untouched. Otherwise every `-logFile` flag
    is removed together with the invalid value that followed it, and
    `-logFile <default_log_file>` is appended.

    Args:
        args: Build tool arguments.
        default_log_file: Log file name to inject.

    Returns:
        Tuple of (arguments, log_file).
    """
    current = parse_log_file(args)
    if is_valid_log_file_name(current):
        return list(args), current

    result: List[str] = []
    skip_next = False
    for index, arg in enumerate(args):
        if skip_next:
            skip_next = False
            continue
        if arg.lower() == LOG_FILE_FLAG.lower():
            following = args[index + 1] if index + 1 < len(args) else None
            if following is not None and not is_valid_log_file_name(following):
                skip_next = True
            continue
        result.append(arg)

    if current:
        logger.warning(
            f"Log file '{current}' cannot be tailed, using '{default_log_file}' instead"
        )
    result.extend([LOG_FILE_FLAG, default_log_file])
    return result, default_log_file


def quote_argument(text: str) -> str:
    """Wrap an argument value in double quotes.

    Already quoted values are returned unchanged.

    Raises:
        ValueError: If the value is empty or its quotes are unbalanced.

    Examples:
        >>> quote_argument('foo')
        '"foo"'
        >>> quote_argument('"foo"')
        '"foo"'
    """
    if len(text) == 0:
        raise ValueError(f"Argument is empty and is not valid string to quote. input: {text}")

    first_char = text[0]
    last_char = text[-1]

    if len(text) == 1 and first_char == '"':
        raise ValueError(f"Argument is \" and is not valid string to quote. input: {text}")
    if len(text) >= 2 and first_char == '"' and last_char != '"':
        raise ValueError(f"Argument begin with \" but not closed, please complete quote. input: {text}")
    if len(text) >= 2 and first_char != '"' and last_char == '"':
        raise ValueError(f"Argument end with \" but not begin with \", please complete quote. input: {text}")
    if '"' in text[1:-1]:
        raise ValueError(f"Argument contains \", but is invalid. input: {text}")

    if len(text) >= 2 and first_char == '"' and last_char == '"':
        return text
    return f'"{text}"'


def format_argument_string(args: Sequence[str]) -> str:
    """Join arguments for display: flags bare, values quoted.

    Examples:
        >>> format_argument_string(["-projectPath", "My Project", "-quit"])
        '-projectPath "My Project" -quit'
    """
    return " ".join(arg if arg.startswith("-") else quote_argument(arg) for arg in args)
