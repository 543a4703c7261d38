"""Configuration template substitution and value parsing utilities."""

import os
import re
from datetime import timedelta

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")

# Seconds per duration unit
_DURATION_UNITS = {
    "h": 3600.0,
    "ms": 0.001,
    "us": 0.000001,
    "µs": 0.000001,
    "ns": 0.000000001,
    "m": 60.0,
    "s": 1.0,
}
# "ms" is tried before "m"
_DURATION_PATTERN = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(h|ms|us|µs|ns|m|s)")


def substitute_env_vars(text: str) -> str:
    """
    Substitute environment variable placeholders in text.

    Supports formats:
    - ${VAR_NAME} - required variable (raises error if missing)
    - ${VAR_NAME:-default} - optional with default value
    - ${VAR_NAME:?error_message} - required with custom error message
    """

    def replacer(match: re.Match[str]) -> str:
        var_expr = match.group(1)

        # Handle default values: ${VAR:-default}
        if ":-" in var_expr:
            var_name, default = var_expr.split(":-", 1)
            return os.getenv(var_name, default)

        # Handle error messages: ${VAR:?message}
        elif ":?" in var_expr:
            var_name, error_msg = var_expr.split(":?", 1)
            value = os.getenv(var_name)
            if value is None:
                raise ValueError(f"Required environment variable {var_name}: {error_msg}")
            return value

        # Handle required variables: ${VAR}
        else:
            var_name = var_expr
            value = os.getenv(var_name)
            if value is None:
                raise ValueError(f"Required environment variable {var_name} not set")
            return value

    return _ENV_PATTERN.sub(replacer, text)


def parse_duration(text: str) -> timedelta:
    """Parse a compound duration such as ``30m``, ``1h30m`` or ``1.5s``.

    Every number needs a unit; only ``0`` may stand alone.

    Raises:
        ValueError: If the text is not a valid duration
    """
    value = text.strip()
    if not value:
        raise ValueError("empty duration")

    if value == "0":
        return timedelta(0)

    sign = 1
    if value[0] in "+-":
        sign = -1 if value[0] == "-" else 1
        value = value[1:]

    position = 0
    seconds = 0.0
    for match in _DURATION_PATTERN.finditer(value):
        if match.start() != position:
            break
        seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()

    if position == 0 or position != len(value):
        raise ValueError(f"invalid duration '{text}'")

    return timedelta(seconds=sign * seconds)
