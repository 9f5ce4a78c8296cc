"""Querying the installed Xcode version through ``system_profiler``."""

from __future__ import annotations

import re
import subprocess

_VERSION = re.compile(r"\bVersion: (?P<major>\d+)\.(?P<minor>\d+)\b")
_U32_MAX = 2**32 - 1
_COMMAND = ["system_profiler", "SPDeveloperToolsDataType"]


class SystemProfileError(Exception):
    """Raised when the developer tools version can't be determined."""


def _parse_number(raw: str, what: str) -> int:
    value = int(raw)
    if value > _U32_MAX:
        raise SystemProfileError(
            f"The {what} version {raw!r} wasn't a valid number: number too large"
        )
    return value


def parse_developer_tools_version(output: str) -> tuple[int, int]:
    """The (major, minor) Xcode version from ``system_profiler`` output."""
    if not output:
        raise SystemProfileError("Xcode doesn't appear to be installed.")
    match = _VERSION.search(output)
    if match is None:
        raise SystemProfileError(
            f"Didn't find a version in the output of `{' '.join(_COMMAND)}`: {output!r}"
        )
    return (
        _parse_number(match.group("major"), "major"),
        _parse_number(match.group("minor"), "minor"),
    )


def developer_tools_version() -> tuple[int, int]:
    """The (major, minor) version of the installed Xcode."""
    try:
        result = subprocess.run(_COMMAND, capture_output=True, check=True)
    except (OSError, subprocess.CalledProcessError) as err:
        raise SystemProfileError(f"Failed to run `{' '.join(_COMMAND)}`: {err}") from err
    try:
        output = result.stdout.decode("utf-8")
    except UnicodeDecodeError as err:
        raise SystemProfileError(f"`system_profiler` output was invalid UTF-8: {err}") from err
    return parse_developer_tools_version(output.rstrip("\r\n"))