"""The Android SDK and NDK environment that builds and device tools run in."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from mobiletool.ndk import NdkEnv, NdkError, load_ndk_env
from mobiletool.source_props import Revision, load_source_props

logger = logging.getLogger(__name__)

_HOME_NOT_SET = (
    "Have you installed the Android SDK? The `ANDROID_HOME` environment variable isn't set, "
    "and is required: environment variable not found"
)
_HOME_NOT_A_DIR = (
    "Have you installed the Android SDK? The `ANDROID_HOME` environment variable is set, but "
    "doesn't point to an existing directory."
)


class AndroidEnvError(Exception):
    """Raised when the Android environment can't be set up."""


def _existing_dir(raw: str | None) -> Path | None:
    if not raw:
        return None
    path = Path(raw)
    return path if path.is_dir() else None


def find_android_home(environ: Mapping[str, str] | None = None) -> Path:
    """Locate the Android SDK from ``ANDROID_HOME``, falling back to ``ANDROID_SDK_ROOT``."""
    environ = os.environ if environ is None else environ
    raw_home = environ.get("ANDROID_HOME")
    home = _existing_dir(raw_home)
    if home is not None:
        return home
    message = _HOME_NOT_SET if raw_home is None else _HOME_NOT_A_DIR
    sdk_root = _existing_dir(environ.get("ANDROID_SDK_ROOT"))
    if sdk_root is not None:
        logger.warning(
            "`ANDROID_HOME` isn't set; falling back to `ANDROID_SDK_ROOT`, which is deprecated"
        )
        return sdk_root
    raise AndroidEnvError(message)


@dataclass
class AndroidEnv:
    """Locations of the Android SDK and NDK plus the base environment variables."""

    android_home: Path
    ndk: NdkEnv
    base: dict[str, str] = field(default_factory=dict)

    def platform_tools_path(self) -> Path:
        return self.android_home / "platform-tools"

    def explicit_env(self) -> dict[str, str]:
        """Environment variables to pass to every child process."""
        envs = dict(self.base)
        envs["ANDROID_HOME"] = str(self.android_home)
        envs["NDK_HOME"] = str(self.ndk.ndk_home)
        return envs

    def sdk_version(self) -> Revision:
        """Revision of the installed platform tools."""
        return load_source_props(self.platform_tools_path() / "source.properties").revision


def load_android_env(environ: Mapping[str, str] | None = None) -> AndroidEnv:
    """Build an :class:`AndroidEnv` from the given (or the process) environment."""
    environ = os.environ if environ is None else environ
    android_home = find_android_home(environ)
    try:
        ndk = load_ndk_env(environ)
    except NdkError as err:
        raise AndroidEnvError(str(err)) from err
    return AndroidEnv(android_home, ndk, dict(environ))