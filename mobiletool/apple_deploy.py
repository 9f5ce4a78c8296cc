"""Installing and launching apps on simulators and devices, then following their logs."""

from __future__ import annotations

import os
import subprocess
from typing import Mapping


class DeployError(Exception):
    """Raised when an app can't be installed or launched."""


def _process_env(environ: Mapping[str, str] | None) -> dict[str, str] | None:
    if environ is None:
        return None
    return {**os.environ, **environ}


def log_predicate(stylized_name: str, identifier: str, pedantic: bool) -> str:
    """``log stream`` predicate selecting the app's messages."""
    if pedantic:
        return f'process == "{stylized_name}"'
    return f'subsystem = "{identifier}"'


def syslog_args(app_name: str, pedantic: bool) -> list[str]:
    """``idevicesyslog`` command line following the app's process."""
    args = ["idevicesyslog", "--process", app_name]
    if not pedantic:
        # Keep only the app's own lines, e.g. `App Name[pid]:` but not `App Name(UIKitCore)[pid]:`.
        args += ["--match", f"{app_name}["]
    return args


def ios_deploy_args(device_id: str, app_path, non_interactive: bool) -> list[str]:
    """``ios-deploy`` command line installing and launching the app bundle."""
    return [
        "ios-deploy",
        "--debug",
        "--id",
        device_id,
        "--no-wifi",
        "--bundle",
        str(app_path),
        "--noninteractive" if non_interactive else "--justlaunch",
    ]


def _run(cmd: list[str], environ, description: str) -> None:
    try:
        subprocess.run(cmd, env=_process_env(environ), check=True)
    except (OSError, subprocess.CalledProcessError) as err:
        raise DeployError(f"{description}: {err}") from err


def _start(cmd: list[str], environ, description: str) -> subprocess.Popen:
    try:
        return subprocess.Popen(cmd, env=_process_env(environ))
    except OSError as err:
        raise DeployError(f"{description}: {err}") from err


def simctl_run(
    app_dir,
    identifier: str,
    stylized_name: str,
    udid: str,
    environ: Mapping[str, str] | None = None,
    non_interactive: bool = False,
    pedantic: bool = False,
) -> subprocess.Popen:
    """Install and launch the app on a simulator; return the launcher or log process."""
    description = "Failed to deploy app to simulator"
    print("Deploying app to device...")
    _run(["xcrun", "simctl", "install", udid, str(app_dir)], environ, description)
    launcher = ["xcrun", "simctl", "launch", udid, identifier]
    if non_interactive:
        return _start(launcher + ["--console"], environ, description)
    _run(launcher, environ, description)
    return _start(
        [
            "xcrun",
            "simctl",
            "spawn",
            udid,
            "log",
            "stream",
            "--level",
            "debug",
            "--predicate",
            log_predicate(stylized_name, identifier, pedantic),
        ],
        environ,
        description,
    )


def ios_deploy_run(
    app_path,
    stylized_name: str,
    device_id: str,
    environ: Mapping[str, str] | None = None,
    non_interactive: bool = False,
    pedantic: bool = False,
) -> subprocess.Popen:
    """Install and launch the app on a device; return the deploy or syslog process."""
    description = "Failed to deploy app to device"
    print("Deploying app to device...")
    deploy = ios_deploy_args(device_id, app_path, non_interactive)
    if non_interactive:
        return _start(deploy, environ, description)
    _run(deploy, environ, description)
    return _start(syslog_args(stylized_name, pedantic), environ, description)