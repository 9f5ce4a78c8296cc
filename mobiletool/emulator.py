"""Android virtual devices started through the SDK emulator."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass

from mobiletool.android_env import AndroidEnv


def _emulator_binary(env: AndroidEnv) -> str:
    return str(env.android_home / "emulator" / "emulator")


def _process_env(env: AndroidEnv) -> dict[str, str]:
    return {**os.environ, **env.explicit_env()}


@dataclass(frozen=True, order=True)
class Emulator:
    """A configured Android virtual device."""

    name: str

    def __str__(self) -> str:
        return self.name

    def command(self, env: AndroidEnv) -> list[str]:
        """Command line that boots this AVD."""
        return [_emulator_binary(env), "-avd", self.name]

    def start(self, env: AndroidEnv) -> subprocess.Popen:
        """Boot the AVD, sharing this process's standard streams."""
        return subprocess.Popen(self.command(env), env=_process_env(env))

    def start_detached(self, env: AndroidEnv) -> None:
        """Boot the AVD in its own session and don't wait for it."""
        subprocess.Popen(
            self.command(env),
            env=_process_env(env),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )


def parse_avd_list(text: str) -> list[Emulator]:
    """Emulators named in ``emulator -list-avds`` output, sorted and unique."""
    return sorted({Emulator(line.strip()) for line in text.split("\n") if line})


def avd_list(env: AndroidEnv) -> list[Emulator]:
    """All AVDs known to the SDK emulator."""
    cmd = [_emulator_binary(env), "-list-avds"]
    try:
        result = subprocess.run(cmd, env=_process_env(env), capture_output=True)
    except OSError as err:
        raise OSError(f"Failed to run `emulator -list-avds`: {err}") from err
    if result.returncode != 0:
        raise OSError(
            f"Failed to run `emulator -list-avds`: exited with status {result.returncode}"
        )
    try:
        text = result.stdout.decode("utf-8")
    except UnicodeDecodeError as err:
        raise OSError(f"Failed to run `emulator -list-avds`: {err}") from err
    return parse_avd_list(text.rstrip("\r\n"))