"""Talking to Android devices through ``adb``."""

from __future__ import annotations

import os
import re
import subprocess
from dataclasses import dataclass

from mobiletool.android_env import AndroidEnv
from mobiletool.android_targets import AndroidTarget, for_abi

_DEVICE_REGEX = re.compile(r"^([\S]{6,100})\tdevice\b", re.MULTILINE)
_NAME_REGEX = re.compile(r"\bname: (?P<name>.*)")

UNAUTHORIZED_MESSAGE = (
    "This device doesn't yet trust this computer. On the device, you should see a prompt like "
    '"Allow USB debugging?". Pressing "Allow" should fix this.'
)


class RunCheckedError(Exception):
    """Raised when an ``adb`` invocation produced unusable output."""

    def __init__(self, message: str, *, unauthorized: bool = False):
        super().__init__(message)
        self.unauthorized = unauthorized


class AdbError(Exception):
    """Raised when querying devices through ``adb`` fails."""


@dataclass(frozen=True, order=True)
class AndroidDevice:
    """A connected Android device."""

    serial_no: str
    name: str
    model: str
    target: AndroidTarget

    def __str__(self) -> str:
        if self.model != self.name:
            return f"{self.name} ({self.model})"
        return self.name


def adb_command(env: AndroidEnv, args) -> list[str]:
    """Command line running the SDK's ``adb`` with ``args``."""
    return [str(env.platform_tools_path() / "adb"), *(str(arg) for arg in args)]


def _run(env: AndroidEnv, args) -> subprocess.CompletedProcess:
    return subprocess.run(
        adb_command(env, args),
        env={**os.environ, **env.explicit_env()},
        capture_output=True,
    )


def check_authorized(returncode: int, stdout: bytes, stderr: bytes) -> str:
    """Return trimmed stdout, raising if the device hasn't authorised this host."""
    if returncode != 0:
        try:
            stderr_text = stderr.decode("utf-8")
        except UnicodeDecodeError:
            stderr_text = ""
        if "error: device unauthorized" in stderr_text:
            raise RunCheckedError(UNAUTHORIZED_MESSAGE, unauthorized=True)
    try:
        return stdout.decode("utf-8").strip()
    except UnicodeDecodeError as err:
        raise RunCheckedError(str(err)) from err


def parse_device_serials(text: str) -> list[str]:
    """Serial numbers of the ready devices listed by ``adb devices``."""
    return [match.group(1) for match in _DEVICE_REGEX.finditer(text)]


def parse_bluetooth_name(text: str) -> str:
    """Device name from ``dumpsys bluetooth_manager`` output."""
    match = _NAME_REGEX.search(text)
    if match is None:
        raise AdbError("Name regex didn't match anything.")
    return match.group("name")


def parse_emulator_name(text: str) -> str:
    """AVD name from ``adb emu avd name`` output."""
    return text.split("\n")[0].strip()


def _checked(env: AndroidEnv, args, description: str) -> str:
    try:
        result = _run(env, args)
    except OSError as err:
        raise AdbError(f"IO error: {err}") from err
    try:
        return check_authorized(result.returncode, result.stdout, result.stderr)
    except RunCheckedError as err:
        raise AdbError(f"Failed to run `{description}`: {err}") from err


def device_name(env: AndroidEnv, serial_no: str) -> str:
    """Human-readable name of the device with ``serial_no``."""
    if serial_no.startswith("emulator"):
        stdout = _checked(env, ["-s", serial_no, "emu", "avd", "name"], "adb emu avd name")
        return parse_emulator_name(stdout)
    stdout = _checked(
        env,
        ["-s", serial_no, "shell", "dumpsys", "bluetooth_manager"],
        "adb shell dumpsys bluetooth_manager",
    )
    return parse_bluetooth_name(stdout)


def get_prop(env: AndroidEnv, serial_no: str, prop: str) -> str:
    """Value of a system property on the device."""
    return _checked(env, ["-s", serial_no, "shell", "getprop", prop], f"adb shell getprop {prop}")


def device_list(env: AndroidEnv) -> list[AndroidDevice]:
    """All connected devices, sorted and without duplicates."""
    raw_list = _checked(env, ["devices"], "adb devices")
    devices = set()
    for serial_no in parse_device_serials(raw_list):
        model = get_prop(env, serial_no, "ro.product.model")
        try:
            name = device_name(env, serial_no)
        except AdbError:
            name = model
        abi = get_prop(env, serial_no, "ro.product.cpu.abi")
        target = for_abi(abi)
        if target is None:
            raise AdbError(f'"{abi}" isn\'t a valid target ABI.')
        devices.add(AndroidDevice(serial_no, name, model, target))
    return sorted(devices)