"""The Android architectures that can be built for."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

NAME = "android"
DEFAULT_ACTIVITY = "android.app.NativeActivity"
DEFAULT_THEME_PARENT = "android:Theme.Material.Light.DarkActionBar"
DEFAULT_KEY = "aarch64"

_UPPER_CAMEL_ARCH = {"arm": "Arm", "arm64": "Arm64", "x86_64": "X86_64", "x86": "X86"}


@dataclass(frozen=True, order=True)
class AndroidTarget:
    """One Android build target: a Rust triple with its ABI and arch names."""

    triple: str
    clang_triple_override: str | None
    binutils_triple_override: str | None
    abi: str
    arch: str

    def clang_triple(self) -> str:
        """Triple used to pick the NDK clang wrapper."""
        return self.clang_triple_override or self.triple

    def binutils_triple(self) -> str:
        """Triple used to pick NDK binutils."""
        return self.binutils_triple_override or self.triple

    def arch_upper_camel_case(self) -> str:
        """Arch name as used in Gradle task names."""
        return _UPPER_CAMEL_ARCH.get(self.arch, self.arch)

    def cargo_rustflags(self) -> list[str]:
        """Linker flags written to the cargo config for this target."""
        return ["-Clink-arg=-landroid", "-Clink-arg=-llog", "-Clink-arg=-lOpenSLES"]


_TARGETS: Mapping[str, AndroidTarget] = MappingProxyType(
    {
        "aarch64": AndroidTarget("aarch64-linux-android", None, None, "arm64-v8a", "arm64"),
        "armv7": AndroidTarget(
            "armv7-linux-androideabi",
            "armv7a-linux-androideabi",
            "arm-linux-androideabi",
            "armeabi-v7a",
            "arm",
        ),
        "i686": AndroidTarget("i686-linux-android", None, None, "x86", "x86"),
        "x86_64": AndroidTarget("x86_64-linux-android", None, None, "x86_64", "x86_64"),
    }
)


def all_targets() -> Mapping[str, AndroidTarget]:
    """All targets keyed by short name, in sorted key order."""
    return _TARGETS


def name_list() -> list[str]:
    """Short names of all targets."""
    return list(_TARGETS)


def for_name(name: str) -> AndroidTarget | None:
    """Look a target up by its short name."""
    return _TARGETS.get(name)


def for_abi(abi: str) -> AndroidTarget | None:
    """Look a target up by its Android ABI."""
    return next((target for target in _TARGETS.values() if target.abi == abi), None)