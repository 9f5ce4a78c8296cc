"""Locating and inspecting the Android NDK."""

from __future__ import annotations

import enum
import os
import re
import string
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from mobiletool.android_targets import AndroidTarget
from mobiletool.source_props import Revision, SourcePropsError, load_source_props

if sys.platform.startswith("win"):
    CLANG = "clang.cmd"
    CLANGXX = "clang++.cmd"
    LD = "ld.exe"
    AR = "ar.exe"
    READELF = "readelf.exe"
else:
    CLANG = "clang"
    CLANGXX = "clang++"
    LD = "ld"
    AR = "ar"
    READELF = "readelf"

_NEEDED = re.compile(r"\(NEEDED\)\s+Shared library: \[(.+)\]", re.MULTILINE)
_LIBCXX_SHARED = "libc++_shared.so"


def host_tag() -> str:
    """Name of the NDK prebuilt directory for the running host."""
    if sys.platform == "darwin":
        return "darwin-x86_64"
    if sys.platform.startswith("win"):
        return "windows-x86_64" if sys.maxsize > 2**32 else "windows"
    return "linux-x86_64"


class Compiler(enum.Enum):
    CLANG = "clang"
    CLANGXX = "clangxx"

    @property
    def tool_name(self) -> str:
        return CLANG if self is Compiler.CLANG else CLANGXX


class Binutil(enum.Enum):
    LD = "ld"

    @property
    def tool_name(self) -> str:
        return LD


@dataclass(frozen=True, order=True)
class NdkVersion:
    """An NDK release such as r19 or r21b."""

    major: int
    minor: int

    def __post_init__(self):
        if self.minor >= len(string.ascii_lowercase):
            raise ValueError("NDK minor version exceeded the number of letters in the alphabet")

    def __str__(self) -> str:
        suffix = string.ascii_lowercase[self.minor] if self.minor else ""
        return f"r{self.major}{suffix}"

    @classmethod
    def from_revision(cls, revision: Revision) -> NdkVersion:
        return cls(revision.triple.major, revision.triple.minor)


MIN_NDK_VERSION = NdkVersion(19, 0)


class MissingToolError(Exception):
    """Raised when an expected NDK tool or directory isn't there."""

    def __init__(self, name: str, tried_path: Path):
        super().__init__(f'Missing tool `{name}`; tried at "{tried_path}".')
        self.name = name
        self.tried_path = tried_path

    @classmethod
    def check_file(cls, path: Path, name: str) -> Path:
        if path.is_file():
            return path
        raise cls(name, path)

    @classmethod
    def check_dir(cls, path: Path, name: str) -> Path:
        if path.is_dir():
            return path
        raise cls(name, path)


class NdkError(Exception):
    """Raised when the NDK environment is unusable."""


def parse_required_libs(readelf_output: str) -> set[str]:
    """Shared libraries listed as NEEDED in ``readelf -d`` output."""
    return {match.group(1) for match in _NEEDED.finditer(readelf_output)}


@dataclass(frozen=True)
class NdkEnv:
    """An installed NDK."""

    ndk_home: Path

    def version(self) -> Revision:
        """Revision read from the NDK's ``source.properties``."""
        return load_source_props(self.ndk_home / "source.properties").revision

    def _version_or_default(self) -> Revision:
        try:
            return self.version()
        except SourcePropsError:
            return Revision()

    def prebuilt_dir(self) -> Path:
        return MissingToolError.check_dir(
            self.ndk_home / "toolchains" / "llvm" / "prebuilt" / host_tag(),
            "prebuilt toolchain",
        )

    def tool_dir(self) -> Path:
        return MissingToolError.check_dir(self.prebuilt_dir() / "bin", "tools")

    def compiler_path(self, compiler: Compiler, triple: str, min_api: int) -> Path:
        name = compiler.tool_name
        return MissingToolError.check_file(self.tool_dir() / f"{triple}{min_api}-{name}", name)

    def binutil_path(self, binutil: Binutil, triple: str) -> Path:
        name = binutil.tool_name
        return MissingToolError.check_file(self.tool_dir() / f"{triple}-{name}", name)

    def libcxx_shared_path(self, target: AndroidTarget) -> Path:
        if self._version_or_default().triple.major >= 22:
            ndk_triple = (
                "arm-linux-androideabi"
                if target.triple == "armv7-linux-androideabi"
                else target.triple
            )
            so_dir = self.prebuilt_dir() / "sysroot" / "usr" / "lib" / ndk_triple
        else:
            so_dir = self.ndk_home / "sources" / "cxx-stl" / "llvm-libc++" / "libs" / target.abi
        return MissingToolError.check_file(so_dir / _LIBCXX_SHARED, _LIBCXX_SHARED)

    def _llvm_tool(self, triple: str, tool: str, name: str) -> Path:
        if self._version_or_default().triple.major >= 23:
            file_name = f"llvm-{tool}"
        else:
            file_name = f"{triple}-{tool}"
        return MissingToolError.check_file(self.tool_dir() / file_name, name)

    def ar_path(self, triple: str) -> Path:
        return self._llvm_tool(triple, AR, "ar")

    def readelf_path(self, triple: str) -> Path:
        return self._llvm_tool(triple, READELF, "readelf")

    def required_libs(self, elf, triple: str) -> set[str]:
        """Shared libraries that ``elf`` depends on."""
        readelf = self.readelf_path(triple)
        try:
            result = subprocess.run(
                [str(readelf), "-d", str(Path(elf))],
                capture_output=True,
                check=True,
            )
            output = result.stdout.decode("utf-8")
        except (OSError, subprocess.CalledProcessError) as err:
            raise NdkError(f"Failed to get list of required libs: {err}") from err
        except UnicodeDecodeError as err:
            raise NdkError(f"`readelf` output contained invalid UTF-8: {err}") from err
        return parse_required_libs(output)


def load_ndk_env(environ: Mapping[str, str] | None = None) -> NdkEnv:
    """Find the NDK via ``NDK_HOME`` and check that it's new enough."""
    environ = os.environ if environ is None else environ
    raw_home = environ.get("NDK_HOME")
    if raw_home is None:
        raise NdkError(
            "Have you installed the NDK? The `NDK_HOME` environment variable isn't set, "
            "and is required: environment variable not found"
        )
    home = Path(raw_home)
    if not home.is_dir():
        raise NdkError(
            "Have you installed the NDK? The `NDK_HOME` environment variable is set, but "
            "doesn't point to an existing directory."
        )
    env = NdkEnv(home)
    try:
        version = NdkVersion.from_revision(env.version())
    except SourcePropsError as err:
        raise NdkError(f"Failed to lookup version of installed NDK: {err}") from err
    if version < MIN_NDK_VERSION:
        raise NdkError(
            f"At least NDK {MIN_NDK_VERSION} is required (you currently have NDK {version})"
        )
    return env