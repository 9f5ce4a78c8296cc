"""Version numbers: a major.minor.patch triple with optional extra parts."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering

_U32_MAX = 2**32 - 1
_NUMBER = re.compile(r"\+?[0-9]+")


class VersionError(ValueError):
    """Raised when a version string can't be parsed."""


def _parse_component(text: str, whole: str, what: str) -> int:
    if not _NUMBER.fullmatch(text):
        raise VersionError(f"Failed to parse {what} from {whole!r}: invalid number {text!r}")
    value = int(text)
    if value > _U32_MAX:
        raise VersionError(f"Failed to parse {what} from {whole!r}: number too large")
    return value


@dataclass(frozen=True, order=True)
class VersionTriple:
    """A major.minor.patch version."""

    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_version_triple(text: str) -> VersionTriple:
    """Parse one to three dot-separated numbers; missing parts are zero."""
    parts = text.split(".")
    if len(parts) > 3:
        raise VersionError(f"Failed to parse version triple from {text!r}: too many components")
    names = ("major version", "minor version", "patch version")
    numbers = [_parse_component(part, text, name) for part, name in zip(parts, names)]
    numbers.extend([0] * (3 - len(numbers)))
    return VersionTriple(*numbers)


@total_ordering
@dataclass
class VersionNumber:
    """A version triple followed by any number of extra numeric parts."""

    triple: VersionTriple
    extra: list[int] | None = None

    def _key(self) -> tuple:
        return (self.triple, self.extra is not None, self.extra or [])

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, VersionNumber):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        text = str(self.triple)
        if self.extra is not None:
            text += "".join(f".{number}" for number in self.extra)
        return text

    def push_extra(self, number: int) -> None:
        """Append an extra numeric part, creating the list if needed."""
        if self.extra is None:
            self.extra = []
        self.extra.append(number)


def parse_version_number(text: str) -> VersionNumber:
    """Parse a version such as ``1.2.3`` or ``1.2.3.4.5``."""
    parts = text.split(".")
    if len(parts) <= 3:
        return VersionNumber(parse_version_triple(text), None)
    triple = parse_version_triple(".".join(parts[:3]))
    extra = [_parse_component(part, text, "extra version") for part in parts[3:]]
    return VersionNumber(triple, extra)