"""Reading ``source.properties`` files shipped with Android SDK components."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

from mobiletool.versions import VersionError, VersionTriple, parse_version_triple

_REVISION = re.compile(
    r"(?P<version>(?P<major>[0-9]+)\.(?P<minor>[0-9]+)\.(?P<patch>[0-9]+)(-beta(?P<beta>[0-9]+))?)"
)
_U32_MAX = 2**32 - 1


class RevisionError(ValueError):
    """Raised when a revision string can't be parsed."""


class SourcePropsError(Exception):
    """Raised when a ``source.properties`` file can't be read or understood."""

    def __init__(self, message: str, path: Path):
        super().__init__(message)
        self.path = path


@dataclass(frozen=True)
class Revision:
    """A package revision, possibly a beta."""

    triple: VersionTriple = VersionTriple(0, 0, 0)
    beta: int | None = None

    def __str__(self) -> str:
        text = str(self.triple)
        if self.beta is not None:
            text += f"-beta{self.beta}"
        return text


def parse_revision(text: str) -> Revision:
    """Find and parse the first revision in ``text``."""
    match = _REVISION.search(text)
    if match is None:
        raise RevisionError(f"Failed to match regex in string {text!r}")
    version = match.group("version")
    try:
        triple = parse_version_triple(
            f"{match.group('major')}.{match.group('minor')}.{match.group('patch')}"
        )
    except VersionError as err:
        raise RevisionError(str(err)) from err
    beta_text = match.group("beta")
    beta = None
    if beta_text is not None:
        beta = int(beta_text)
        if beta > _U32_MAX:
            raise RevisionError(f"Failed to parse beta version from {version!r}: number too large")
    return Revision(triple, beta)


_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def _unescape(text: str) -> str:
    out = []
    chars = iter(enumerate(text))
    for index, char in chars:
        if char != "\\":
            out.append(char)
            continue
        nxt = next(chars, None)
        if nxt is None:
            break
        _, escaped = nxt
        if escaped == "u":
            digits = text[index + 2 : index + 6]
            if len(digits) == 4 and all(c in "0123456789abcdefABCDEF" for c in digits):
                out.append(chr(int(digits, 16)))
                for _ in range(4):
                    next(chars, None)
                continue
        out.append(_ESCAPES.get(escaped, escaped))
    return "".join(out)


def _logical_lines(text: str):
    pending = None
    for raw in text.splitlines():
        line = raw.lstrip(" \t\f")
        if pending is None:
            if not line or line[0] in "#!":
                continue
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending = (pending or "") + line[:-1]
            continue
        yield (pending or "") + line
        pending = None
    if pending is not None:
        yield pending


def _split_key_value(line: str) -> tuple[str, str]:
    index = 0
    escaped = False
    while index < len(line):
        char = line[index]
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char in "=: \t\f":
            break
        index += 1
    key = line[:index]
    rest = line[index:].lstrip(" \t\f")
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(" \t\f")
    return _unescape(key), _unescape(rest)


def read_properties(text: str) -> dict[str, str]:
    """Parse Java-style properties text into a dictionary."""
    return dict(_split_key_value(line) for line in _logical_lines(text))


@dataclass(frozen=True)
class SourceProps:
    """The parts of a ``source.properties`` file this tool relies on."""

    revision: Revision
    properties: dict[str, str] = field(default_factory=dict)


def load_source_props(path) -> SourceProps:
    """Load ``path`` and extract its ``Pkg.Revision``."""
    path = Path(path)
    try:
        text = path.read_text(encoding="latin-1")
    except OSError as err:
        raise SourcePropsError(f"Failed to open {str(path)!r}: {err}", path) from err
    properties = read_properties(text)
    raw_revision = properties.get("Pkg.Revision")
    if raw_revision is None:
        raise SourcePropsError(
            f"Failed to parse `Pkg` in {str(path)!r}: `Pkg.Revision` missing.", path
        )
    try:
        revision = parse_revision(raw_revision)
    except RevisionError as err:
        raise SourcePropsError(
            f"Failed to parse `Pkg` in {str(path)!r}: Failed to parse `Pkg.Revision`: {err}", path
        ) from err
    return SourceProps(revision, properties)