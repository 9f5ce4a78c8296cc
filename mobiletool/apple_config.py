"""Apple project settings: property-list pairs, bundle versions and per-platform metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Union

from mobiletool.versions import (
    VersionError,
    VersionNumber,
    VersionTriple,
    parse_version_number,
    parse_version_triple,
)

DEFAULT_PROJECT_DIR = "gen/apple"
DEFAULT_BUNDLE_VERSION = VersionNumber(VersionTriple(1, 0, 0), None)
DEFAULT_IOS_VERSION = (13, 0)
DEFAULT_MACOS_VERSION = (11, 0)


class AppleConfigError(ValueError):
    """Raised when Apple configuration or metadata is invalid."""


@dataclass(frozen=True)
class PlistPair:
    """A key and its property-list value."""

    key: str
    value: PlistValue

    def __str__(self) -> str:
        return pair_to_string(self.key, self.value)


@dataclass(frozen=True)
class PlistDictionary:
    """A property-list dictionary, kept as an ordered list of pairs."""

    dictionary: tuple[PlistPair, ...] = ()

    def __str__(self) -> str:
        return dictionary_to_string(self)


PlistValue = Union[bool, str, list, PlistDictionary]


def plist_value_to_string(value: PlistValue) -> str:
    """Render a property-list value the way the project template expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, PlistDictionary):
        return dictionary_to_string(value)
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(plist_value_to_string(item) for item in value) + "]"
    raise AppleConfigError(f"unsupported plist value: {value!r}")


def pair_to_string(key: str, value: PlistValue) -> str:
    """Render ``key: value``."""
    return f"{key}: {plist_value_to_string(value)}"


def dictionary_to_string(dictionary: PlistDictionary) -> str:
    """Render a dictionary as ``{key: value,...}``."""
    joint = ",".join(pair_to_string(pair.key, pair.value) for pair in dictionary.dictionary)
    return "{" + joint + "}"


def _parse_pair(data: Any) -> PlistPair:
    if not isinstance(data, Mapping) or "key" not in data or "value" not in data:
        raise AppleConfigError(f"plist pair must have `key` and `value`: {data!r}")
    key = data["key"]
    if not isinstance(key, str):
        raise AppleConfigError(f"plist pair key must be a string: {key!r}")
    return PlistPair(key, parse_plist_value(data["value"]))


def parse_plist_value(data: Any) -> PlistValue:
    """Turn decoded configuration data into a property-list value."""
    if isinstance(data, (bool, str)):
        return data
    if isinstance(data, (list, tuple)):
        return [parse_plist_value(item) for item in data]
    if isinstance(data, Mapping):
        pairs = data.get("dictionary")
        if not isinstance(pairs, (list, tuple)):
            raise AppleConfigError(f"plist dictionary must hold a `dictionary` list: {data!r}")
        return PlistDictionary(tuple(_parse_pair(pair) for pair in pairs))
    raise AppleConfigError(f"data did not match any plist value: {data!r}")


def parse_plist_pairs(data: Any) -> list[PlistPair]:
    """Parse the ``plist-pairs`` list of a configuration."""
    if data is None:
        return []
    if not isinstance(data, (list, tuple)):
        raise AppleConfigError(f"`plist-pairs` must be a list: {data!r}")
    return [_parse_pair(pair) for pair in data]


@dataclass(frozen=True)
class VersionInfo:
    """The long bundle version and the short one, either of which may be absent."""

    version_number: VersionNumber | None = None
    short_version_number: VersionTriple | None = None


def parse_version_info(version: str | None, short_version: str | None) -> VersionInfo:
    """Parse and cross-check ``bundle-version`` and ``bundle-version-short``."""
    version_number = None
    if version is not None:
        try:
            version_number = parse_version_number(version)
        except VersionError as err:
            raise AppleConfigError(
                f"`apple.app-version` short and long version number don't match: {err}"
            ) from err
    short_version_number = None
    if short_version is not None:
        try:
            short_version_number = parse_version_triple(short_version)
        except VersionError as err:
            raise AppleConfigError(f"`apple.app-version` invalid: {err}") from err
    if short_version_number is not None and version_number is None:
        raise AppleConfigError(
            "`apple.app-version` `bundle-version-short` cannot be specified without also "
            "specifying `bundle-version`"
        )
    if (
        version_number is not None
        and short_version_number is not None
        and version_number.triple != short_version_number
    ):
        raise AppleConfigError("`apple.app-version` short and long version number don't match")
    return VersionInfo(version_number, short_version_number)


@dataclass
class Platform:
    """Build settings for one Apple platform (iOS or macOS)."""

    no_default_features: bool = False
    cargo_args: list[str] | None = None
    features: list[str] | None = None
    libraries: list[str] = field(default_factory=list)
    frameworks: list[str] = field(default_factory=list)
    valid_archs: list[str] | None = None
    vendor_frameworks: list[str] = field(default_factory=list)
    vendor_sdks: list[str] = field(default_factory=list)
    asset_catalogs: list[Path] | None = None
    pods: list[Any] | None = None
    pod_options: list[str] | None = None
    additional_targets: list[Path] | None = None
    pre_build_scripts: list[dict] | None = None
    post_compile_scripts: list[dict] | None = None
    post_build_scripts: list[dict] | None = None
    command_line_arguments: list[str] = field(default_factory=list)


def _get_bool(data: Mapping, key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise AppleConfigError(f"`{key}` must be a boolean: {value!r}")
    return value


def _get_list(data: Mapping, key: str) -> list | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, (list, tuple)):
        raise AppleConfigError(f"`{key}` must be a list: {value!r}")
    return list(value)


def _get_str_list(data: Mapping, key: str) -> list[str] | None:
    values = _get_list(data, key)
    if values is not None and not all(isinstance(v, str) for v in values):
        raise AppleConfigError(f"`{key}` must be a list of strings: {values!r}")
    return values


def _get_path_list(data: Mapping, key: str) -> list[Path] | None:
    values = _get_str_list(data, key)
    return None if values is None else [Path(v) for v in values]


def _get_script_list(data: Mapping, key: str) -> list[dict] | None:
    values = _get_list(data, key)
    if values is not None and not all(isinstance(v, Mapping) for v in values):
        raise AppleConfigError(f"`{key}` must be a list of tables: {values!r}")
    return None if values is None else [dict(v) for v in values]


def parse_platform(data: Mapping | None) -> Platform:
    """Build a :class:`Platform` from a kebab-case table; unknown keys are ignored."""
    if data is None:
        return Platform()
    if not isinstance(data, Mapping):
        raise AppleConfigError(f"platform metadata must be a table: {data!r}")
    return Platform(
        no_default_features=_get_bool(data, "no-default-features", False),
        cargo_args=_get_str_list(data, "cargo-args"),
        features=_get_str_list(data, "features"),
        libraries=_get_str_list(data, "libraries") or [],
        frameworks=_get_str_list(data, "frameworks") or [],
        valid_archs=_get_str_list(data, "valid-archs"),
        vendor_frameworks=_get_str_list(data, "vendor-frameworks") or [],
        vendor_sdks=_get_str_list(data, "vendor-sdks") or [],
        asset_catalogs=_get_path_list(data, "asset-catalogs"),
        pods=_get_list(data, "pods"),
        pod_options=_get_str_list(data, "pod-options"),
        additional_targets=_get_path_list(data, "additional-targets"),
        pre_build_scripts=_get_script_list(data, "pre-build-scripts"),
        post_compile_scripts=_get_script_list(data, "post-compile-scripts"),
        post_build_scripts=_get_script_list(data, "post-build-scripts"),
        command_line_arguments=_get_str_list(data, "command-line-arguments") or [],
    )


@dataclass
class AppleMetadata:
    """Apple section of the project metadata."""

    supported: bool = True
    ios: Platform = field(default_factory=Platform)
    macos: Platform = field(default_factory=Platform)


def parse_apple_metadata(data: Mapping | None) -> AppleMetadata:
    """Build :class:`AppleMetadata` from a decoded table."""
    if data is None:
        return AppleMetadata()
    if not isinstance(data, Mapping):
        raise AppleConfigError(f"apple metadata must be a table: {data!r}")
    return AppleMetadata(
        supported=_get_bool(data, "supported", True),
        ios=parse_platform(data.get("ios")),
        macos=parse_platform(data.get("macos")),
    )