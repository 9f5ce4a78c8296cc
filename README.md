# mobiletool

A library of helpers for the native toolchains used when building libraries
for Android and Apple platforms. It is used from Python code; it has no
command-line entry point.

## What it covers

- `mobiletool.versions` — `parse_version_triple` and `parse_version_number`
  for dotted versions such as `1.2` or `1.2.3.4.5`; `VersionTriple`,
  `VersionNumber` (with `push_extra`) and `VersionError`.
- `mobiletool.source_props` — `read_properties` parses Java-style properties
  text, `parse_revision` reads revisions such as `25.1.0-beta2`, and
  `load_source_props` reads a `source.properties` file and its
  `Pkg.Revision`, raising `SourcePropsError` on failure.
- `mobiletool.android_targets` — the four Android targets (`aarch64`,
  `armv7`, `i686`, `x86_64`) as `AndroidTarget` values, with `all_targets`,
  `name_list`, `for_name` and `for_abi`, and per-target `clang_triple`,
  `binutils_triple`, `arch_upper_camel_case` and `cargo_rustflags`.
- `mobiletool.ndk` — `load_ndk_env` finds the NDK through `NDK_HOME` and
  requires at least NDK r19; `NdkEnv` locates the prebuilt toolchain,
  compilers, `ar`, `readelf` and `libc++_shared.so`, raising
  `MissingToolError` when a file or directory is absent. `required_libs`
  runs `readelf -d` and returns the shared libraries an ELF file needs;
  `parse_required_libs` does the parsing on its own.
- `mobiletool.android_env` — `find_android_home` uses `ANDROID_HOME`,
  falling back to `ANDROID_SDK_ROOT`; `load_android_env` combines it with
  the NDK into an `AndroidEnv`, whose `explicit_env` gives the variables
  passed to child processes.
- `mobiletool.adb` — `device_list`, `device_name` and `get_prop` query
  devices through the SDK's `adb`; `check_authorized` raises
  `RunCheckedError` when a device hasn't trusted this computer. The parsers
  `parse_device_serials`, `parse_bluetooth_name` and `parse_emulator_name`
  work on plain text.
- `mobiletool.emulator` — `avd_list` and `parse_avd_list` list Android
  virtual devices; `Emulator.start` and `Emulator.start_detached` boot one.
- `mobiletool.system_profile` — `developer_tools_version` runs
  `system_profiler SPDeveloperToolsDataType` and returns the Xcode version
  as `(major, minor)`.
- `mobiletool.teams` — `find_development_teams` reads development
  certificates from the keychain with `security find-certificate` and
  returns sorted, distinct `Team` values; `teams_from_pem` and
  `team_from_certificate` work on certificate data directly.
- `mobiletool.apple_config` — property-list values (`PlistPair`,
  `PlistDictionary`, `parse_plist_value`, `plist_value_to_string`), bundle
  version checking (`parse_version_info`) and per-platform metadata
  (`parse_platform`, `parse_apple_metadata`).
- `mobiletool.apple_deploy` — `simctl_run` installs and launches an app on
  a simulator, `ios_deploy_run` does the same on a device through
  `ios-deploy`; both then follow the app's log unless run non-interactively.

## Installation

```
pip install .
```

## Examples

Parse versions:

```python
from mobiletool.versions import parse_version_number

version = parse_version_number("1.2.3.4")
version.push_extra(5)
print(version)  # 1.2.3.4.5
```

Look up Android targets:

```python
from mobiletool import android_targets

target = android_targets.for_abi("armeabi-v7a")
print(target.triple)                   # armv7-linux-androideabi
print(target.clang_triple())           # armv7a-linux-androideabi
print(target.arch_upper_camel_case())  # Arm
```

List connected Android devices:

```python
from mobiletool.adb import device_list
from mobiletool.android_env import load_android_env

env = load_android_env()
for device in device_list(env):
    print(device.serial_no, device)
```

Check an Apple bundle version against its short form:

```python
from mobiletool.apple_config import parse_version_info

info = parse_version_info("1.2.3.7", "1.2.3")
print(info.version_number)  # 1.2.3.7
```

Errors are raised as exceptions, for example `MissingToolError` when an NDK
tool can't be found, `AdbError` when a device can't be queried, or
`AppleConfigError` when metadata is invalid.

## What it does not do

The package does not run Gradle or build APKs or app bundles, does not
install or call `bundletool`, and has no Android run command that installs
an app and follows logcat. On the Apple side it has no `xcodebuild`
build, archive or export step and does not discover connected devices or
simulators; `apple_deploy` expects the app bundle and the device or
simulator identifier to be given to it.

## Tests

```
pip install .[test]
pytest
```