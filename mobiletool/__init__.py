"""Helpers for Android and Apple toolchains, device queries and app deployment."""

__version__ = "0.1.0"

__all__ = [
    "adb",
    "android_env",
    "android_targets",
    "apple_config",
    "apple_deploy",
    "emulator",
    "ndk",
    "source_props",
    "system_profile",
    "teams",
    "versions",
]