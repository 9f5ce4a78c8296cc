[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mobiletool"
version = "0.1.0"
description = "Helpers for locating Android and Apple toolchains, querying devices and deploying apps"
requires-python = ">=3.10"
keywords = ["android", "ios", "ndk", "adb", "xcode", "simctl", "emulator", "build"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["mobiletool"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
