[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dysk"
version = "2.10.1"
description = "Give information on mounted filesystems"
requires-python = ">=3.10"
keywords = ["linux", "filesystem", "fs", "disk", "df", "mounts", "inodes"]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
    "Topic :: Utilities",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
dysk = "dysk.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["dysk"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
