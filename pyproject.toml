[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tagmount"
version = "0.1.0"
description = "Building blocks of a tag-based file system: tag types, device-file names, permissions, configuration, notifications and logging"
requires-python = ">=3.11"
dependencies = [
    "platformdirs",
]
keywords = ["tags", "tagging", "filesystem", "symlinks", "permissions", "notifications"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Operating System :: POSIX :: Linux",
    "Operating System :: MacOS",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["tagmount"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
