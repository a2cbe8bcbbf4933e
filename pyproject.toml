[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "aptshelf"
version = "0.1.0"
description = "Read and edit APT configuration, sources lists, history logs and .deb archives"
requires-python = ">=3.10"
dependencies = [
    "zstandard",
]
keywords = ["apt", "debian", "deb", "sources.list", "apt.conf", "dependencies", "packaging"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Archiving :: Packaging",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["aptshelf"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
