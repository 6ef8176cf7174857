[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "elevate"
version = "0.1.0"
description = "Privilege-elevation building blocks: sudo and su argument parsing, sudoers defaults, environment filtering, command resolution and process backchannels"
requires-python = ">=3.10"
dependencies = []
keywords = ["sudo", "su", "privilege", "environment", "sudoers", "cli"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
elevate-su = "elevate.su_cli:main"

[tool.hatch.build.targets.wheel]
packages = ["elevate"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
