[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "toybox"
version = "0.1.0"
description = "A small multi-call command toolkit with compact option-string parsing and shared file helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["toybox", "multi-call", "getopt", "option-parsing", "command-line", "utilities"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
toybox = "toybox.main:main"

[tool.hatch.build.targets.wheel]
packages = ["toybox"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
