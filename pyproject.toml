[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "filewatch"
version = "0.1.0"
description = "Watch several log files and page through their combined lines in a terminal pager"
requires-python = ">=3.10"
dependencies = [
    "watchdog",
]
keywords = ["tail", "logs", "watch", "pager", "terminal", "sqlite", "curses"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console :: Curses",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Logging",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
filewatch = "filewatch.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["filewatch"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
