[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cordless"
version = "0.1.0"
description = "Building blocks of a terminal chat client: command parsing, configuration, themes, shortcuts, read markers, a channel tree and chat commands."
requires-python = ">=3.10"
dependencies = [
    "pygments",
]
keywords = ["chat", "terminal", "tui", "client", "shortcuts", "themes", "commands"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["cordless"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
