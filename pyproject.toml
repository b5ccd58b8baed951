[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ralphloop"
version = "1.3.0"
description = "Building blocks for iterative AI coding-agent loops: option models, model resolution, Claude argument building, stream parsing, loop state and plugin inspection"
requires-python = ">=3.10"
dependencies = []
keywords = ["ai", "agent", "loop", "claude", "codex", "stream-json", "plugins"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ralphloop"]

[tool.pytest.ini_options]
addopts = "-ra"
