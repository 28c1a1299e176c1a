[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sharedcockpit"
version = "0.1.0"
description = "Building blocks for sharing a flight simulator cockpit: variable encoding, gauge messaging, event mapping, sync definitions, configuration and update checks."
requires-python = ">=3.10"
keywords = ["flight simulator", "shared cockpit", "synchronisation", "gauge", "websocket"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: Simulation",
]
dependencies = [
    "requests",
    "semver>=3",
    "websockets>=12",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["sharedcockpit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
