[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tcpslots"
version = "0.1.0"
description = "A small TCP text server with a fixed number of client slots and a line-based console"
requires-python = ">=3.10"
dependencies = []
keywords = ["tcp", "server", "socket", "console", "threading"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tcpslots = "tcpslots.app:main"

[tool.hatch.build.targets.wheel]
packages = ["tcpslots"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
