[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ludoserver"
version = "0.1.0"
description = "A WebSocket server for two-player Ludo games"
requires-python = ">=3.10"
keywords = ["ludo", "board game", "websocket", "multiplayer", "game server"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Games/Entertainment :: Board Games",
]
dependencies = [
    "websockets",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
ludoserver = "ludoserver.server:main"

[tool.hatch.build.targets.wheel]
packages = ["ludoserver"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
