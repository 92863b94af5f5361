[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wschat"
version = "0.1.0"
description = "A terminal WebSocket chat client with a user list, message history and HTML views"
requires-python = ">=3.10"
keywords = ["chat", "websocket", "client", "messaging", "asyncio"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Framework :: AsyncIO",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
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
wschat = "wschat.app:main"

[tool.hatch.build.targets.wheel]
packages = ["wschat"]

[tool.pytest.ini_options]
addopts = "-ra"
