[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "remoteplayer"
version = "0.1.0"
description = "Stream game controller state over UDP and feed it to emulated Xbox 360 controllers"
requires-python = ">=3.10"
dependencies = ["pygame"]
keywords = ["gamepad", "joystick", "controller", "udp", "remote play", "xbox 360"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
remoteplayer-client = "remoteplayer.client:main"
remoteplayer-server = "remoteplayer.server:main"
remoteplayer-mirror = "remoteplayer.mirror:main"
remoteplayer-viewer = "remoteplayer.viewer:main"

[tool.hatch.build.targets.wheel]
packages = ["remoteplayer"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
