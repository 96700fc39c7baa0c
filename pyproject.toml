[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mniam"
version = "0.1.0"
description = "A bot player for the mniAM arena game, speaking the AMCOM packet protocol over TCP"
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "bot", "protocol", "amcom", "mniam"]
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
    "Topic :: Games/Entertainment :: Arcade",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
mniam-player = "mniam.client:main"

[tool.hatch.build.targets.wheel]
packages = ["mniam"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
