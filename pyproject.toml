[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gamelang"
version = "0.1.0"
description = "Build and run turn-based games from the syntax tree of a small game-definition language"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "game",
    "interpreter",
    "dsl",
    "game-theory",
    "turn-based",
    "payoff",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Interpreters",
    "Topic :: Games/Entertainment :: Turn Based Strategy",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gamelang"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
