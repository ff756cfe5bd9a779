[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "argusrts"
version = "0.1.0"
description = "Entity-component core for a real-time strategy game, with a k-d tree, entity timers and a component registry code generator"
requires-python = ">=3.10"
dependencies = []
keywords = ["rts", "ecs", "entity-component-system", "kd-tree", "game", "code-generation"]
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
    "Topic :: Games/Entertainment :: Real Time Strategy",
    "Topic :: Software Development :: Code Generators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
argusrts-generate-registry = "argusrts.registry_generator:main"

[tool.hatch.build.targets.wheel]
packages = ["argusrts"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
