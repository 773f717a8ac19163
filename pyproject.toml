[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ecsstore"
version = "0.1.0"
description = "Archetype-based component storage for entity-component-system designs"
requires-python = ">=3.10"
keywords = ["ecs", "entity", "component", "archetype", "game-engine"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Topic :: Games/Entertainment",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ecsstore"]

[tool.pytest.ini_options]
addopts = "-ra"
