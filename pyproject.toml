[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "voidengine"
version = "0.1.0"
description = "Archetype-based entity component system, layer stack and balanced search trees for small game engines"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "ecs",
    "entity-component-system",
    "archetype",
    "game-engine",
    "layer-stack",
    "avl-tree",
    "red-black-tree",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["voidengine"]

[tool.hatch.build.targets.sdist]
include = ["voidengine", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
check_untyped_defs = true
