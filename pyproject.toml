[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "layerdive"
version = "0.1.0"
description = "Model container image layers as file trees, stack and compare them, and score wasted space"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "docker",
    "podman",
    "container",
    "image",
    "layers",
    "overlay",
    "whiteout",
    "efficiency",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Archiving :: Packaging",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["layerdive"]

[tool.hatch.build.targets.sdist]
include = [
    "layerdive",
    "tests",
]

[tool.pytest.ini_options]
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
