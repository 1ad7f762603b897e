[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "clusterpedia"
version = "0.1.0"
description = "Building blocks for multi-cluster resource tracking: API identifiers, version ordering, dependent resource tracking, request routing and policy ownership helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "multi-cluster", "informer", "controller", "api-versions"]
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
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["clusterpedia"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
