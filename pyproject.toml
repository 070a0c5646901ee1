[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dstore"
version = "0.1.0"
description = "Key-value datastore query model with in-memory query operators, a coarse-lock wrapper and a retrying wrapper"
requires-python = ">=3.10"
dependencies = []
keywords = ["datastore", "key-value", "query", "storage"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dstore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
