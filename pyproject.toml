[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "schemacheck"
version = "0.1.0"
description = "JSON Schema (draft 2020-12) objects, JSON Pointers, schema inference from Python types, and JSON value helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["json", "json-schema", "json-pointer", "schema", "draft-2020-12"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: File Formats :: JSON :: JSON Schema",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["schemacheck"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
