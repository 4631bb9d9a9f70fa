[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "easyorm"
version = "0.1.0"
description = "A small ORM: model registry, SELECT statement building, SQL dialects and row mapping over DB-API connections"
requires-python = ">=3.10"
dependencies = []
keywords = ["orm", "sql", "query-builder", "database", "dialect", "sqlite", "db-api"]
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
    "Topic :: Database :: Front-Ends",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["easyorm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
