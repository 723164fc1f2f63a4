[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "studweb"
version = "0.1.0"
description = "Relational storage layer for a student organisations web service: members, clubs with organisers and photos, events, feed posts and encounters."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "postgresql",
    "repository",
    "dbapi",
    "clubs",
    "students",
    "data-access",
]
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
    "Topic :: Database",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["studweb"]

[tool.hatch.build.targets.sdist]
include = ["studweb", "tests"]

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
