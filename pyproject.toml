[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xpruntime"
version = "0.1.0"
description = "Building blocks for resource controllers: field paths, conditions, object metadata, events, feature flags, logging and error wrapping."
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "controller", "fieldpath", "conditions", "metadata", "events"]
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
    "Topic :: Software Development :: Libraries",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["xpruntime"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
