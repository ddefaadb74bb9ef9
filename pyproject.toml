[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jsonscan"
version = "0.1.0"
description = "A streaming JSON scanner with typed number reading, validating and fast skipping, raw capture and container decoders"
requires-python = ">=3.10"
dependencies = []
keywords = ["json", "parser", "streaming", "iterator", "scanner"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["jsonscan"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
