[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hacformats"
version = "0.5.1"
description = "Parsers and builders for console system file-format structures: kernel capabilities, content metadata records, integrity headers, INI1, file-system access control and game-card headers."
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = ["binary", "file-format", "parser", "kernel-capabilities", "cnmt", "gamecard", "ivfc"]
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
    "Topic :: File Formats",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["hacformats"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
