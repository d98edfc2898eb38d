[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "refereelink"
version = "0.1.0"
description = "Serial protocol codec, CRC checks and client UI drawing for a robot competition referee system"
requires-python = ">=3.10"
dependencies = [
    "pyserial",
]
keywords = [
    "referee",
    "serial",
    "protocol",
    "crc",
    "robotics",
    "ui",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
    "Topic :: Communications",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["refereelink"]

[tool.hatch.build.targets.sdist]
include = [
    "refereelink",
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
