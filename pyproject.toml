[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "visionledger"
version = "1.2.2"
description = "In-memory ledger-style state engine for vision-care systems: roles and permissions, provider registry, rate limiting and proof-backed access verification with an audit trail."
requires-python = ">=3.10"
dependencies = [
    "pycryptodome",
]
keywords = [
    "medical-records",
    "rbac",
    "rate-limiting",
    "access-control",
    "zero-knowledge",
    "audit",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Healthcare Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Medical Science Apps.",
    "Topic :: Security",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["visionledger"]

[tool.hatch.build.targets.sdist]
include = [
    "visionledger",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"
