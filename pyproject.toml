[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "servicekit"
version = "0.1.0"
description = "Building blocks for web services: CSRF tokens, JSON logging, status responses, a traced HTTP client, request logging hooks, Redis and PostgreSQL connection helpers."
requires-python = ">=3.10"
keywords = ["csrf", "logging", "json", "flask", "middleware", "redis", "postgres", "tracing"]
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
    "Framework :: Flask",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]
dependencies = [
    "flask",
    "requests",
    "redis",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["servicekit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
