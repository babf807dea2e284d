[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wrapkit"
version = "0.1.0"
description = "Composable wrappers that add timeouts, retries, rate limiting, pooling, validation, error enrichment and duration metrics to any object"
requires-python = ">=3.10"
dependencies = []
keywords = ["decorator", "wrapper", "retry", "rate-limit", "timeout", "pool", "metrics", "validation", "context"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["wrapkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
