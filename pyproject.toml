[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "signalstash"
version = "0.1.0"
description = "HTTP service that ingests protobuf sensor readings into RedisTimeSeries"
requires-python = ">=3.10"
keywords = ["sensor", "protobuf", "redis", "timeseries", "ingest", "http"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: AsyncIO",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "starlette",
    "uvicorn",
    "redis",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
    "httpx",
]

[project.scripts]
signalstash = "signalstash.application:main"
signalstash-gen-sample = "signalstash.sensor:main"

[tool.hatch.build.targets.wheel]
packages = ["signalstash"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
