[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "respcheck"
version = "0.1.0"
description = "RESP2 values, encoder, decoder, logging connections and reference data models for checking Redis-compatible servers"
requires-python = ">=3.10"
dependencies = []
keywords = ["redis", "resp", "protocol", "testing", "rdb", "geohash", "sorted-set"]
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
    "Topic :: Software Development :: Testing",
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["respcheck"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
