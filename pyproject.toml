[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tpchq5"
version = "0.1.0"
description = "Run TPC-H Query 5 (local supplier volume) over pipe-delimited .tbl files"
requires-python = ">=3.10"
dependencies = []
keywords = ["tpch", "query5", "benchmark", "database", "join"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Topic :: System :: Benchmark",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tpchq5 = "tpchq5.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["tpchq5"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
