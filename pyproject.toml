[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "graphkit"
version = "0.1.0"
description = "Graph analytics kernels, adjacency-list compression codecs and small numeric helpers"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "graph",
    "bfs",
    "sssp",
    "triangle-counting",
    "compression",
    "streamvbyte",
    "gamma-code",
    "zeta-code",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Information Analysis",
    "Topic :: System :: Archiving :: Compression",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["graphkit"]

[tool.hatch.build.targets.sdist]
include = [
    "graphkit",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
