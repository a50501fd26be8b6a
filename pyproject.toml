[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "semisparse"
version = "0.1.0"
description = "Dense and semi-sparse tensors with chunked storage, text I/O and layout conversions"
requires-python = ">=3.10"
keywords = ["tensor", "sparse", "semi-sparse", "coo", "multilinear algebra"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["semisparse"]

[tool.pytest.ini_options]
addopts = "-ra"
