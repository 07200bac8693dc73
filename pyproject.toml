[build-system]
requires = ["setuptools>=61"]
build-backend = "setuptools.build_meta"

[project]
name = "floaterlab"
version = "0.1.0"
description = "Simulation of eye floaters, saccades and camera controls with small vector-math and tessellation helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["eye floaters", "saccade", "simulation", "quaternion", "tessellation", "camera"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Visualization",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["floaterlab*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
