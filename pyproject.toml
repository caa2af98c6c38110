[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "laminopt"
version = "0.1.0"
description = "Interior-point building blocks for laminate optimisation with lamination parameters, response approximations and CalculiX response extraction."
requires-python = ">=3.10"
dependencies = [
    "numpy",
    "scipy",
]
keywords = [
    "laminate",
    "composites",
    "lamination parameters",
    "semidefinite programming",
    "interior point",
    "CONLIN",
    "CalculiX",
    "structural optimisation",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["laminopt"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
