[build-system]
requires = ["setuptools>=61"]
build-backend = "setuptools.build_meta"

[project]
name = "dilemma"
version = "0.1.0"
description = "Iterated prisoner's dilemma tournaments and evolutionary population dynamics"
requires-python = ">=3.10"
dependencies = []
keywords = ["game theory", "prisoner's dilemma", "tournament", "evolution", "simulation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ipd = "dilemma.app:main"

[tool.setuptools]
packages = ["dilemma"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
