[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cbnsim"
version = "0.1.0"
description = "Simulations of fractals, chaos, complex systems and adaptation: maps, cellular automata, flocks, genetic algorithms and neural networks"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "chaos",
    "fractals",
    "cellular-automata",
    "boids",
    "genetic-algorithm",
    "hopfield",
    "prisoners-dilemma",
    "henon",
    "bifurcation",
    "simulation",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Life",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
cbn-gen1d = "cbnsim.maps:main"
cbn-bifur1d = "cbnsim.bifur1d:main"
cbn-henon = "cbnsim.henon:main"
cbn-henwarp = "cbnsim.henwarp:main"
cbn-henbif = "cbnsim.henbif:main"
cbn-hencon = "cbnsim.hencon:main"
cbn-ca = "cbnsim.ca:main"
cbn-diffuse = "cbnsim.diffuse:main"
cbn-boids = "cbnsim.boids:main"
cbn-eipd = "cbnsim.eipd:main"
cbn-gastring = "cbnsim.gastring:main"
cbn-gabump = "cbnsim.gabump:main"
cbn-gasurf = "cbnsim.gasurf:main"
cbn-gaipd = "cbnsim.gaipd:main"
cbn-hopfield = "cbnsim.hopfield:main"
cbn-gatask = "cbnsim.gatask:main"
cbn-assoc = "cbnsim.assoc:main"

[tool.hatch.build.targets.wheel]
packages = ["cbnsim"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
