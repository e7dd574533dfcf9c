"""Simulations of maps, chaos, cellular automata, flocks, genetic algorithms and neural networks."""

__version__ = "0.1.0"