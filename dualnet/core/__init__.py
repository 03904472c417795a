"""Core numerical primitives for dualnet."""

from . import activations, dual, linalg, network, types

__all__ = ["activations", "dual", "linalg", "network", "types"]
