"""Datasets bundled with dualnet."""

from .xor import XOR_TABLE, xor_dataset

__all__ = ["XOR_TABLE", "xor_dataset"]
