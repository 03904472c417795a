"""Shape-checked vector and matrix primitives.

numpy broadcasts mismatched operands silently; every helper here checks the
operand dimensions first and raises :class:`ShapeError` instead.
"""

from __future__ import annotations

import numpy as np

from .types import Array, ShapeError


def _require_ndim(x: Array, ndim: int, name: str) -> None:
    if x.ndim != ndim:
        kind = "vector" if ndim == 1 else "matrix"
        raise ShapeError(f"{name} expects a {kind}, got shape {x.shape}")


def _require_same(a: Array, b: Array, name: str) -> None:
    if a.shape != b.shape:
        raise ShapeError(f"{name}: shapes {a.shape} and {b.shape} do not match")


def add(a: Array, b: Array) -> Array:
    _require_same(a, b, "add")
    return a + b


def sub(a: Array, b: Array) -> Array:
    _require_same(a, b, "sub")
    return a - b


def hadamard(a: Array, b: Array) -> Array:
    """Elementwise product."""

    _require_same(a, b, "hadamard")
    return a * b


def scale(a: Array, factor: float) -> Array:
    return a * float(factor)


def matvec(m: Array, v: Array) -> Array:
    _require_ndim(m, 2, "matvec")
    _require_ndim(v, 1, "matvec")
    if m.shape[1] != v.shape[0]:
        raise ShapeError(f"matvec: cannot multiply {m.shape} by {v.shape}")
    return m @ v


def matmul(a: Array, b: Array) -> Array:
    _require_ndim(a, 2, "matmul")
    _require_ndim(b, 2, "matmul")
    if a.shape[1] != b.shape[0]:
        raise ShapeError(f"matmul: cannot multiply {a.shape} by {b.shape}")
    return a @ b


def outer(u: Array, v: Array) -> Array:
    _require_ndim(u, 1, "outer")
    _require_ndim(v, 1, "outer")
    return np.outer(u, v)


def transpose(m: Array) -> Array:
    _require_ndim(m, 2, "transpose")
    return m.T.copy()


__all__ = ["add", "sub", "hadamard", "scale", "matvec", "matmul", "outer", "transpose"]
