"""Activation utilities for dualnet."""

from __future__ import annotations

import numpy as np

from .types import Array


def sigmoid(x: Array) -> Array:
    """Return the logistic sigmoid, elementwise."""

    return 1.0 / (1.0 + np.exp(-x))


def sigmoid_deriv(x: Array) -> Array:
    """Derivative of :func:`sigmoid` evaluated at the pre-activation ``x``."""

    s = sigmoid(x)
    return s * (1.0 - s)
