"""Forward and backward passes for the fixed 2-layer sigmoid network."""

from __future__ import annotations

import numpy as np

from . import linalg
from .activations import sigmoid, sigmoid_deriv
from .types import (
    HIDDEN_SIZE,
    INPUT_SIZE,
    OUTPUT_SIZE,
    Array,
    ForwardCache,
    Gradients,
    NeuralNet,
    ShapeError,
)


def init_network(seed: int | np.random.Generator, scale: float = 1.0) -> NeuralNet:
    """Draw every parameter from ``uniform(-scale, scale)``."""

    if scale <= 0:
        raise ValueError(f"init scale must be positive, got {scale}")
    rng = seed if isinstance(seed, np.random.Generator) else np.random.default_rng(seed)
    return NeuralNet(
        w1=rng.uniform(-scale, scale, size=(HIDDEN_SIZE, INPUT_SIZE)),
        b1=rng.uniform(-scale, scale, size=HIDDEN_SIZE),
        w2=rng.uniform(-scale, scale, size=(OUTPUT_SIZE, HIDDEN_SIZE)),
        b2=rng.uniform(-scale, scale, size=OUTPUT_SIZE),
    )


def _as_input(inputs: Array) -> Array:
    x = np.asarray(inputs, dtype=np.float64)
    if x.shape != (INPUT_SIZE,):
        raise ShapeError(f"input must have shape ({INPUT_SIZE},), got {x.shape}")
    return x


def forward(net: NeuralNet, inputs: Array) -> ForwardCache:
    x = _as_input(inputs)
    hidden_pre = linalg.add(linalg.matvec(net.w1, x), net.b1)
    hidden_act = sigmoid(hidden_pre)
    output_pre = linalg.add(linalg.matvec(net.w2, hidden_act), net.b2)
    output_act = sigmoid(output_pre)
    return ForwardCache(
        hidden_pre=hidden_pre,
        hidden_act=hidden_act,
        output_pre=output_pre,
        output_act=output_act,
    )


def backward(net: NeuralNet, cache: ForwardCache, inputs: Array, loss_grad: Array) -> Gradients:
    """Chain-rule gradients of the loss for one example.

    ``loss_grad`` is dL/d(prediction) with the shape of ``cache.output_act``.
    """

    x = _as_input(inputs)
    loss_grad = np.asarray(loss_grad, dtype=np.float64).reshape(-1)
    d_out = linalg.hadamard(loss_grad, sigmoid_deriv(cache.output_pre))
    dw2 = linalg.outer(d_out, cache.hidden_act)
    db2 = d_out
    d_hidden_act = linalg.matvec(linalg.transpose(net.w2), d_out)
    d_hidden = linalg.hadamard(d_hidden_act, sigmoid_deriv(cache.hidden_pre))
    dw1 = linalg.outer(d_hidden, x)
    db1 = d_hidden
    return Gradients(dw1=dw1, db1=db1, dw2=dw2, db2=db2)


def apply_gradients(net: NeuralNet, grads: Gradients, lr: float) -> NeuralNet:
    """Return ``param - lr * grad`` for every parameter as a new network."""

    return NeuralNet(
        w1=linalg.sub(net.w1, linalg.scale(grads.dw1, lr)),
        b1=linalg.sub(net.b1, linalg.scale(grads.db1, lr)),
        w2=linalg.sub(net.w2, linalg.scale(grads.dw2, lr)),
        b2=linalg.sub(net.b2, linalg.scale(grads.db2, lr)),
    )


def predict(net: NeuralNet, inputs: Array) -> Array:
    """Predictions for each row of a ``(n, INPUT_SIZE)`` input matrix."""

    rows = np.asarray(inputs, dtype=np.float64)
    if rows.ndim != 2:
        raise ShapeError(f"predict expects a matrix of inputs, got shape {rows.shape}")
    return np.array([forward(net, row).prediction for row in rows], dtype=np.float64)


__all__ = ["init_network", "forward", "backward", "apply_gradients", "predict"]
