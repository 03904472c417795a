"""Squared-error loss used by the training loop."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np

from ..core.types import Array, ShapeError

LossFn = Callable[[Array, Array], tuple[float, Array]]


@dataclass(frozen=True)
class Loss:
    """Loss wrapper returning both the scalar loss and dL/dy."""

    name: str
    fn: LossFn

    def __call__(self, predictions: Array, targets: Array) -> tuple[float, Array]:
        return self.fn(predictions, targets)


def _mse(pred: Array, target: Array) -> tuple[float, Array]:
    pred = np.atleast_1d(np.asarray(pred, dtype=np.float64))
    target = np.atleast_1d(np.asarray(target, dtype=np.float64))
    if pred.shape != target.shape:
        raise ShapeError(f"mse: prediction {pred.shape} and target {target.shape} differ")
    diff = pred - target
    loss = float(np.mean(np.square(diff)))
    grad = 2.0 * diff / diff.size
    return loss, grad


MSE = Loss("mse", _mse)


def mse(pred: Array, target: Array) -> tuple[float, Array]:
    """Mean squared error and its gradient with respect to ``pred``."""

    return MSE(pred, target)


__all__ = ["Loss", "MSE", "mse"]
