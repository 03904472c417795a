"""Deterministic per-example training loop for the XOR network."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

import numpy as np

from ..core.network import apply_gradients, backward, forward, predict
from ..core.types import Dataset, Gradients, NeuralNet, TrainResult
from .losses import MSE, Loss


@dataclass(frozen=True)
class SGDOptimizer:
    """Vanilla gradient descent with a fixed learning rate."""

    lr: float

    def step(self, params: NeuralNet, grads: Gradients) -> NeuralNet:
        return apply_gradients(params, grads, self.lr)


class Trainer:
    """Drive forward, loss, backward and update over a fixed dataset.

    Callbacks are duck-typed: ``on_epoch(epoch, metrics)`` is called after
    every epoch, ``on_report(epoch, metrics)`` at the reporting interval and
    ``close()`` once the run has finished.
    """

    def __init__(
        self,
        params: NeuralNet,
        optimizer: SGDOptimizer,
        loss: Loss = MSE,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        self.params = params
        self.optimizer = optimizer
        self.loss = loss
        self.callbacks = list(callbacks or [])

    def run(self, dataset: Dataset, epochs: int, *, report_every: int = 1000) -> TrainResult:
        if epochs < 1:
            raise ValueError(f"epochs must be at least 1, got {epochs}")
        if report_every < 1:
            raise ValueError(f"report_every must be at least 1, got {report_every}")
        if len(dataset) == 0:
            raise ValueError(f"dataset {dataset.name!r} is empty")

        params = self.params
        losses: list[float] = []
        try:
            for epoch in range(1, epochs + 1):
                params, epoch_loss = self._run_epoch(params, dataset)
                losses.append(epoch_loss)
                metrics = {"loss": epoch_loss}
                self._emit("on_epoch", epoch, metrics)
                if epoch == 1 or epoch % report_every == 0 or epoch == epochs:
                    self._emit("on_report", epoch, metrics)
        finally:
            self._close()

        self.params = params
        return TrainResult(
            params=params,
            losses=tuple(losses),
            predictions=predict(params, dataset.inputs),
            epochs=epochs,
        )

    # ------------------------------------------------------------------
    # Internal helpers

    def _run_epoch(self, params: NeuralNet, dataset: Dataset) -> tuple[NeuralNet, float]:
        row_losses: list[float] = []
        for sample in dataset:
            cache = forward(params, sample.inputs)
            loss_value, loss_grad = self.loss(cache.output_act, np.array([sample.target]))
            row_losses.append(loss_value)
            grads = backward(params, cache, sample.inputs, loss_grad)
            params = self.optimizer.step(params, grads)
        return params, float(np.mean(row_losses))

    def _emit(self, hook: str, epoch: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            handler = getattr(callback, hook, None)
            if handler is not None:
                handler(epoch, metrics)

    def _close(self) -> None:
        for callback in self.callbacks:
            close = getattr(callback, "close", None)
            if close is not None:
                close()


__all__ = ["SGDOptimizer", "Trainer"]
