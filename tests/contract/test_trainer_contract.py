from typing import Mapping

import numpy as np
import pytest

from dualnet.core.network import init_network
from dualnet.data import xor_dataset
from dualnet.training.trainer import SGDOptimizer, Trainer


class _Capture:
    def __init__(self) -> None:
        self.epochs: list[tuple[int, float]] = []
        self.reports: list[int] = []
        self.closed = 0

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        self.epochs.append((epoch, float(metrics["loss"])))

    def on_report(self, epoch: int, metrics: Mapping[str, float]) -> None:
        self.reports.append(epoch)

    def close(self) -> None:
        self.closed += 1


def _run(seed: int, epochs: int, callbacks=()):
    trainer = Trainer(
        params=init_network(seed),
        optimizer=SGDOptimizer(lr=0.5),
        callbacks=list(callbacks),
    )
    return trainer.run(xor_dataset(), epochs, report_every=100)


def test_training_is_deterministic():
    first = _run(seed=3, epochs=300)
    second = _run(seed=3, epochs=300)
    for name, value in first.params.state_dict().items():
        assert np.array_equal(value, second.params.state_dict()[name])
    assert first.losses == second.losses
    assert np.array_equal(first.predictions, second.predictions)


def test_initial_parameters_are_not_mutated():
    params = init_network(7)
    before = params.state_dict()
    trainer = Trainer(params=params, optimizer=SGDOptimizer(lr=0.5))
    result = trainer.run(xor_dataset(), 50, report_every=10)
    for name, value in params.state_dict().items():
        assert np.array_equal(value, before[name])
    assert result.params is not params
    assert trainer.params is result.params


def test_callbacks_follow_epoch_and_report_schedule():
    capture = _Capture()
    result = _run(seed=1, epochs=250, callbacks=[capture])
    assert [epoch for epoch, _ in capture.epochs] == list(range(1, 251))
    assert capture.reports == [1, 100, 200, 250]
    assert capture.closed == 1
    assert [loss for _, loss in capture.epochs] == list(result.losses)


def test_losses_are_non_negative_and_decrease():
    result = _run(seed=42, epochs=1000)
    assert len(result.losses) == 1000
    assert all(loss >= 0.0 for loss in result.losses)
    assert result.losses[-1] < result.losses[0]
    assert result.predictions.shape == (4,)
    assert result.epochs == 1000


def test_invalid_run_arguments():
    trainer = Trainer(params=init_network(0), optimizer=SGDOptimizer(lr=0.1))
    with pytest.raises(ValueError):
        trainer.run(xor_dataset(), 0)
    with pytest.raises(ValueError):
        trainer.run(xor_dataset(), 10, report_every=0)
