"""Core typing contracts for dualnet."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Mapping, Sequence, Tuple

import numpy as np

Array = np.ndarray

INPUT_SIZE = 2
HIDDEN_SIZE = 4
OUTPUT_SIZE = 1

PARAM_SHAPES: Mapping[str, Tuple[int, ...]] = {
    "W1": (HIDDEN_SIZE, INPUT_SIZE),
    "b1": (HIDDEN_SIZE,),
    "W2": (OUTPUT_SIZE, HIDDEN_SIZE),
    "b2": (OUTPUT_SIZE,),
}


class ShapeError(ValueError):
    """Raised when operands violate a dimension contract."""


def _frozen(value: Array, name: str, shape: Tuple[int, ...]) -> Array:
    arr = np.array(value, dtype=np.float64)
    if arr.shape != shape:
        raise ShapeError(f"{name} must have shape {shape}, got {arr.shape}")
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class NeuralNet:
    """Parameters of the fixed 2-layer network.

    Arrays are copied and marked read-only on construction, so an instance
    is never changed after it is built. Updates produce a new instance.
    """

    w1: Array
    b1: Array
    w2: Array
    b2: Array

    def __post_init__(self) -> None:
        for attr, key in (("w1", "W1"), ("b1", "b1"), ("w2", "W2"), ("b2", "b2")):
            object.__setattr__(self, attr, _frozen(getattr(self, attr), key, PARAM_SHAPES[key]))

    def state_dict(self) -> Dict[str, Array]:
        return {"W1": self.w1.copy(), "b1": self.b1.copy(), "W2": self.w2.copy(), "b2": self.b2.copy()}

    @classmethod
    def from_state_dict(cls, state: Mapping[str, Array]) -> "NeuralNet":
        missing = [key for key in PARAM_SHAPES if key not in state]
        if missing:
            raise KeyError(f"Missing parameters in state dict: {', '.join(missing)}")
        return cls(w1=state["W1"], b1=state["b1"], w2=state["W2"], b2=state["b2"])

    def parameter_count(self) -> int:
        return int(sum(int(arr.size) for arr in (self.w1, self.b1, self.w2, self.b2)))


@dataclass(frozen=True)
class ForwardCache:
    """Intermediate values captured during one forward pass."""

    hidden_pre: Array
    hidden_act: Array
    output_pre: Array
    output_act: Array

    @property
    def prediction(self) -> float:
        return float(self.output_act[0])


@dataclass(frozen=True)
class Gradients:
    """One gradient per parameter of :class:`NeuralNet`."""

    dw1: Array
    db1: Array
    dw2: Array
    db2: Array

    def as_dict(self) -> Dict[str, Array]:
        return {"W1": self.dw1, "b1": self.db1, "W2": self.dw2, "b2": self.db2}


@dataclass(frozen=True)
class Sample:
    """A single (input vector, target) pair."""

    inputs: Array
    target: float


@dataclass(frozen=True)
class Dataset:
    """Immutable, ordered collection of samples."""

    name: str
    samples: Tuple[Sample, ...]

    def __iter__(self) -> Iterator[Sample]:
        return iter(self.samples)

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def inputs(self) -> Array:
        return np.stack([sample.inputs for sample in self.samples])

    @property
    def targets(self) -> Array:
        return np.array([sample.target for sample in self.samples], dtype=np.float64)


@dataclass(frozen=True)
class TrainResult:
    """Outcome of :meth:`dualnet.training.trainer.Trainer.run`."""

    params: NeuralNet
    losses: Sequence[float]
    predictions: Array
    epochs: int

    @property
    def final_loss(self) -> float:
        return float(self.losses[-1]) if self.losses else 0.0


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`dualnet.training.pipelines.run_pipeline`."""

    train: TrainResult
    run_dir: str = ""
    metrics_path: str = ""
    manifest_path: str = ""
    summary_path: str = ""
    params_path: str = ""
    plot_path: str = ""
