"""dualnet public API."""

from .core import activations  # noqa: F401
from .core import types  # noqa: F401
from .core.dual import Dual, differentiate, signum, value_and_derivative
from .core.network import backward, forward, init_network, predict
from .core.types import ForwardCache, Gradients, NeuralNet, ShapeError
from .data import xor_dataset
from .training.pipelines import load_preset, presets, run_pipeline
from .training.trainer import SGDOptimizer, Trainer

__version__ = "0.1.0"

__all__ = [
    "Dual",
    "ForwardCache",
    "Gradients",
    "NeuralNet",
    "SGDOptimizer",
    "ShapeError",
    "Trainer",
    "activations",
    "backward",
    "differentiate",
    "forward",
    "init_network",
    "load_preset",
    "predict",
    "presets",
    "run_pipeline",
    "signum",
    "types",
    "value_and_derivative",
    "xor_dataset",
]
