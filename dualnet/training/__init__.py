"""Training utilities for dualnet."""

from .losses import MSE, Loss, mse
from .pipelines import load_preset, presets, run_pipeline
from .trainer import SGDOptimizer, Trainer

__all__ = ["Loss", "MSE", "mse", "SGDOptimizer", "Trainer", "load_preset", "presets", "run_pipeline"]
