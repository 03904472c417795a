"""Run artifact helpers."""

from __future__ import annotations

import json
import platform
import time
from pathlib import Path
from typing import Mapping

import numpy as np

from ..core.types import Dataset, NeuralNet
from .metrics import _git_sha


def write_manifest(
    path: str | Path,
    *,
    config: Mapping[str, object],
    dataset: Dataset,
    params: NeuralNet,
) -> str:
    """Write a manifest JSON file capturing reproducibility metadata."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    manifest = {
        "git_sha": _git_sha(),
        "generated_at": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "config": config,
        "dataset": {"name": dataset.name, "rows": len(dataset)},
        "parameters": {
            name: list(value.shape) for name, value in params.state_dict().items()
        },
        "environment": {
            "python": platform.python_version(),
            "numpy": np.__version__,
        },
    }
    path.write_text(json.dumps(manifest, indent=2))
    return str(path)


def save_params(path: str | Path, params: NeuralNet) -> str:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as handle:
        np.savez_compressed(handle, **params.state_dict())
    return str(path)


def load_params(path: str | Path) -> NeuralNet:
    with np.load(Path(path)) as data:
        return NeuralNet.from_state_dict({name: data[name] for name in data.files})


__all__ = ["write_manifest", "save_params", "load_params"]
