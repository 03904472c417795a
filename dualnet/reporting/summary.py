"""Deterministic run summarisation helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping, Sequence

import numpy as np

from ..core.types import Array


def epochs_to_threshold(losses: Sequence[float], threshold: float) -> int | None:
    """First 1-based epoch whose loss is below ``threshold``, if any."""

    for idx, value in enumerate(losses, start=1):
        if value < threshold:
            return idx
    return None


def _read_losses(metrics_path: Path) -> list[float]:
    losses: list[float] = []
    if not metrics_path.exists():
        return losses
    for line in metrics_path.read_text().splitlines():
        line = line.strip()
        if not line:
            continue
        record = json.loads(line)
        if "loss" in record:
            losses.append(float(record["loss"]))
    return losses


def build_summary(
    losses: Sequence[float],
    predictions: Array,
    targets: Array,
    *,
    threshold: float,
) -> Mapping[str, object]:
    arr = np.asarray(losses, dtype=np.float64)
    preds = np.asarray(predictions, dtype=np.float64)
    errors = np.abs(preds - np.asarray(targets, dtype=np.float64))
    loss_stats: Mapping[str, float] = {}
    if arr.size:
        loss_stats = {
            "first": float(arr[0]),
            "last": float(arr[-1]),
            "min": float(np.min(arr)),
        }
    return {
        "version": 1,
        "epochs": int(arr.size),
        "loss": loss_stats,
        "threshold": float(threshold),
        "epochs_to_threshold": epochs_to_threshold(arr.tolist(), threshold),
        "predictions": [float(p) for p in preds],
        "max_abs_error": float(np.max(errors)) if errors.size else 0.0,
    }


def write_summary(
    metrics_jsonl: str | Path,
    out_summary_json: str | Path,
    *,
    predictions: Array,
    targets: Array,
    threshold: float = 1e-3,
) -> str:
    """Write a deterministic summary of the losses recorded in ``metrics_jsonl``."""

    out_path = Path(out_summary_json)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    losses = _read_losses(Path(metrics_jsonl))
    summary = build_summary(losses, predictions, targets, threshold=threshold)
    out_path.write_text(json.dumps(summary, sort_keys=True, indent=2))
    return str(out_path)


__all__ = ["epochs_to_threshold", "build_summary", "write_summary"]
