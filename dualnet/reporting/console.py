"""Console reporting for training runs."""

from __future__ import annotations

from typing import Mapping, Sequence, TextIO

from ..core.types import Array, Dataset


class ProgressPrinter:
    """Print the epoch loss whenever the trainer reports."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream

    def on_report(self, epoch: int, metrics: Mapping[str, float]) -> None:
        print(f"Epoch {epoch}, Loss: {float(metrics['loss']):.6f}", file=self.stream)


def print_startup_summary(
    *,
    dataset: Dataset,
    dims: Sequence[int],
    epochs: int,
    lr: float,
    seed: int,
    param_count: int,
    stream: TextIO | None = None,
) -> None:
    print("=== dualnet run ===", file=stream)
    print(f"Dataset       : {dataset.name} ({len(dataset)} rows)", file=stream)
    print(f"Dimensions    : {list(dims)}", file=stream)
    print(f"Epochs        : {epochs}", file=stream)
    print(f"Learning rate : {lr}", file=stream)
    print(f"Seed          : {seed}", file=stream)
    print(f"Parameters    : {param_count}", file=stream)
    print("===================", file=stream)


def format_predictions(dataset: Dataset, predictions: Array) -> str:
    """Render a table of inputs, targets and predictions."""

    header = f"{'Input':<12}{'Target':>8}{'Predicted':>12}"
    lines = [header, "-" * len(header)]
    for sample, pred in zip(dataset, predictions):
        inputs = ", ".join(f"{v:g}" for v in sample.inputs)
        lines.append(f"{'(' + inputs + ')':<12}{sample.target:>8g}{float(pred):>12.6f}")
    return "\n".join(lines)


def print_predictions(dataset: Dataset, predictions: Array, stream: TextIO | None = None) -> None:
    print(format_predictions(dataset, predictions), file=stream)


__all__ = ["ProgressPrinter", "print_startup_summary", "format_predictions", "print_predictions"]
