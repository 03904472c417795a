"""The XOR truth table as a training set."""

from __future__ import annotations

import numpy as np

from ..core.types import Dataset, Sample

XOR_TABLE = (
    ((0.0, 0.0), 0.0),
    ((0.0, 1.0), 1.0),
    ((1.0, 0.0), 1.0),
    ((1.0, 1.0), 0.0),
)


def xor_dataset() -> Dataset:
    samples = []
    for inputs, target in XOR_TABLE:
        x = np.array(inputs, dtype=np.float64)
        x.setflags(write=False)
        samples.append(Sample(inputs=x, target=float(target)))
    return Dataset(name="xor", samples=tuple(samples))
