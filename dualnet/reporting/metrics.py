"""Metrics sinks for training runs."""

from __future__ import annotations

import csv
import json
import subprocess
from pathlib import Path
from typing import Mapping


def _git_sha() -> str:
    try:
        out = subprocess.check_output(["git", "rev-parse", "HEAD"], stderr=subprocess.DEVNULL)
        return out.decode().strip()
    except Exception:  # pragma: no cover - git may be unavailable in tests
        return "unknown"


class JsonlSink:
    """Append-only JSONL writer, one record per epoch."""

    def __init__(self, path: str | Path, *, seed: int | None = None, sha: str | None = None) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.seed = seed
        self.sha = sha or _git_sha()
        self._handle = None

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        if self._handle is None:
            self._handle = self.path.open("a", encoding="utf-8")
        record = {"epoch": int(epoch), "seed": self.seed, "sha": self.sha}
        record.update({k: float(v) for k, v in metrics.items() if isinstance(v, (int, float))})
        self._handle.write(json.dumps(record) + "\n")

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None


class CsvSink:
    """Write per-epoch metrics to CSV with a stable schema."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self._handle = None
        self._writer: csv.DictWriter | None = None

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        row = {"epoch": int(epoch)}
        row.update({k: float(v) for k, v in metrics.items() if isinstance(v, (int, float))})
        if self._writer is None:
            self._handle = self.path.open("a", encoding="utf-8", newline="")
            self._writer = csv.DictWriter(self._handle, fieldnames=sorted(row))
            self._writer.writeheader()
        self._writer.writerow(row)

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
        self._handle = None
        self._writer = None


__all__ = ["JsonlSink", "CsvSink"]
