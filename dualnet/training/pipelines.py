"""Pipeline assembly: presets, config resolution and the XOR training run."""

from __future__ import annotations

import json
import math
import numbers
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Mapping

from ..core.network import init_network
from ..core.types import HIDDEN_SIZE, INPUT_SIZE, OUTPUT_SIZE, RunResult
from ..data import xor_dataset
from ..reporting.artifacts import save_params, write_manifest
from ..reporting.console import ProgressPrinter, print_predictions, print_startup_summary
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from ..reporting.summary import write_summary
from .trainer import SGDOptimizer, Trainer

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor": {
        "train": {
            "epochs": 10000,
            "lr": 0.5,
            "seed": 42,
            "init_scale": 1.0,
            "report_every": 1000,
        },
        "reporting": {
            "run_dir": None,
            "enable_plots": False,
            "loss_threshold": 1e-3,
        },
    },
}

_ALLOWED_KEYS: Mapping[str, frozenset] = {
    "train": frozenset({"epochs", "lr", "seed", "init_scale", "report_every"}),
    "reporting": frozenset({"run_dir", "enable_plots", "loss_threshold"}),
}

_PRESET_DIR = Path(__file__).resolve().parents[1] / "presets"
_FILE_PRESETS_CACHE: Dict[str, Mapping[str, object]] | None = None


def read_config_file(path: Path) -> Mapping[str, object]:
    """Decode a JSON or YAML config file into a mapping."""

    suffix = path.suffix.lower()
    if suffix not in {".yaml", ".yml", ".json"}:
        raise ValueError(f"Unsupported config file type: {path.suffix}")
    text = path.read_text()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load YAML config files") from exc
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text or "{}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return data


def _file_presets() -> Dict[str, Mapping[str, object]]:
    global _FILE_PRESETS_CACHE
    if _FILE_PRESETS_CACHE is None:
        found: Dict[str, Mapping[str, object]] = {}
        if _PRESET_DIR.exists():
            for file in sorted(_PRESET_DIR.iterdir()):
                if file.suffix.lower() not in {".yaml", ".yml", ".json"}:
                    continue
                data = read_config_file(file)
                missing = {"train", "reporting"} - set(data)
                if missing:
                    missing_str = ", ".join(sorted(missing))
                    raise KeyError(f"Preset {file.name} is missing required sections: {missing_str}")
                found[file.stem] = json.loads(json.dumps(data))
        _FILE_PRESETS_CACHE = found
    return {name: deepcopy(cfg) for name, cfg in _FILE_PRESETS_CACHE.items()}


def presets() -> Mapping[str, Mapping[str, object]]:
    combined: Dict[str, Mapping[str, object]] = {}
    combined.update({name: deepcopy(cfg) for name, cfg in _PRESETS.items()})
    combined.update(_file_presets())
    return combined


def load_preset(name: str) -> Dict[str, object]:
    file_overrides = _file_presets()
    if name in file_overrides:
        return dict(file_overrides[name])
    try:
        return deepcopy(dict(_PRESETS[name]))
    except KeyError as exc:
        available = ", ".join(sorted(presets()))
        raise KeyError(f"Unknown preset {name!r}. Available presets: {available}") from exc


def merge_config(base: Mapping[str, object], override: Mapping[str, object]) -> Dict[str, object]:
    merged: Dict[str, object] = deepcopy(dict(base))
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = merge_config(merged[key], value)  # type: ignore[arg-type]
        else:
            merged[key] = deepcopy(value)
    return merged


def _require_int(section: str, key: str, value: object, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValueError(f"{section}.{key} must be an integer, got {value!r}")
    if value < minimum:
        raise ValueError(f"{section}.{key} must be at least {minimum}, got {value}")


def _require_positive(section: str, key: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValueError(f"{section}.{key} must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{section}.{key} must be positive and finite, got {value}")


def validate_config(config: Mapping[str, object]) -> None:
    """Raise ``ValueError`` unless ``config`` only holds known, well-typed values."""

    unknown_sections = set(config) - set(_ALLOWED_KEYS)
    if unknown_sections:
        raise ValueError(f"Unknown config sections: {', '.join(sorted(unknown_sections))}")
    for section, allowed in _ALLOWED_KEYS.items():
        values = config.get(section, {})
        if not isinstance(values, Mapping):
            raise ValueError(f"Config section {section!r} must be a mapping")
        unknown = set(values) - allowed
        if unknown:
            raise ValueError(f"Unknown keys in {section!r}: {', '.join(sorted(unknown))}")

    train_cfg: Mapping[str, object] = config.get("train", {})  # type: ignore[assignment]
    for key in ("epochs", "report_every"):
        if key in train_cfg:
            _require_int("train", key, train_cfg[key], 1)
    if "seed" in train_cfg:
        _require_int("train", "seed", train_cfg["seed"], 0)
    for key in ("lr", "init_scale"):
        if key in train_cfg:
            _require_positive("train", key, train_cfg[key])

    report_cfg: Mapping[str, object] = config.get("reporting", {})  # type: ignore[assignment]
    if "loss_threshold" in report_cfg:
        _require_positive("reporting", "loss_threshold", report_cfg["loss_threshold"])
    run_dir = report_cfg.get("run_dir")
    if run_dir is not None and not isinstance(run_dir, str):
        raise ValueError(f"reporting.run_dir must be a path string or null, got {run_dir!r}")
    if "enable_plots" in report_cfg and not isinstance(report_cfg["enable_plots"], bool):
        raise ValueError(f"reporting.enable_plots must be true or false, got {report_cfg['enable_plots']!r}")


def run_pipeline(config: Mapping[str, object], *, verbose: bool = True) -> RunResult:
    """Train the XOR network described by ``config`` and report the outcome."""

    validate_config(config)
    defaults = _PRESETS["xor"]
    train_cfg = {**defaults["train"], **dict(config.get("train", {}))}  # type: ignore[arg-type]
    report_cfg = {**defaults["reporting"], **dict(config.get("reporting", {}))}  # type: ignore[arg-type]

    epochs = int(train_cfg["epochs"])
    lr = float(train_cfg["lr"])
    seed = int(train_cfg["seed"])
    report_every = int(train_cfg["report_every"])
    threshold = float(report_cfg["loss_threshold"])

    dataset = xor_dataset()
    params = init_network(seed, scale=float(train_cfg["init_scale"]))

    callbacks: List[object] = []
    if verbose:
        print_startup_summary(
            dataset=dataset,
            dims=[INPUT_SIZE, HIDDEN_SIZE, OUTPUT_SIZE],
            epochs=epochs,
            lr=lr,
            seed=seed,
            param_count=params.parameter_count(),
        )
        callbacks.append(ProgressPrinter())

    run_dir = Path(report_cfg["run_dir"]) if report_cfg.get("run_dir") else None
    jsonl: JsonlSink | None = None
    plots: PlotAdapter | None = None
    if run_dir is not None:
        run_dir.mkdir(parents=True, exist_ok=True)
        jsonl = JsonlSink(run_dir / "metrics.jsonl", seed=seed)
        plots = PlotAdapter(run_dir, enable_plots=bool(report_cfg.get("enable_plots")))
        callbacks.extend([jsonl, CsvSink(run_dir / "metrics.csv"), plots])

    trainer = Trainer(params=params, optimizer=SGDOptimizer(lr=lr), callbacks=callbacks)
    result = trainer.run(dataset, epochs, report_every=report_every)

    if verbose:
        print()
        print_predictions(dataset, result.predictions)
        print()
        print(f"Training complete: {epochs} epochs, final loss {result.final_loss:.6f}")

    if run_dir is None or jsonl is None or plots is None:
        return RunResult(train=result)

    resolved = {"train": train_cfg, "reporting": {**report_cfg, "run_dir": str(run_dir)}}
    manifest_path = write_manifest(
        run_dir / "manifest.json", config=resolved, dataset=dataset, params=result.params
    )
    summary_path = write_summary(
        jsonl.path,
        run_dir / "summary.json",
        predictions=result.predictions,
        targets=dataset.targets,
        threshold=threshold,
    )
    params_path = save_params(run_dir / "params.npz", result.params)
    return RunResult(
        train=result,
        run_dir=str(run_dir),
        metrics_path=str(jsonl.path),
        manifest_path=manifest_path,
        summary_path=summary_path,
        params_path=params_path,
        plot_path=str(plots.plot_path) if plots.enable_plots else "",
    )


__all__ = [
    "load_preset",
    "merge_config",
    "presets",
    "read_config_file",
    "run_pipeline",
    "validate_config",
]
