"""Train a 2-4-1 sigmoid network on XOR and print its predictions."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from dualnet.training import pipelines


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        default="xor",
        help="Preset configuration to execute (see --list-presets)",
    )
    parser.add_argument(
        "--config", type=Path, help="Optional JSON/YAML config merged over the preset"
    )
    parser.add_argument(
        "--run-dir",
        type=Path,
        help="Write metrics, summary, manifest and final parameters to this directory",
    )
    parser.add_argument(
        "--enable-plots",
        action="store_true",
        help="Write loss.png into the run directory",
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(None if argv is None else list(argv))


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    config = pipelines.load_preset(args.preset)
    if args.config:
        config = pipelines.merge_config(config, pipelines.read_config_file(args.config))

    if args.run_dir is not None:
        config.setdefault("reporting", {})["run_dir"] = str(args.run_dir)
    if args.enable_plots:
        if not config.get("reporting", {}).get("run_dir"):
            raise SystemExit("--enable-plots requires --run-dir (or reporting.run_dir)")
        config["reporting"]["enable_plots"] = True

    pipelines.validate_config(config)

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    pipelines.run_pipeline(config)


if __name__ == "__main__":
    main()
