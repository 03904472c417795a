"""Reporting utilities for dualnet."""

from .artifacts import load_params, save_params, write_manifest
from .console import ProgressPrinter, print_predictions, print_startup_summary
from .metrics import CsvSink, JsonlSink
from .plots import PlotAdapter
from .summary import write_summary

__all__ = [
    "write_manifest",
    "save_params",
    "load_params",
    "ProgressPrinter",
    "print_predictions",
    "print_startup_summary",
    "JsonlSink",
    "CsvSink",
    "PlotAdapter",
    "write_summary",
]
