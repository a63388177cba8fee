"""
nextexport - Export Command Package
===================================
Parses ``export`` arguments, validates the project root, derives the
export configuration and runs the export pipeline.

Usage:
  from nextexport.export import run_export
  result = await run_export(["./my-app", "-o", "dist"])

Or via CLI:
  python3 -m nextexport.export ./my-app -o dist
"""

from __future__ import annotations

from nextexport.export.command import CommandResult, ResultKind, main, run_export
from nextexport.export.options import ExportOptions, build_export_options
from nextexport.export.pipeline import ExportPipeline, export_app

__all__ = [
    "CommandResult",
    "ExportOptions",
    "ExportPipeline",
    "ResultKind",
    "build_export_options",
    "export_app",
    "main",
    "run_export",
]
