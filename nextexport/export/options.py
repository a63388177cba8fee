"""
Export configuration derived from parsed command-line flags.
"""

from __future__ import annotations

import math
import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from nextexport.config import Settings, get_settings
from nextexport.exceptions import InvalidOptionError
from nextexport.export.args import ParsedArgs


class ExportOptions(BaseModel):
    """Configuration handed to the export pipeline."""

    model_config = ConfigDict(frozen=True)

    silent: bool = Field(default=False, description="Suppress console output during export")
    threads: int | None = Field(default=None, ge=1, description="Concurrency hint for the pipeline")
    outdir: Path = Field(description="Absolute output directory")
    has_outdir_from_cli: bool = Field(default=False, description="Whether --outdir was supplied")
    is_invoked_from_cli: bool = True
    has_app_dir: bool = False
    build_export: bool = False

    @field_validator("outdir")
    @classmethod
    def _absolute_outdir(cls, value: Path) -> Path:
        if not value.is_absolute():
            raise ValueError(f"outdir must be absolute, got {value}")
        return Path(os.path.normpath(value))


def _thread_count(value: int | float | None) -> int | None:
    if value is None:
        return None
    if not math.isfinite(value) or float(value) != int(value) or value < 1:
        raise InvalidOptionError("--threads", value, reason="expected a positive integer")
    return int(value)


def build_export_options(
    args: ParsedArgs,
    project_dir: Path,
    *,
    cwd: Path | None = None,
    settings: Settings | None = None,
) -> ExportOptions:
    """Derive ``ExportOptions`` from parsed flags and the project root.

    ``--outdir`` is resolved against ``cwd`` (the process working
    directory by default), not against the project root.
    """
    settings = settings or get_settings()
    outdir_arg = args.get("--outdir")

    if outdir_arg:
        base = Path(cwd) if cwd is not None else Path.cwd()
        outdir = Path(os.path.abspath(os.path.join(base, outdir_arg)))
    else:
        outdir = Path(os.path.abspath(Path(project_dir) / settings.default_outdir_name))

    return ExportOptions(
        silent=bool(args.get("--silent", False)),
        threads=_thread_count(args.get("--threads")),
        outdir=outdir,
        has_outdir_from_cli=bool(outdir_arg),
        is_invoked_from_cli=True,
        has_app_dir=False,
        build_export=False,
    )
