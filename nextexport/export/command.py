"""
The ``export`` command.

``run_export`` sequences argument parsing, project validation, option
building and the pipeline call, and returns a ``CommandResult`` instead of
exiting. ``main`` is the process-boundary adapter that prints the result
and returns the exit code.
"""

from __future__ import annotations

import asyncio
import enum
import sys
import traceback
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from textwrap import dedent

from nextexport.config import Settings, get_settings
from nextexport.exceptions import (
    InvalidOptionError,
    NextExportError,
    ProjectDirectoryNotFoundError,
    UnknownOptionError,
    is_export_error,
)
from nextexport.export.args import EXPORT_OPTION_SPEC, parse_args
from nextexport.export.options import build_export_options
from nextexport.export.pipeline import ExportPipeline, export_app
from nextexport.export.project_dir import ensure_project_dir, get_project_dir
from nextexport.logging_config import configure_logging, get_logger
from nextexport.trace import Span, add_reporter, log_reporter, trace

logger = get_logger(__name__)

SPAN_NAME = "next-export-cli"

HELP_TEXT = dedent(
    """
    Description
      Exports the application for production deployment

    Usage
      $ next export [options] <dir>

    <dir> represents the directory of the application.
    If no directory is provided, the current directory will be used.

    Options
      -h - list this help
      -o - set the output dir (defaults to 'out')
      -s - do not print any messages to console
      --threads - number of threads used to copy pages
    """
)


class ResultKind(enum.Enum):
    SUCCESS = "success"
    HELP = "help"
    ARGUMENT_ERROR = "argument_error"
    MISSING_DIRECTORY = "missing_directory"
    EXPORT_ERROR = "export_error"
    UNEXPECTED_ERROR = "unexpected_error"


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one command invocation."""

    kind: ResultKind
    exit_code: int
    message: str | None = None
    outdir: Path | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @classmethod
    def success(cls, outdir: Path) -> CommandResult:
        return cls(
            ResultKind.SUCCESS,
            0,
            message=f"Export successful. Files written to {outdir}",
            outdir=outdir,
        )

    @classmethod
    def help(cls) -> CommandResult:
        return cls(ResultKind.HELP, 0, message=HELP_TEXT)

    @classmethod
    def failure(
        cls,
        kind: ResultKind,
        message: str,
        *,
        error: BaseException | None = None,
    ) -> CommandResult:
        return cls(kind, 1, message=message, error=error)


async def run_export(
    argv: Sequence[str],
    *,
    pipeline: ExportPipeline | None = None,
    cwd: Path | None = None,
    span_factory: Callable[[str], Span] = trace,
    settings: Settings | None = None,
) -> CommandResult:
    """Run the export command for ``argv`` and report the outcome.

    Unexpected argument parser failures propagate; every other failure is
    returned as a ``CommandResult`` with exit code 1.
    """
    pipeline = pipeline or export_app
    settings = settings or get_settings()

    with span_factory(SPAN_NAME) as span:
        try:
            args = parse_args(EXPORT_OPTION_SPEC, argv)
        except UnknownOptionError as exc:
            return CommandResult.failure(ResultKind.ARGUMENT_ERROR, exc.message, error=exc)

        if args.get("--help"):
            return CommandResult.help()

        try:
            project_dir = ensure_project_dir(get_project_dir(args.first_positional, cwd=cwd))
        except ProjectDirectoryNotFoundError as exc:
            return CommandResult.failure(ResultKind.MISSING_DIRECTORY, exc.message, error=exc)

        try:
            options = build_export_options(args, project_dir, cwd=cwd, settings=settings)
        except InvalidOptionError as exc:
            return CommandResult.failure(ResultKind.ARGUMENT_ERROR, exc.message, error=exc)

        span.set_attribute("outdir", str(options.outdir))
        try:
            await pipeline(project_dir, options, span)
        except Exception as exc:
            if is_export_error(exc):
                message = getattr(exc, "message", None) or str(exc)
                return CommandResult.failure(ResultKind.EXPORT_ERROR, message, error=exc)
            return CommandResult.failure(ResultKind.UNEXPECTED_ERROR, str(exc), error=exc)

        return CommandResult.success(options.outdir)


def report_result(result: CommandResult) -> int:
    """Print ``result`` the way the terminal user expects; returns the exit code."""
    if result.kind in (ResultKind.SUCCESS, ResultKind.HELP):
        print(result.message)
    elif result.kind in (ResultKind.ARGUMENT_ERROR, ResultKind.MISSING_DIRECTORY):
        print(result.message, file=sys.stderr)
    elif result.kind is ResultKind.EXPORT_ERROR:
        if isinstance(result.error, NextExportError):
            result.error.log()
        else:
            logger.error(result.message)
    elif result.error is not None:
        traceback.print_exception(type(result.error), result.error, result.error.__traceback__)
    else:
        print(result.message, file=sys.stderr)
    return result.exit_code


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point for the export command.

    Returns:
        Exit code (0 for success or help, 1 for any failure).
    """
    settings = get_settings()
    configure_logging()
    if settings.trace_enabled:
        add_reporter(log_reporter)

    result = asyncio.run(run_export(sys.argv[1:] if argv is None else argv, settings=settings))
    return report_result(result)


if __name__ == "__main__":
    raise SystemExit(main())
