"""
Default export pipeline.

Copies the artifacts of a production build into the output directory:
static assets, the ``public`` folder and every pre-rendered HTML page.
Pages are copied on a thread pool sized by the concurrency hint.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Protocol

from nextexport.config import Settings, get_settings
from nextexport.exceptions import ExportError
from nextexport.export._utils import _copy_file, _copy_tree, _is_within, _reset_dir
from nextexport.export.options import ExportOptions
from nextexport.logging_config import get_logger, log_event
from nextexport.trace import Span

logger = get_logger(__name__)


class ExportPipeline(Protocol):
    async def __call__(self, project_dir: Path, options: ExportOptions, span: Span) -> None: ...


def _read_build_id(build_dir: Path) -> str:
    build_id_file = build_dir / "BUILD_ID"
    if not build_id_file.is_file():
        raise ExportError(
            f"Could not find a production build in the '{build_dir.name}' directory. "
            "Try building your app with 'next build' before starting the static export.",
            output_path=str(build_dir),
        )
    return build_id_file.read_text(encoding="utf-8").strip()


def _check_outdir(project_dir: Path, build_dir: Path, outdir: Path) -> None:
    public_dir = project_dir / "public"
    if outdir == public_dir:
        raise ExportError(
            "The 'public' directory is reserved and can not be used as the export out directory.",
            output_path=str(outdir),
        )
    if _is_within(outdir, public_dir):
        raise ExportError(
            "The export out directory can not be inside the 'public' directory.",
            output_path=str(outdir),
        )
    if _is_within(project_dir, outdir):
        raise ExportError(
            "The export out directory can not contain the project root.",
            output_path=str(outdir),
        )
    if _is_within(outdir, build_dir) or _is_within(build_dir, outdir):
        raise ExportError(
            f"The export out directory can not overlap the '{build_dir.name}' build directory.",
            output_path=str(outdir),
        )


async def _copy_pages(pages: list[tuple[Path, Path]], *, threads: int) -> list[str]:
    """Copy pages concurrently; returns the pages that failed."""
    loop = asyncio.get_running_loop()
    with ThreadPoolExecutor(max_workers=threads) as executor:
        futures = [loop.run_in_executor(executor, _copy_file, src, dest) for src, dest in pages]
        results = await asyncio.gather(*futures, return_exceptions=True)

    failed: list[str] = []
    for (src, _), result in zip(pages, results):
        if isinstance(result, Exception):
            logger.warning("Failed to export %s: %s", src, result)
            failed.append(str(src))
    return failed


async def export_app(
    project_dir: Path,
    options: ExportOptions,
    span: Span,
    *,
    settings: Settings | None = None,
) -> None:
    """Export a built project into ``options.outdir``.

    Raises:
        ExportError: when there is no production build, the output
            directory is not usable, or any page fails to copy.
    """
    settings = settings or get_settings()
    project_dir = Path(project_dir)
    build_dir = project_dir / settings.dist_dir
    outdir = options.outdir

    with span.child("export-check-build"):
        build_id = _read_build_id(build_dir)
        _check_outdir(project_dir, build_dir, outdir)

    if not options.silent:
        logger.info("Exporting build %s to %s", build_id, outdir)

    with span.child("export-prepare-outdir"):
        await asyncio.to_thread(_reset_dir, outdir)

    with span.child("export-copy-static") as static_span:
        static_count = await asyncio.to_thread(_copy_tree, build_dir / "static", outdir / "_next" / "static")
        static_count += await asyncio.to_thread(_copy_tree, project_dir / "public", outdir)
        static_span.set_attribute("files", static_count)

    pages_dir = build_dir / "server" / "pages"
    pages = (
        [(page, outdir / page.relative_to(pages_dir)) for page in sorted(pages_dir.rglob("*.html"))]
        if pages_dir.is_dir()
        else []
    )
    threads = options.threads or settings.default_threads

    with span.child("export-copy-pages", attrs={"pages": len(pages), "threads": threads}):
        if not options.silent:
            logger.info("Copying %d pages using %d threads", len(pages), threads)
        failed = await _copy_pages(pages, threads=threads)

    if failed:
        raise ExportError(
            "Export encountered errors on following paths:\n\t" + "\n\t".join(failed),
            output_path=str(outdir),
        )

    if not options.silent:
        logger.info("Exported %d pages and %d static files", len(pages), static_count)
    log_event(
        "export_completed",
        "debug",
        logger_name=__name__,
        pages=len(pages),
        static_files=static_count,
        outdir=str(outdir),
    )
