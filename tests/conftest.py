"""
Pytest configuration and shared fixtures for nextexport tests.
"""

from pathlib import Path
from typing import Any

import pytest

from nextexport.config import Settings, reload_settings
from nextexport.export.options import ExportOptions
from nextexport.trace import Span

_ENV_VARS = (
    "NEXT_EXPORT_DIST_DIR",
    "NEXT_EXPORT_OUTDIR_NAME",
    "NEXT_EXPORT_THREADS",
    "NEXT_EXPORT_TRACE",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "DEBUG",
)


@pytest.fixture(autouse=True)
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Settings loaded from a clean environment."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return reload_settings()


@pytest.fixture
def built_project(tmp_path: Path) -> Path:
    """A project root containing a finished production build."""
    project = tmp_path / "app"
    build = project / ".next"
    (build / "static" / "chunks").mkdir(parents=True)
    (build / "server" / "pages" / "blog").mkdir(parents=True)
    (project / "public").mkdir()

    (build / "BUILD_ID").write_text("build-123\n", encoding="utf-8")
    (build / "static" / "chunks" / "main.js").write_text("console.log(1)", encoding="utf-8")
    (build / "server" / "pages" / "index.html").write_text("<h1>Home</h1>", encoding="utf-8")
    (build / "server" / "pages" / "about.html").write_text("<h1>About</h1>", encoding="utf-8")
    (build / "server" / "pages" / "blog" / "hello.html").write_text("<h1>Hello</h1>", encoding="utf-8")
    (build / "server" / "pages" / "api.js").write_text("module.exports = {}", encoding="utf-8")
    (project / "public" / "favicon.ico").write_bytes(b"\x00\x01")
    return project


class RecordingPipeline:
    """Export pipeline double that records its calls."""

    def __init__(self, error: BaseException | None = None) -> None:
        self.error = error
        self.calls: list[tuple[Path, ExportOptions, Span]] = []

    @property
    def called(self) -> bool:
        return bool(self.calls)

    async def __call__(self, project_dir: Path, options: ExportOptions, span: Span) -> None:
        self.calls.append((project_dir, options, span))
        assert not span.stopped
        if self.error is not None:
            raise self.error


@pytest.fixture
def pipeline() -> RecordingPipeline:
    return RecordingPipeline()


@pytest.fixture
def spans() -> list[Span]:
    """Spans opened through ``span_factory``."""
    return []


@pytest.fixture
def span_factory(spans: list[Span]) -> Any:
    def factory(name: str) -> Span:
        span = Span(name)
        spans.append(span)
        return span

    return factory
