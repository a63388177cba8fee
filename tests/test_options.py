"""
Tests for nextexport.export.options module.

Covers:
- Defaults when no flags are given
- Output directory derivation
- Thread hint validation
- Constant CLI fields
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from nextexport.config import Settings
from nextexport.exceptions import InvalidOptionError
from nextexport.export.args import EXPORT_OPTION_SPEC, parse_args
from nextexport.export.options import ExportOptions, build_export_options


def _build(argv, project_dir: Path, cwd: Path, settings: Settings | None = None) -> ExportOptions:
    return build_export_options(parse_args(EXPORT_OPTION_SPEC, argv), project_dir, cwd=cwd, settings=settings)


class TestBuildExportOptions:
    """Tests for deriving export options from flags."""

    def test_defaults(self, tmp_path: Path):
        options = _build([], tmp_path, tmp_path)
        assert options.silent is False
        assert options.threads is None
        assert options.outdir == tmp_path / "out"
        assert options.has_outdir_from_cli is False
        assert options.is_invoked_from_cli is True
        assert options.has_app_dir is False
        assert options.build_export is False

    def test_outdir_resolves_against_cwd_not_project(self, tmp_path: Path):
        project = tmp_path / "proj"
        cwd = tmp_path / "work"
        options = _build(["-o", "dist"], project, cwd)
        assert options.outdir == cwd / "dist"
        assert options.has_outdir_from_cli is True

    def test_absolute_outdir_is_normalized(self, tmp_path: Path):
        options = _build(["--outdir", str(tmp_path / "a" / ".." / "b")], tmp_path, Path("/"))
        assert options.outdir == tmp_path / "b"

    def test_outdir_name_comes_from_settings(self, tmp_path: Path):
        settings = Settings()
        settings.default_outdir_name = "static-out"
        options = _build([], tmp_path, tmp_path, settings)
        assert options.outdir == tmp_path / "static-out"

    def test_silent_and_threads(self, tmp_path: Path):
        options = _build(["-s", "--threads", "3"], tmp_path, tmp_path)
        assert options.silent is True
        assert options.threads == 3

    @pytest.mark.parametrize("value", ["0", "-2", "1.5", "inf", "nan", "1e400"])
    def test_invalid_threads(self, tmp_path: Path, value: str):
        with pytest.raises(InvalidOptionError) as exc_info:
            _build([f"--threads={value}"], tmp_path, tmp_path)
        assert "--threads" in exc_info.value.message

    def test_derivation_is_deterministic(self, tmp_path: Path):
        argv = ["-s", "-o", "dist", "--threads", "2"]
        assert _build(argv, tmp_path, tmp_path) == _build(argv, tmp_path, tmp_path)


class TestExportOptions:
    """Tests for the options model."""

    def test_is_frozen(self, tmp_path: Path):
        options = ExportOptions(outdir=tmp_path)
        with pytest.raises(ValidationError):
            options.silent = True

    def test_rejects_relative_outdir(self):
        with pytest.raises(ValidationError):
            ExportOptions(outdir=Path("out"))
