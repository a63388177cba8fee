"""
Tests for nextexport.exceptions module.
"""

import logging

from nextexport.exceptions import (
    EXPORT_ERROR_CODE,
    ArgumentError,
    ConfigurationError,
    ExportError,
    InvalidOptionError,
    NextExportError,
    ProjectDirectoryNotFoundError,
    UnknownOptionError,
    is_export_error,
)


class TestHierarchy:
    def test_argument_errors(self):
        assert issubclass(UnknownOptionError, ArgumentError)
        assert issubclass(InvalidOptionError, ArgumentError)
        assert issubclass(ArgumentError, NextExportError)

    def test_default_error_code(self):
        assert ArgumentError("bad").error_code == "next_export_argumenterror"

    def test_to_dict_includes_detail(self):
        error = ConfigurationError("Bad config", setting_name="LOG_LEVEL")
        assert error.to_dict() == {
            "error": "configuration_error",
            "message": "Bad config",
            "detail": "Missing or invalid setting: LOG_LEVEL",
        }

    def test_project_dir_message(self):
        error = ProjectDirectoryNotFoundError("/nope")
        assert error.message == "> No such directory exists as the project root: /nope"

    def test_log(self, caplog):
        with caplog.at_level(logging.ERROR, logger="nextexport.exceptions"):
            UnknownOptionError("--bogus").log()
        [record] = caplog.records
        assert record.error_code == "ARG_UNKNOWN_OPTION"


class TestExportError:
    def test_str_is_message_only(self):
        error = ExportError("Export failed", output_path="/tmp/out", page="/about")
        assert str(error) == "Export failed"
        assert error.detail == "Page: /about; Output: /tmp/out"
        assert error.code == EXPORT_ERROR_CODE


class TestIsExportError:
    def test_instance(self):
        assert is_export_error(ExportError("x"))

    def test_error_code_attribute(self):
        error = RuntimeError("x")
        error.error_code = EXPORT_ERROR_CODE
        assert is_export_error(error)

    def test_code_attribute(self):
        error = RuntimeError("x")
        error.code = EXPORT_ERROR_CODE
        assert is_export_error(error)

    def test_other_errors(self):
        assert not is_export_error(RuntimeError("x"))
        assert not is_export_error(UnknownOptionError("--bogus"))
