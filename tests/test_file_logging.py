"""File logging tests — persistent log files for post-run diagnosis.

Tests verify that run logs are persisted to disk under data/logs/ with
timestamped filenames, configurable log level, and without suppressing
stderr output.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from promatch.logging import configure_file_logging, logger, remove_file_logging

if TYPE_CHECKING:
    from pathlib import Path


class TestFileLogging:
    """Run logs are persisted to disk for post-run diagnosis."""

    def test_run_creates_log_file_in_logs_directory(self, tmp_path: Path) -> None:
        """A log file appears under the specified logs directory after
        file logging is enabled and a message is logged."""
        log_dir = tmp_path / "logs"
        handler = configure_file_logging(log_dir=str(log_dir))
        try:
            logger.info("test message")
            log_files = list(log_dir.glob("*.log"))
            assert len(log_files) == 1, f"Expected 1 log file, found {len(log_files)}"
        finally:
            remove_file_logging(handler)

    def test_log_file_name_includes_timestamp(self, tmp_path: Path) -> None:
        """Log file names follow pro-match_YYYY-MM-DDTHH-MM-SS.log so that
        multiple runs produce distinct, chronologically sortable files."""
        log_dir = tmp_path / "logs"
        handler = configure_file_logging(log_dir=str(log_dir))
        try:
            logger.info("timestamp check")
            name = next(log_dir.glob("*.log")).name
            assert re.match(r"pro-match_\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}\.log$", name), (
                f"Log filename '{name}' does not match timestamp pattern"
            )
        finally:
            remove_file_logging(handler)

    def test_package_module_messages_reach_the_file(self, tmp_path: Path) -> None:
        """Messages from library modules (promatch.*) are written too,
        so a match summary survives the run."""
        log_dir = tmp_path / "logs"
        handler = configure_file_logging(log_dir=str(log_dir))
        try:
            logging.getLogger("promatch.matching.engine").warning("engine warning")
            content = next(log_dir.glob("*.log")).read_text(encoding="utf-8")
            assert "engine warning" in content
            assert "WARNING" in content
        finally:
            remove_file_logging(handler)

    def test_log_directory_is_created_if_absent(self, tmp_path: Path) -> None:
        """The log directory is created automatically when it doesn't
        exist — the operator does not need to mkdir manually."""
        log_dir = tmp_path / "nested" / "deep" / "logs"
        assert not log_dir.exists()
        handler = configure_file_logging(log_dir=str(log_dir))
        try:
            logger.info("auto-create dir")
            assert log_dir.exists()
            assert len(list(log_dir.glob("*.log"))) == 1
        finally:
            remove_file_logging(handler)

    def test_stderr_output_is_not_suppressed_when_file_logging_enabled(
        self, tmp_path: Path
    ) -> None:
        """File logging is additive — the existing stderr handler must
        remain active so the operator still sees output in real time."""
        handler = configure_file_logging(log_dir=str(tmp_path / "logs"))
        try:
            handler_types = [type(h) for h in logger.handlers]
            assert logging.StreamHandler in handler_types, (
                "stderr StreamHandler was removed when file logging was enabled"
            )
        finally:
            remove_file_logging(handler)

    def test_log_level_is_configurable(self, tmp_path: Path) -> None:
        """The file handler respects a configurable log level so the
        operator can capture DEBUG detail for diagnosis."""
        log_dir = tmp_path / "logs"
        handler = configure_file_logging(log_dir=str(log_dir), level=logging.DEBUG)
        try:
            logger.debug("debug-level message")
            content = next(log_dir.glob("*.log")).read_text(encoding="utf-8")
            assert "debug-level message" in content
            assert "DEBUG" in content
        finally:
            remove_file_logging(handler)

    def test_removed_handler_stops_writing(self, tmp_path: Path) -> None:
        """After removal the file handler is detached from both loggers."""
        handler = configure_file_logging(log_dir=str(tmp_path / "logs"))
        remove_file_logging(handler)
        assert handler not in logger.handlers
        assert handler not in logging.getLogger("promatch").handlers
