"""
Tests for logger functionality.
"""

import pytest

from versiontracker.logger import StructuredLogger, get_logger, reset_logger


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_logger_creation(self, tmp_path):
        """Logger should be created with default settings."""
        logger = StructuredLogger(
            name="test",
            level="INFO",
            log_dir=tmp_path,
            enable_console=False,
        )

        assert logger.logger.name == "test"
        assert logger.metrics["merges_performed"] == 0

    def test_log_methods(self, tmp_path):
        """All log level methods should work."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        # Should not raise exceptions
        logger.info("Info message")
        logger.warning("Warning message")

    def test_log_with_context(self, tmp_path):
        """Context that is not JSON serializable is rendered with str()."""
        logger = StructuredLogger(
            name="test.context",
            level="DEBUG",
            log_dir=tmp_path,
            enable_file=True,
            enable_console=False,
        )

        logger.info("Merged", scope="appVersion", when=tmp_path)

        log_content = next(tmp_path.glob("*.log")).read_text()
        assert '"scope": "appVersion"' in log_content
        assert str(tmp_path) in log_content

    def test_metrics_tracking(self, tmp_path):
        """Merge counters should be tracked correctly."""
        logger = StructuredLogger(name="test", enable_console=False)

        logger.record_merge("appVersion", new_version=True)
        logger.record_merge("osVersion", new_version=False)
        logger.record_merge("appVersion", new_version=False)
        logger.record_skipped_merge()
        logger.record_corrupt_record()

        metrics = logger.get_metrics()

        assert metrics["merges_performed"] == 3
        assert metrics["versions_recorded"] == 1
        assert metrics["merges_skipped"] == 1
        assert metrics["corrupt_records"] == 1
        assert metrics["merges_by_scope"] == {"appVersion": 2, "osVersion": 1}

    def test_get_metrics_returns_copy(self):
        logger = StructuredLogger(name="test", enable_console=False)
        logger.record_merge("appVersion", new_version=True)

        metrics = logger.get_metrics()
        metrics["merges_by_scope"]["appVersion"] = 99

        assert logger.metrics["merges_by_scope"]["appVersion"] == 1

    def test_no_file_by_default(self, tmp_path):
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)
        logger.info("Test message")

        assert list(tmp_path.glob("*.log")) == []

    def test_log_file_creation(self, tmp_path):
        """Log file should be created in specified directory."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_file=True,
            enable_console=False,
        )

        logger.warning("Test message")

        log_files = list(tmp_path.glob("versiontracker_*.log"))
        assert len(log_files) == 1
        assert "Test message" in log_files[0].read_text()


class TestGlobalLogger:
    """Test global logger singleton."""

    def test_get_logger_singleton(self, clean_env):
        """get_logger should return same instance."""
        reset_logger()  # Start fresh

        logger1 = get_logger(name="versiontracker.test", enable_console=False)
        logger2 = get_logger()

        assert logger1 is logger2
        reset_logger()

    def test_reset_logger(self, clean_env):
        """reset_logger should create new instance."""
        reset_logger()

        logger1 = get_logger(name="versiontracker.test", enable_console=False)
        logger1.record_skipped_merge()

        reset_logger()

        logger2 = get_logger(name="versiontracker.test", enable_console=False)

        # Should be different instance with fresh metrics
        assert logger2 is not logger1
        assert logger2.metrics["merges_skipped"] == 0
        reset_logger()

    def test_settings_from_environment(self, clean_env, tmp_path):
        clean_env.setenv("VERSIONTRACKER_LOG_LEVEL", "debug")
        clean_env.setenv("VERSIONTRACKER_LOG_DIR", str(tmp_path / "logs"))
        reset_logger()

        logger = get_logger(name="versiontracker.test.env", enable_console=False)
        logger.info("Written to file")

        assert logger.logger.level == 10
        log_files = list((tmp_path / "logs").glob("*.log"))
        assert len(log_files) == 1
        assert "Written to file" in log_files[0].read_text()
        reset_logger()

    def test_unknown_level_in_environment(self, clean_env):
        clean_env.setenv("VERSIONTRACKER_LOG_LEVEL", "verbose")
        reset_logger()

        with pytest.warns(RuntimeWarning):
            logger = get_logger(name="versiontracker.test.badlevel", enable_console=False)

        assert logger.logger.level == 30
        reset_logger()
