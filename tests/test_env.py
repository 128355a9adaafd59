"""
Tests for env.py - configuration from the environment and .env files.
"""

from pathlib import Path

import pytest

from versiontracker.env import DEFAULT_STORE_PATH, Settings


class TestSettings:
    def test_defaults(self, clean_env):
        settings = Settings.from_env()

        assert settings.log_level == "WARNING"
        assert settings.log_dir is None
        assert settings.store_path == DEFAULT_STORE_PATH

    def test_environment_variables(self, clean_env, tmp_path):
        clean_env.setenv("VERSIONTRACKER_LOG_LEVEL", "info")
        clean_env.setenv("VERSIONTRACKER_LOG_DIR", str(tmp_path / "logs"))
        clean_env.setenv("VERSIONTRACKER_STORE_PATH", str(tmp_path / "v.db"))

        settings = Settings.from_env()

        assert settings.log_level == "INFO"
        assert settings.log_dir == tmp_path / "logs"
        assert settings.store_path == tmp_path / "v.db"

    def test_home_is_expanded(self, clean_env):
        clean_env.setenv("VERSIONTRACKER_STORE_PATH", "~/tracked.json")
        assert Settings.from_env().store_path == Path.home() / "tracked.json"

    def test_dotenv_file(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text(
            "# versiontracker\nVERSIONTRACKER_LOG_LEVEL=error\n",
            encoding="utf-8",
        )

        assert Settings.from_env().log_level == "ERROR"

    def test_environment_wins_over_dotenv(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("VERSIONTRACKER_LOG_LEVEL=error\n", encoding="utf-8")
        clean_env.setenv("VERSIONTRACKER_LOG_LEVEL", "debug")

        assert Settings.from_env().log_level == "DEBUG"

    def test_unknown_log_level_falls_back(self, clean_env):
        clean_env.setenv("VERSIONTRACKER_LOG_LEVEL", "verbose")

        with pytest.warns(RuntimeWarning, match="verbose"):
            settings = Settings.from_env()

        assert settings.log_level == "WARNING"

    def test_unknown_level_in_dotenv(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("VERSIONTRACKER_LOG_LEVEL=loud\n", encoding="utf-8")

        with pytest.warns(RuntimeWarning):
            assert Settings.from_env().log_level == "WARNING"
