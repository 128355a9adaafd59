import warnings
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_STORE_PATH = Path.home() / ".versiontracker" / "versions.json"


def load_env() -> None:
    """Load .env from the working directory if present.
    Variables already set in the environment win.
    """
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path, override=False)


class Settings(BaseSettings):
    """Runtime configuration read from VERSIONTRACKER_* variables."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = DEFAULT_LOG_LEVEL
    log_dir: Optional[Path] = None
    store_path: Path = DEFAULT_STORE_PATH

    model_config = SettingsConfigDict(
        env_prefix="VERSIONTRACKER_",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        level = str(value).strip().upper()
        if level not in LOG_LEVELS:
            # a typo in the environment must not break importing the library
            warnings.warn(
                f"Unknown VERSIONTRACKER_LOG_LEVEL {value!r}, using {DEFAULT_LOG_LEVEL}",
                RuntimeWarning,
            )
            return DEFAULT_LOG_LEVEL
        return level

    @field_validator("log_dir", "store_path", mode="after")
    @classmethod
    def expand_home(cls, value: Optional[Path]) -> Optional[Path]:
        return value.expanduser() if value is not None else None

    @classmethod
    def from_env(cls) -> "Settings":
        load_env()
        return cls()
