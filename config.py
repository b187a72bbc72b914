"""
@file config.py
@brief Configuration settings for the lyricsync application.
"""
import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from normalizer import DEFAULT_TIMING_OVERRIDES


class Settings(BaseSettings):
    """Configuration settings for the lyricsync application.

    Every field can be overridden through an environment variable of the
    same name or a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    # Application information
    APP_NAME: str = "lyricsync"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "Synchronized lyrics resolution from cache, database and remote sources"

    # Remote search/lyric service
    API_BASE_URL: str = "http://localhost:3000"
    REQUEST_TIMEOUT: float = 10.0
    USER_AGENT: str = "lyricsync/1.0"

    # Local stores
    LRC_CACHE_DIR: Optional[str] = None
    LYRICS_DB_PATH: Optional[str] = None

    # Ordered list of sources consulted by the resolver
    SOURCES: List[str] = ["file_cache", "netease"]

    # Lower-cased title -> offset in milliseconds
    TIMING_OVERRIDES: Dict[str, int] = Field(default_factory=lambda: dict(DEFAULT_TIMING_OVERRIDES))

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_DIR: Optional[str] = None

    def get_app_dir(self) -> Path:
        """Per-user directory for lyricsync files, created on first use.

        Uses ``%APPDATA%\\lyricsync`` on Windows and
        ``$XDG_CONFIG_HOME/lyricsync`` (default ``~/.config/lyricsync``) elsewhere.
        """
        if os.name == "nt":
            root = Path(os.environ.get("APPDATA", ""))
        else:
            root = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")

        app_dir = root / self.APP_NAME
        app_dir.mkdir(parents=True, exist_ok=True)
        return app_dir

    def get_log_dir(self) -> Path:
        """Directory for log files: ``LOG_DIR`` if set, else ``<app dir>/logs``."""
        log_dir = Path(self.LOG_DIR) if self.LOG_DIR else self.get_app_dir() / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        return log_dir

    def get_log_file(self) -> Path:
        return self.get_log_dir() / f"{self.APP_NAME}.log"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
