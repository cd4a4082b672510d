"""
Configuration management for the screenshot courier.

Uses pydantic-settings to load configuration from environment variables
and .env files.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.utils.helpers import default_screenshot_dir


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Discord Configuration
    discord_token: str = ""
    discord_guild_id: Optional[str] = None
    discord_api_url: str = "https://discord.com/api/v10"
    request_timeout: float = 30.0

    # Screenshot Configuration
    runelite_username: str = ""
    screenshot_dir: Optional[Path] = None

    # State Configuration
    state_file: Path = Path("data/state.json")

    # Scheduler Configuration
    scan_interval: float = 60.0  # seconds
    shutdown_grace: float = 10.0  # seconds
    run_once: bool = False

    # Logging Configuration
    log_level: str = "INFO"
    ready_text: str = "RuneLite Screenshot Uploader ready!"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def get_screenshot_dir(self) -> Path:
        """Return the watched directory, falling back to RuneLite's default."""
        if self.screenshot_dir is not None:
            return Path(self.screenshot_dir).expanduser()
        if not self.runelite_username:
            raise ValueError("Set RUNELITE_USERNAME or SCREENSHOT_DIR to choose the screenshot directory")
        return default_screenshot_dir(self.runelite_username)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
