"""Process-level settings for franzpy."""
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def default_config_path() -> Path:
    """Default location of the configuration document."""
    return Path.home() / ".franz" / "config"


class Settings(BaseSettings):
    """Settings read from ``FRANZPY_*`` environment variables.

    Command line options take precedence over these values.
    """

    model_config = SettingsConfigDict(
        env_prefix="FRANZPY_",
        case_sensitive=False,
    )

    config_path: Path = Field(default_factory=default_config_path)
    log_level: str = Field(default="WARNING")
    log_format: Literal["text", "json"] = Field(default="text")
    log_file: Optional[str] = None
