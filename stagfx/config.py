"""Library configuration."""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings

AssetMode = Literal["strict", "warn", "silent"]


class Settings(BaseSettings):
    """Settings, overridable through ``STAGFX_*`` environment variables."""

    # Asset resolution
    ASSETS_DIR: Path = Path.cwd() / "assets"
    ASSET_MODE: AssetMode = "warn"  # strict: fail, warn: log + literal path, silent: literal path

    # Output
    OUTPUT_FORMAT: str = "png"  # Format for still images, animations are always GIF

    # Transform defaults
    DEFAULT_BLINK_DELAY: int = 200  # Milliseconds
    DEFAULT_BLINK_LOOP: bool = True
    DEFAULT_BORDER_COLOR: str = "#000000"

    # Limits
    MAX_IMAGE_PIXELS: int = 4096 * 4096  # Decoded images above this are rejected

    LOG_LEVEL: str = "WARNING"

    model_config = {"env_prefix": "STAGFX_"}


settings = Settings()
