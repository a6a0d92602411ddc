"""
Application Settings
===================

Generator settings and environment configuration using Pydantic Settings.
Supports development, testing, and production environments.
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


DEFAULT_MONO_FONT_PATH = (
    Path.home() / ".local" / "share" / "fonts" / "jetbrains-mono" / "JetBrainsMono-Regular.ttf"
)


class Settings(BaseSettings):
    """Main generator settings with environment variable support."""

    # Application Configuration
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )

    # Canvas Configuration
    canvas_width: int = Field(default=1200, gt=0, le=4000, description="Card width in pixels")
    canvas_height: int = Field(default=630, gt=0, le=4000, description="Card height in pixels")

    # Output Configuration
    output_path: Path = Field(
        default=Path("docs/assets/ogp.png"), description="Destination of the rendered PNG"
    )
    optimize_png: bool = Field(default=True, description="Re-encode the PNG with Pillow")

    # Font Configuration
    stylesheet_url: str = Field(
        default="https://fonts.googleapis.com/css2", description="Google Fonts CSS endpoint"
    )
    stylesheet_weight: int = Field(
        default=700, description="Weight requested from the stylesheet endpoint"
    )
    mono_font_path: Path = Field(
        default=DEFAULT_MONO_FONT_PATH, description="Local monospaced font file"
    )
    fetch_timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")

    # Content Configuration
    content_path: Optional[Path] = Field(
        default=None, description="Optional JSON/YAML file overriding the card content"
    )

    # Browser Configuration
    playwright_headless: bool = Field(default=True, description="Run browser in headless mode")
    playwright_timeout: int = Field(default=30000, description="Playwright timeout in milliseconds")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[Path] = Field(default=None, description="Optional rotating log file")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("mono_font_path", "content_path")
    @classmethod
    def expand_user(cls, v: Optional[Path]) -> Optional[Path]:
        """Expand ``~`` in configured input paths."""
        return v.expanduser() if v is not None else v

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="OGP_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings
