"""
Settings - centralized configuration management.

Values come from environment variables prefixed with ``PDFRENDER_`` (or a
local ``.env`` file), e.g. ``PDFRENDER_PORT=8080``.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="PDFRENDER_",
        env_file=".env",
        extra="ignore",
    )

    # ========== Server ==========
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # ========== Requests ==========
    max_html_bytes: int = 5 * 1024 * 1024  # 5MB
    default_filename: str = "document.pdf"

    # ========== Engine pool ==========
    engine_idle_timeout_seconds: float = 300.0
    engine_max_heap_mb: int = 512

    # ========== Rendering ==========
    render_wait_until: str = "networkidle"  # load | domcontentloaded | networkidle
    render_load_timeout_ms: int = 30_000
    render_settle_delay_ms: int = 500

    # A4 at 96 DPI
    viewport_width: int = 794
    viewport_height: int = 1123
    device_scale_factor: float = 2.0

    # ========== Post-processing ==========
    footer_band_mm: float = 15.0


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def init_settings(settings: Settings) -> Settings:
    """Install explicit settings (tests, embedding)."""
    global _settings
    _settings = settings
    return settings


def reset_settings() -> None:
    """Drop cached settings so the next get_settings() reloads them."""
    global _settings
    _settings = None
