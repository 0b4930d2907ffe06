"""Tests for settings loading."""

from pdfrender.config import Settings, get_settings, init_settings, reset_settings


def test_defaults() -> None:
    s = Settings(_env_file=None)
    assert s.port == 3001
    assert s.engine_idle_timeout_seconds == 300
    assert s.render_load_timeout_ms == 30_000
    assert s.render_settle_delay_ms == 500
    assert s.footer_band_mm == 15
    assert s.default_filename == "document.pdf"


def test_env_prefix_overrides(monkeypatch) -> None:
    monkeypatch.setenv("PDFRENDER_PORT", "8080")
    monkeypatch.setenv("PDFRENDER_ENGINE_IDLE_TIMEOUT_SECONDS", "60")
    monkeypatch.setenv("PDFRENDER_CORS_ORIGINS", '["https://app.example.com"]')

    s = Settings(_env_file=None)

    assert s.port == 8080
    assert s.engine_idle_timeout_seconds == 60
    assert s.cors_origins == ["https://app.example.com"]


def test_init_and_reset_settings() -> None:
    custom = Settings(_env_file=None, max_html_bytes=10)
    try:
        init_settings(custom)
        assert get_settings() is custom

        reset_settings()
        assert get_settings() is not custom
    finally:
        reset_settings()
