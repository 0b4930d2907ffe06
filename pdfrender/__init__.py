"""PDF render service - HTML to PDF over a pooled headless Chromium."""

__version__ = "1.0.0"
