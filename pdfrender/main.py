"""
PDF service entrypoint - runs uvicorn server.

Settings come from PDFRENDER_* environment variables (and .env); the
command-line flags override the bind address and log level for one run.
"""

import argparse

import uvicorn

from pdfrender.app import build_app
from pdfrender.config import Settings, get_settings, init_settings


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pdfrender",
        description="HTML to PDF rendering service on a pooled headless Chromium",
    )
    parser.add_argument("--host", help="bind address (default: PDFRENDER_HOST)")
    parser.add_argument("--port", type=int, help="listen port (default: PDFRENDER_PORT)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="log level (default: PDFRENDER_LOG_LEVEL)",
    )
    return parser.parse_args(argv)


def resolve_settings(args: argparse.Namespace) -> Settings:
    """Environment settings with any command-line overrides applied."""
    settings = get_settings()
    overrides = {
        key: value
        for key, value in (("host", args.host), ("port", args.port), ("log_level", args.log_level))
        if value is not None
    }
    if overrides:
        settings = init_settings(settings.model_copy(update=overrides))
    return settings


def main(argv: list[str] | None = None) -> None:
    """Run the PDF service."""
    settings = resolve_settings(parse_args(argv))
    app = build_app(settings)

    print(f"Starting PDF service on http://{settings.host}:{settings.port}")
    print(f"Browser idle timeout: {settings.engine_idle_timeout_seconds:.0f}s, "
          f"max HTML size: {settings.max_html_bytes} bytes")

    # uvicorn runs the lifespan shutdown (and so closes the browser) on SIGINT/SIGTERM.
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
