"""
Error taxonomy shared by the render core and the HTTP layer.

Every error carries a stable ``code`` and the HTTP status the API maps it to.
"""

from typing import Any


class PdfServiceError(Exception):
    """Base class for all service errors."""

    code = "internal_error"
    http_status = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(PdfServiceError):
    """Malformed or oversized input, detected before any engine use."""

    code = "validation_error"
    http_status = 400


class LaunchError(PdfServiceError):
    """The browser engine could not be started."""

    code = "engine_launch_failed"
    http_status = 503


class LoadTimeoutError(PdfServiceError):
    """The HTML content did not become ready within the load timeout."""

    code = "load_timeout"
    http_status = 504


class RenderError(PdfServiceError):
    """Generic failure while capturing the PDF."""

    code = "render_failed"
    http_status = 500


class PostProcessError(PdfServiceError):
    """Footer masking failed. Never escapes the post-processor."""

    code = "post_process_failed"
    http_status = 500
