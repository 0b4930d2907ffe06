"""Render module - HTML to PDF rendering on a pooled Playwright browser."""

from .footer import FooterMask
from .pipeline import RenderPipeline
from .pool import EngineHandle, EnginePool, EngineState
from .router import router
from .schemas import FooterDisplayMode, RenderPdfRequest, RenderRequest, RenderResult
from .service import RenderService
from .session import RenderSession
from .validator import validate_html

__all__ = [
    "router",
    "EngineHandle",
    "EnginePool",
    "EngineState",
    "FooterDisplayMode",
    "FooterMask",
    "RenderPdfRequest",
    "RenderPipeline",
    "RenderRequest",
    "RenderResult",
    "RenderService",
    "RenderSession",
    "validate_html",
]
