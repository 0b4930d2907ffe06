"""
Render service - validate, render and post-process one PDF request.
"""

import asyncio
import io
import time

from pypdf import PdfReader

from pdfrender.config import Settings, get_settings
from pdfrender.shared.errors import PdfServiceError, RenderError, ValidationError
from pdfrender.shared.logging import get_logger

from .footer import FooterMask
from .pipeline import RenderPipeline
from .pool import EnginePool
from .schemas import FooterDisplayMode, RenderRequest, RenderResult
from .session import RenderSession
from .validator import validate_html

logger = get_logger(__name__)


class RenderService:
    """Service for rendering HTML to PDF on the pooled browser."""

    def __init__(
        self,
        pool: EnginePool,
        settings: Settings | None = None,
        pipeline: RenderPipeline | None = None,
        footer_mask: FooterMask | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.pool = pool
        self.pipeline = pipeline or RenderPipeline(self.settings)
        self.footer_mask = footer_mask or FooterMask(self.settings)

    async def render(self, request: RenderRequest) -> RenderResult:
        """
        Render a request into a finished PDF.

        Raises:
            ValidationError: The HTML is missing, not text, or too large.
            LaunchError: The browser could not be started.
            LoadTimeoutError: The content did not load in time.
            RenderError: Anything else that went wrong while rendering.
        """
        if not validate_html(request.html, self.settings.max_html_bytes):
            raise ValidationError(
                "Invalid HTML content (too large or malformed)",
                details={"max_bytes": self.settings.max_html_bytes},
            )

        logger.info(
            f"Generating PDF: {request.filename} (footer mode: {request.footer_display.value})"
        )
        start_time = time.perf_counter()

        try:
            handle = await self.pool.acquire()
            async with await RenderSession.create(handle, self.settings) as session:
                pdf_bytes = await self.pipeline.render(session, request.html)
        except PdfServiceError:
            raise
        except Exception as e:
            logger.exception("PDF generation error")
            raise RenderError(f"PDF generation failed: {e}") from e

        final_bytes, page_count = await asyncio.to_thread(
            self._post_process, pdf_bytes, request.footer_display
        )

        duration_ms = int((time.perf_counter() - start_time) * 1000)
        logger.info(f"PDF generated in {duration_ms}ms ({page_count} pages, {len(final_bytes)} bytes)")

        return RenderResult(
            content=final_bytes,
            filename=request.filename,
            page_count=page_count,
            duration_ms=duration_ms,
        )

    def _post_process(self, pdf_bytes: bytes, mode: FooterDisplayMode) -> tuple[bytes, int]:
        """Mask footers and count pages. Blocking, so it runs off the event loop."""
        final_bytes, page_count = self.footer_mask.process(pdf_bytes, mode)
        if page_count is None:
            page_count = count_pages(final_bytes)
        return final_bytes, page_count


def count_pages(pdf_bytes: bytes) -> int:
    """Page count of a PDF, or 0 if it cannot be parsed."""
    try:
        return len(PdfReader(io.BytesIO(pdf_bytes)).pages)
    except Exception:
        logger.warning("Could not count pages of generated PDF")
        return 0
