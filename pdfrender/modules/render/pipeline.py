"""Render pipeline - HTML into an A4 PDF inside a render session."""

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from pdfrender.config import Settings, get_settings
from pdfrender.shared.errors import LoadTimeoutError, RenderError
from pdfrender.shared.logging import get_logger

from .session import RenderSession

logger = get_logger(__name__)

ZERO_MARGINS = {
    "top": "0mm",
    "right": "0mm",
    "bottom": "0mm",
    "left": "0mm",
}


class RenderPipeline:
    """Load HTML into a session's page and print it to PDF."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    async def render(self, session: RenderSession, html: str) -> bytes:
        """
        Render HTML content to PDF bytes.

        The page is considered ready once ``render_wait_until`` fires, plus a
        fixed settle delay for web fonts and client-side scripts. That delay
        is a heuristic, not a readiness guarantee.

        Raises:
            LoadTimeoutError: Content did not load within the timeout.
            RenderError: Any other failure while loading or printing.
        """
        page = session.page
        timeout_ms = self.settings.render_load_timeout_ms

        try:
            await page.set_content(
                html,
                wait_until=self.settings.render_wait_until,
                timeout=timeout_ms,
            )
        except PlaywrightTimeoutError as e:
            raise LoadTimeoutError(
                f"Content did not finish loading within {timeout_ms}ms",
                details={"timeout_ms": timeout_ms},
            ) from e
        except PlaywrightError as e:
            raise RenderError(f"Failed to load HTML content: {e}") from e

        try:
            if self.settings.render_settle_delay_ms > 0:
                await page.wait_for_timeout(self.settings.render_settle_delay_ms)

            # Margins come from the document's own @page rules.
            pdf_bytes = await page.pdf(
                format="A4",
                print_background=True,
                margin=ZERO_MARGINS,
                prefer_css_page_size=True,
                display_header_footer=False,
            )
        except PlaywrightError as e:
            raise RenderError(f"Failed to print PDF: {e}") from e

        logger.info(f"Generated PDF: {len(pdf_bytes)} bytes")
        return pdf_bytes
