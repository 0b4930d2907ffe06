"""
Render session - one isolated browser context and page per request.

Each request gets a fresh BrowserContext, so cookies, storage and cache are
never shared between concurrent renders. Use it as an async context manager
so teardown runs on every exit path.
"""

from types import TracebackType

from playwright.async_api import BrowserContext, Page

from pdfrender.config import Settings
from pdfrender.shared.logging import get_logger

from .pool import EngineHandle

logger = get_logger(__name__)


class RenderSession:
    """A browser context plus its single page, scoped to one request."""

    def __init__(self, context: BrowserContext, page: Page) -> None:
        self.context = context
        self.page = page
        self._closed = False

    @classmethod
    async def create(cls, handle: EngineHandle, settings: Settings) -> "RenderSession":
        context = await handle.browser.new_context(
            viewport={
                "width": settings.viewport_width,
                "height": settings.viewport_height,
            },
            device_scale_factor=settings.device_scale_factor,
        )
        try:
            page = await context.new_page()
        except Exception:
            await _quietly_close(context, "context")
            raise
        return cls(context, page)

    async def close(self) -> None:
        """Close the page, then the context. Never raises."""
        if self._closed:
            return
        self._closed = True
        await _quietly_close(self.page, "page")
        await _quietly_close(self.context, "context")

    async def __aenter__(self) -> "RenderSession":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()


async def _quietly_close(target: Page | BrowserContext, what: str) -> None:
    try:
        await target.close()
    except Exception as e:
        logger.warning(f"Error closing {what}: {e}")
