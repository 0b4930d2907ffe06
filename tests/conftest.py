"""
Shared fixtures.

The fake browser below stands in for Playwright's Chromium: contexts, pages
and page.pdf() behave like the real thing closely enough for the pool,
session and pipeline to run end to end. page.pdf() produces a real PDF (via
reportlab) with one page per ``<section`` in the loaded HTML, the first
``<h1>`` printed on every page, and a "Footer" line at the bottom.
"""

import asyncio
import io
import re
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from pypdf import PageObject
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from pdfrender.app import build_app
from pdfrender.config import Settings, init_settings, reset_settings
from pdfrender.modules.render.pool import EnginePool

_H1_RE = re.compile(r"<h1[^>]*>(.*?)</h1>", re.IGNORECASE | re.DOTALL)


def make_pdf(
    pages: int, title: str = "Document", footer: str = "Footer", pagesize=A4
) -> bytes:
    """Deterministic multi-page PDF (A4 unless told otherwise) with a footer line on each page."""
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=pagesize, invariant=1)
    for number in range(1, pages + 1):
        c.drawString(72, 760, f"{title} - page {number}")
        c.drawString(72, 20, footer)
        c.showPage()
    c.save()
    return buffer.getvalue()


def white_rects(page: PageObject) -> list[tuple[float, float, float, float]]:
    """(x, y, width, height) of every rectangle drawn while the fill colour is white."""
    rects = []
    white = False
    for operands, operator in page.get_contents().operations:
        if operator == b"rg":
            white = [float(v) for v in operands] == [1.0, 1.0, 1.0]
        elif operator == b"re" and white:
            x, y, width, height = (float(v) for v in operands)
            rects.append((x, y, width, height))
    return rects


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakePage:
    def __init__(self, context: "FakeContext") -> None:
        self.context = context
        self.html: str | None = None
        self.pdf_options: dict | None = None
        self.closed = False

    async def set_content(self, html: str, wait_until: str, timeout: int) -> None:
        browser = self.context.browser
        self.load_options = {"wait_until": wait_until, "timeout": timeout}
        if browser.fail_load:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")
        self.html = html
        # Yield so concurrent renders interleave.
        await asyncio.sleep(0)

    async def wait_for_timeout(self, timeout: float) -> None:
        self.context.browser.settle_waits.append(timeout)
        await asyncio.sleep(0)

    async def pdf(self, **options) -> bytes:
        browser = self.context.browser
        self.pdf_options = options
        if browser.pdf_output is not None:
            return browser.pdf_output
        html = self.html or ""
        match = _H1_RE.search(html)
        title = match.group(1).strip() if match else "Document"
        pages = max(1, html.lower().count("<section"))
        return make_pdf(pages, title=title)

    async def close(self) -> None:
        self.closed = True


class FakeContext:
    def __init__(self, browser: "FakeBrowser", options: dict) -> None:
        self.browser = browser
        self.options = options
        self.pages: list[FakePage] = []
        self.closed = False

    async def new_page(self) -> FakePage:
        page = FakePage(self)
        self.pages.append(page)
        return page

    async def close(self) -> None:
        self.closed = True
        if self.browser.fail_context_close:
            raise RuntimeError("context already gone")


class FakeBrowser:
    def __init__(self) -> None:
        self.connected = True
        self.closed = False
        self.contexts: list[FakeContext] = []
        self.settle_waits: list[float] = []
        self.fail_load = False
        self.fail_close = False
        self.fail_context_close = False
        self.pdf_output: bytes | None = None

    def is_connected(self) -> bool:
        return self.connected

    async def new_context(self, **options) -> FakeContext:
        context = FakeContext(self, options)
        self.contexts.append(context)
        return context

    async def close(self) -> None:
        self.closed = True
        self.connected = False
        if self.fail_close:
            raise RuntimeError("browser close failed")

    def crash(self) -> None:
        self.connected = False


class FakeLauncher:
    """Pool launcher returning FakeBrowsers; optionally slow or failing."""

    def __init__(self, delay: float = 0.0) -> None:
        self.delay = delay
        self.browsers: list[FakeBrowser] = []
        self.fail_with: Exception | None = None

    async def __call__(self, settings: Settings) -> tuple[FakeBrowser, None]:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with
        browser = FakeBrowser()
        self.browsers.append(browser)
        return browser, None

    @property
    def last(self) -> FakeBrowser:
        return self.browsers[-1]


@pytest.fixture
def settings() -> Iterator[Settings]:
    """Test settings, installed as the process-wide settings."""
    reset_settings()
    s = init_settings(Settings(_env_file=None, log_level="DEBUG", render_settle_delay_ms=500))
    yield s
    reset_settings()


@pytest.fixture
def launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def pool(settings: Settings, launcher: FakeLauncher, clock: FakeClock) -> EnginePool:
    return EnginePool(settings, launcher=launcher, clock=clock)


@pytest.fixture
def client(settings: Settings, pool: EnginePool) -> Iterator[TestClient]:
    """Test client running the app lifespan around each test."""
    app = build_app(settings, engine_pool=pool)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_launcher() -> type[FakeLauncher]:
    """Factory for launchers with custom delay/failure behaviour."""
    return FakeLauncher
