"""
Engine pool - a single shared headless Chromium for the whole process.

Launching Chromium costs far more than opening a context in a running
browser, so one browser is kept alive and handed to every request. The pool
launches it lazily, replaces it when it has crashed, and recycles it when it
has sat idle for longer than ``engine_idle_timeout_seconds``. Staleness
is checked lazily, on acquire() or release_idle_check(); nothing runs in
the background.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

from playwright.async_api import Browser, Playwright, async_playwright

from pdfrender.config import Settings, get_settings
from pdfrender.shared.errors import LaunchError
from pdfrender.shared.logging import get_logger

logger = get_logger(__name__)


class EngineState(str, Enum):
    """Connection state of the pooled browser."""

    ABSENT = "absent"
    LIVE = "live"
    DISCONNECTED = "disconnected"


@dataclass
class EngineHandle:
    """A launched browser plus the Playwright driver that owns it."""

    browser: Browser
    playwright: Playwright | None
    launched_at: float
    last_acquired_at: float

    @property
    def is_connected(self) -> bool:
        return self.browser.is_connected()

    async def dispose(self) -> None:
        """Close the browser, then stop its driver."""
        try:
            await self.browser.close()
        finally:
            if self.playwright is not None:
                await self.playwright.stop()


Launcher = Callable[[Settings], Awaitable[tuple[Browser, Playwright | None]]]


def chromium_args(settings: Settings) -> list[str]:
    """Launch flags tuned for small containers."""
    return [
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-dev-shm-usage",  # /dev/shm is tiny in Docker
        "--disable-gpu",
        "--disable-software-rasterizer",
        "--disable-extensions",
        "--disable-background-networking",
        "--disable-background-timer-throttling",
        "--disable-backgrounding-occluded-windows",
        "--disable-renderer-backgrounding",
        "--disable-sync",
        "--no-first-run",
        "--mute-audio",
        f"--js-flags=--max-old-space-size={settings.engine_max_heap_mb}",
    ]


async def launch_chromium(settings: Settings) -> tuple[Browser, Playwright]:
    """Start a Playwright driver and launch headless Chromium on it."""
    playwright = await async_playwright().start()
    try:
        browser = await playwright.chromium.launch(
            headless=True,
            args=chromium_args(settings),
        )
    except Exception:
        await playwright.stop()
        raise
    return browser, playwright


class EnginePool:
    """Owns at most one live browser and hands it out to requests."""

    def __init__(
        self,
        settings: Settings | None = None,
        launcher: Launcher | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings or get_settings()
        self._launcher = launcher or launch_chromium
        self._clock = clock
        self._handle: EngineHandle | None = None
        # Serializes check-and-launch so concurrent callers share one launch.
        self._lock = asyncio.Lock()
        self.launch_count = 0

    @property
    def state(self) -> EngineState:
        handle = self._handle
        if handle is None:
            return EngineState.ABSENT
        if not handle.is_connected:
            return EngineState.DISCONNECTED
        return EngineState.LIVE

    async def acquire(self) -> EngineHandle:
        """
        Return the live browser, launching or relaunching it if needed.

        Raises:
            LaunchError: Chromium could not be started. The pool stays
                empty and the next call tries again.
        """
        async with self._lock:
            await self._evict_stale()

            handle = self._handle
            if handle is None:
                handle = await self._launch()

            handle.last_acquired_at = self._clock()
            return handle

    async def release_idle_check(self) -> bool:
        """
        Dispose of the browser if it is disconnected or past the idle timeout.

        acquire() runs the same check itself; hosts may call this directly to
        free the browser early. Returns True if a browser was released.
        """
        async with self._lock:
            return await self._evict_stale()

    async def _evict_stale(self) -> bool:
        """Drop a crashed or idle handle. Caller must hold the lock."""
        handle = self._handle
        if handle is None:
            return False

        if not handle.is_connected:
            logger.warning("Browser disconnected unexpectedly, discarding")
            await self._discard(handle)
            return True

        idle = self._clock() - handle.last_acquired_at
        if idle > self.settings.engine_idle_timeout_seconds:
            logger.info(f"Browser idle for {idle:.0f}s, recycling")
            await self._discard(handle)
            return True

        return False

    async def close(self) -> None:
        """Dispose of the browser. Errors are logged, never raised."""
        async with self._lock:
            handle = self._handle
            if handle is None:
                return
            await self._discard(handle)
            logger.info("Browser pool closed")

    async def _launch(self) -> EngineHandle:
        logger.info("Launching headless Chromium")
        started = self._clock()
        try:
            browser, playwright = await self._launcher(self.settings)
        except Exception as e:
            logger.error(f"Browser launch failed: {e}")
            raise LaunchError(f"Failed to launch browser: {e}") from e

        now = self._clock()
        handle = EngineHandle(
            browser=browser,
            playwright=playwright,
            launched_at=now,
            last_acquired_at=now,
        )
        self._handle = handle
        self.launch_count += 1
        logger.info(f"Browser launched in {(now - started) * 1000:.0f}ms")
        return handle

    async def _discard(self, handle: EngineHandle) -> None:
        """Forget the handle, then dispose of it best-effort."""
        if self._handle is handle:
            self._handle = None
        try:
            await handle.dispose()
        except Exception as e:
            logger.warning(f"Error disposing browser: {e}")
