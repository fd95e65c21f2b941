"""
scrape.py
─────────────────────────────────────────────
Headless-browser scraping of a rendered test page (Playwright, Chromium).
  • BrowserSession   → launch browser, open one page, close on exit
  • wait_for_marker  → wait, with no timeout, for the completion selector
  • extract_*        → image handle, element ids, or a full-page screenshot
No retries: any failure propagates and ends the run.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from playwright.async_api import async_playwright

from config.settings import (
    SCRAPE_DONE_SELECTOR,
    SCRAPE_HEADLESS,
    SCRAPE_ID_SELECTOR,
    SCRAPE_IMAGE_SELECTOR,
    SCRAPE_VIEWPORT_HEIGHT,
    SCRAPE_VIEWPORT_WIDTH,
    SCREENSHOT_PATH,
)
from rasterizer.logger import get_logger

log = get_logger("scrape")

_IDS_SCRIPT = "elements => elements.map(element => element.id)"


@dataclass
class ScrapeResult:
    """Whatever one scrape run produced, plus per-step timings in ms."""

    element: Optional[Any] = None
    identifiers: List[str] = field(default_factory=list)
    screenshot: Optional[Path] = None
    timings: Dict[str, float] = field(default_factory=dict)


class _StepTimer:
    def __init__(self, timings: Dict[str, float]):
        self._timings = timings
        self._mark = time.perf_counter()

    def lap(self, step: str) -> None:
        now = time.perf_counter()
        elapsed = round((now - self._mark) * 1000, 1)
        self._timings[step] = elapsed
        self._mark = now
        log.debug(f"  {step:<10} {elapsed} ms")


class BrowserSession:
    """
    Async context manager owning one headless Chromium and one page.

        async with BrowserSession() as session:
            await session.page.goto(url)
    """

    def __init__(
        self,
        headless: bool = SCRAPE_HEADLESS,
        playwright_factory: Callable[[], Any] = async_playwright,
        timer: Optional[_StepTimer] = None,
    ) -> None:
        self.headless = headless
        self._playwright_factory = playwright_factory
        self._timer = timer
        self._playwright = None
        self.browser = None
        self.page = None

    async def __aenter__(self) -> "BrowserSession":
        self._playwright = await self._playwright_factory().start()
        self.browser = await self._playwright.chromium.launch(headless=self.headless)
        self._lap("launch")
        self.page = await self.browser.new_page()
        self._lap("new_page")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        try:
            if self.browser is not None:
                await self.browser.close()
                self._lap("close")
        finally:
            if self._playwright is not None:
                await self._playwright.stop()

    async def goto(self, url: str) -> None:
        log.info(f"Navigating to {url}")
        await self.page.goto(url)
        self._lap("goto")

    def _lap(self, step: str) -> None:
        if self._timer is not None:
            self._timer.lap(step)


async def wait_for_marker(page: Any, selector: str = SCRAPE_DONE_SELECTOR) -> Any:
    """Block until *selector* appears. timeout=0 disables Playwright's 30 s default."""
    return await page.wait_for_selector(selector, timeout=0)


async def extract_image(page: Any, selector: str = SCRAPE_IMAGE_SELECTOR) -> Any:
    return await page.wait_for_selector(selector)


async def extract_identifiers(page: Any, selector: str = SCRAPE_ID_SELECTOR) -> List[str]:
    return list(await page.eval_on_selector_all(selector, _IDS_SCRIPT))


async def scrape(
    url: str,
    mode: str = "image",
    session_factory: Callable[..., BrowserSession] = BrowserSession,
) -> ScrapeResult:
    """
    Run one scrape against *url*.

    Parameters
    ----------
    mode : str
        ``"image"`` returns the first image element handle, ``"ids"`` the
        ids of every element matching SCRAPE_ID_SELECTOR.
    """
    if mode not in ("image", "ids"):
        raise ValueError(f"Unknown scrape mode: {mode!r}")

    result = ScrapeResult()
    timer = _StepTimer(result.timings)

    async with session_factory(timer=timer) as session:
        await session.goto(url)
        await wait_for_marker(session.page)
        timer.lap("wait")

        if mode == "image":
            result.element = await extract_image(session.page)
            log.info(f"Image element: {result.element}")
        else:
            result.identifiers = await extract_identifiers(session.page)
            log.info(f"Found {len(result.identifiers)} identifier(s): {result.identifiers}")
        timer.lap("extract")

    return result


async def capture_screenshot(
    url: str,
    path: Path = SCREENSHOT_PATH,
    session_factory: Callable[..., BrowserSession] = BrowserSession,
) -> ScrapeResult:
    """Full-page screenshot of *url* once the completion marker is present."""
    result = ScrapeResult()
    timer = _StepTimer(result.timings)

    async with session_factory(timer=timer) as session:
        await session.page.set_viewport_size(
            {"width": SCRAPE_VIEWPORT_WIDTH, "height": SCRAPE_VIEWPORT_HEIGHT}
        )
        timer.lap("viewport")
        await session.goto(url)
        await wait_for_marker(session.page)
        timer.lap("wait")

        await session.page.screenshot(full_page=True, path=str(path))
        timer.lap("screenshot")
        result.screenshot = Path(path)
        log.info(f"Screenshot saved → {path}")

    return result
