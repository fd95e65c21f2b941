"""Shared fixtures: a small PDF on disk and async Playwright fakes."""

from pathlib import Path

import fitz  # PyMuPDF
import pytest

from rasterizer.scrape import BrowserSession

PAGE_SIZES = [(200, 300), (300, 200), (120, 120)]


@pytest.fixture
def three_page_pdf(tmp_path) -> Path:
    """A 3-page PDF with a red square near the top-left of each page."""
    doc = fitz.open()
    for width, height in PAGE_SIZES:
        page = doc.new_page(width=width, height=height)
        page.draw_rect(fitz.Rect(10, 10, 50, 50), color=(1, 0, 0), fill=(1, 0, 0))
    path = tmp_path / "three.pdf"
    doc.save(str(path))
    doc.close()
    return path


# ── Playwright fakes ────────────────────────
# Every call is appended to a shared list so tests can assert on order.

class FakePage:
    def __init__(self, calls, fail_wait=False):
        self.calls = calls
        self.fail_wait = fail_wait

    async def goto(self, url):
        self.calls.append(("goto", url))

    async def wait_for_selector(self, selector, timeout=None):
        self.calls.append(("wait", selector, timeout))
        if self.fail_wait:
            raise RuntimeError("page crashed")
        return f"<ElementHandle {selector}>"

    async def eval_on_selector_all(self, selector, script):
        self.calls.append(("eval", selector))
        return ["first", "second", ""]

    async def set_viewport_size(self, size):
        self.calls.append(("viewport", size["width"], size["height"]))

    async def screenshot(self, full_page=False, path=None):
        self.calls.append(("screenshot", full_page))
        Path(path).write_bytes(b"\x89PNG fake")


class FakeBrowser:
    def __init__(self, calls, page):
        self.calls = calls
        self.page = page

    async def new_page(self):
        self.calls.append(("new_page",))
        return self.page

    async def close(self):
        self.calls.append(("close",))


class FakeChromium:
    def __init__(self, calls, browser):
        self.calls = calls
        self.browser = browser

    async def launch(self, headless=True):
        self.calls.append(("launch", headless))
        return self.browser


class FakePlaywright:
    def __init__(self, calls, fail_wait=False):
        self.calls = calls
        self.chromium = FakeChromium(calls, FakeBrowser(calls, FakePage(calls, fail_wait)))

    async def start(self):
        return self

    async def stop(self):
        self.calls.append(("stop",))


@pytest.fixture
def calls():
    return []


@pytest.fixture
def fake_page(calls):
    return FakePage(calls)


@pytest.fixture
def session_factory(calls):
    """Build a BrowserSession factory backed by the fakes; pass fail_wait=True to crash waits."""
    def _make(fail_wait=False):
        def factory(timer=None):
            return BrowserSession(playwright_factory=lambda: FakePlaywright(calls, fail_wait), timer=timer)
        return factory

    return _make
