"""Tests for the scrape pipeline, with Playwright replaced by async fakes."""

import asyncio

import pytest

from rasterizer.scrape import (
    capture_screenshot,
    extract_identifiers,
    scrape,
    wait_for_marker,
)

URL = "http://127.0.0.1:5500/test.html"


class TestScrape:
    """Tests for the image / ids scrape modes."""

    def test_image_mode(self, calls, session_factory):
        """Navigate, wait for #done with no timeout, then grab the img handle."""
        result = asyncio.run(scrape(URL, "image", session_factory=session_factory()))

        assert result.element == "<ElementHandle img>"
        assert calls == [
            ("launch", True),
            ("new_page",),
            ("goto", URL),
            ("wait", "#done", 0),
            ("wait", "img", None),
            ("close",),
            ("stop",),
        ]

    def test_ids_mode(self, calls, session_factory):
        result = asyncio.run(scrape(URL, "ids", session_factory=session_factory()))

        assert result.identifiers == ["first", "second", ""]
        assert ("eval", "[id]") in calls
        assert calls[-2:] == [("close",), ("stop",)]

    def test_unknown_mode_launches_nothing(self, calls, session_factory):
        with pytest.raises(ValueError):
            asyncio.run(scrape(URL, "pdf", session_factory=session_factory()))
        assert calls == []

    def test_failure_propagates_and_closes_browser(self, calls, session_factory):
        with pytest.raises(RuntimeError, match="page crashed"):
            asyncio.run(scrape(URL, "image", session_factory=session_factory(fail_wait=True)))
        assert calls[-2:] == [("close",), ("stop",)]

    def test_timings_are_recorded(self, calls, session_factory):
        result = asyncio.run(scrape(URL, "image", session_factory=session_factory()))
        assert list(result.timings) == ["launch", "new_page", "goto", "wait", "extract", "close"]
        assert all(ms >= 0 for ms in result.timings.values())


class TestScreenshot:
    """Tests for the full-page screenshot mode."""

    def test_screenshot_mode(self, calls, session_factory, tmp_path):
        path = tmp_path / "out.png"

        result = asyncio.run(capture_screenshot(URL, path, session_factory=session_factory()))

        assert result.screenshot == path
        assert path.read_bytes().startswith(b"\x89PNG")
        assert ("viewport", 1920, 1080) in calls
        assert ("screenshot", True) in calls
        assert calls.index(("wait", "#done", 0)) < calls.index(("screenshot", True))
        assert list(result.timings) == [
            "launch", "new_page", "viewport", "goto", "wait", "screenshot", "close",
        ]


class TestHelpers:
    """Tests for the single-step helpers."""

    def test_wait_for_marker_never_times_out(self, calls, fake_page):
        asyncio.run(wait_for_marker(fake_page, "#ready"))
        assert calls == [("wait", "#ready", 0)]

    def test_extract_identifiers_returns_list(self, calls, fake_page):
        ids = asyncio.run(extract_identifiers(fake_page, ".item"))
        assert ids == ["first", "second", ""]
        assert calls == [("eval", ".item")]
