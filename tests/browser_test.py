import unittest
from unittest.mock import MagicMock, patch

from playwright.sync_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeout

from snapcrawler.errors import RenderFailure
from snapcrawler.rendering.browser import PlaywrightRenderer

PAGE_HTML = '<html><body><a href="/about">About</a><a href="#top">Top</a></body></html>'


class TestPlaywrightRenderer(unittest.TestCase):
    def setUp(self):
        self.renderer = PlaywrightRenderer(max_scroll_attempts=10, scroll_delay=0, settle_delay=0)
        self.renderer._context = MagicMock()
        self.page = self.renderer._context.new_page.return_value
        self.page.is_closed.return_value = False
        self.page.url = "https://example.com/"
        self.page.content.return_value = PAGE_HTML
        self.page.screenshot.return_value = b"\xff\xd8jpeg"

    def test_load_captures_page(self):
        self.page.evaluate.side_effect = [1000, 2000, 2000, None]
        rendered = self.renderer.load("https://example.com/", 30)

        self.assertEqual(rendered.html, PAGE_HTML)
        self.assertEqual(rendered.screenshot, b"\xff\xd8jpeg")
        self.assertEqual(rendered.links, ("https://example.com/about", "#top"))
        self.page.goto.assert_called_once_with("https://example.com/", wait_until="load", timeout=30000)
        self.page.screenshot.assert_called_once_with(type="jpeg", quality=80, full_page=True)
        self.page.close.assert_called_once()

    def test_scroll_is_bounded(self):
        heights = list(range(1, 100))
        self.page.evaluate.side_effect = heights
        self.renderer.load("https://example.com/", 30)
        # 10 scroll steps plus the final scroll back to the top
        self.assertEqual(self.page.evaluate.call_count, 11)

    def test_timeout_becomes_render_failure(self):
        self.page.goto.side_effect = PlaywrightTimeout("Timeout 30000ms exceeded")
        with self.assertRaises(RenderFailure):
            self.renderer.load("https://example.com/", 30)
        self.page.close.assert_called_once()

    def test_load_requires_open_browser(self):
        with self.assertRaises(RenderFailure):
            PlaywrightRenderer().load("https://example.com/", 30)

    def test_zero_timeout_never_opens_a_page(self):
        with self.assertRaises(RenderFailure):
            self.renderer.load("https://example.com/", 0)
        self.renderer._context.new_page.assert_not_called()

    def test_close_closes_open_pages_then_stops_playwright(self):
        context = self.renderer._context
        playwright = self.renderer._playwright = MagicMock()
        browser = self.renderer._browser = MagicMock()
        left_open = MagicMock()
        context.pages = [left_open]

        self.renderer.close()

        left_open.close.assert_called_once()
        context.close.assert_called_once()
        browser.close.assert_called_once()
        playwright.stop.assert_called_once()
        self.assertIsNone(self.renderer._context)
        self.assertIsNone(self.renderer._browser)

    def test_close_stops_playwright_when_browser_close_fails(self):
        playwright = self.renderer._playwright = MagicMock()
        browser = self.renderer._browser = MagicMock()
        self.renderer._context.pages = []
        browser.close.side_effect = PlaywrightError("Target closed")

        self.renderer.close()

        playwright.stop.assert_called_once()

    def test_launch_failure_releases_playwright(self):
        renderer = PlaywrightRenderer()
        with patch("snapcrawler.rendering.browser.sync_playwright") as sync_playwright:
            playwright = sync_playwright.return_value.start.return_value
            playwright.chromium.launch.side_effect = PlaywrightError("Executable doesn't exist")
            with self.assertRaises(RenderFailure):
                renderer.open()
        playwright.stop.assert_called_once()
        self.assertIsNone(renderer._playwright)

    def test_route_applies_interceptors(self):
        route = MagicMock()
        route.request.url = "https://example.com/font.woff2"
        route.request.resource_type = "font"
        self.renderer._route(route)
        route.abort.assert_called_once()
        route.continue_.assert_not_called()

        route = MagicMock()
        route.request.url = "https://example.com/"
        route.request.resource_type = "document"
        self.renderer._route(route)
        route.continue_.assert_called_once()


if __name__ == "__main__":
    unittest.main()
