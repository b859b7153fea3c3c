"""
Synchronous page renderer using Playwright (Chromium).
One browser per job: launched in open(), shared by every page visit,
closed together with any page still open in close().
"""

from playwright.sync_api import sync_playwright, Error as PlaywrightError, TimeoutError as PlaywrightTimeout

from snapcrawler.core import (
    MAX_SCROLL_ATTEMPTS,
    SCROLL_DELAY,
    SETTLE_DELAY,
    VIEWPORT_WIDTH,
    VIEWPORT_HEIGHT,
    SCREENSHOT_QUALITY,
    USER_AGENT,
    logger,
)
from snapcrawler.errors import RenderFailure
from snapcrawler.models import RenderedPage
from snapcrawler.parser import extract_hrefs
from snapcrawler.rendering.engine import PageRenderer
from snapcrawler.rendering.interception import Decision, OutboundRequest, default_interceptors, evaluate

_SCROLL_STEP_JS = "() => { window.scrollBy(0, window.innerHeight); return document.documentElement.scrollHeight; }"


class PlaywrightRenderer(PageRenderer):
    """
    FLOW: new page -> route every request through the interceptor chain ->
    goto (load) -> bounded auto-scroll for lazy content -> back to top and settle ->
    HTML + full-page JPEG + anchors -> page closed.
    """

    def __init__(self, interceptors=None, max_scroll_attempts=MAX_SCROLL_ATTEMPTS,
                 scroll_delay=SCROLL_DELAY, settle_delay=SETTLE_DELAY):
        self.interceptors = tuple(interceptors) if interceptors is not None else default_interceptors()
        self.max_scroll_attempts = max_scroll_attempts
        self.scroll_delay = scroll_delay
        self.settle_delay = settle_delay
        self._playwright = None
        self._browser = None
        self._context = None
        self._blocked = 0

    def log(self, level, msg):
        getattr(logger, level)(msg, extra={'context': 'renderer'})

    def open(self):
        if self._browser is not None:
            return
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(
                headless=True,
                args=[
                    "--disable-gpu",
                    "--no-sandbox",
                    "--disable-dev-shm-usage",
                ],
            )
            self._context = self._browser.new_context(
                viewport={"width": VIEWPORT_WIDTH, "height": VIEWPORT_HEIGHT},
                user_agent=USER_AGENT,
            )
        except PlaywrightError as e:
            self.close()
            raise RenderFailure(f"could not launch browser: {e.message}") from e
        self.log("info", "[RENDER] browser launched")

    def close(self):
        try:
            if self._context is not None:
                for page in list(self._context.pages):
                    page.close()
                self._context.close()
            if self._browser is not None:
                self._browser.close()
        except PlaywrightError as e:
            self.log("warning", f"[RENDER] error while closing browser: {e}")
        finally:
            if self._playwright is not None:
                self._playwright.stop()
            self._playwright = self._browser = self._context = None
            self.log("info", f"[RENDER] browser closed ({self._blocked} requests blocked)")

    def _route(self, route):
        request = OutboundRequest(url=route.request.url, resource_type=route.request.resource_type)
        if evaluate(self.interceptors, request) is Decision.DENY:
            self._blocked += 1
            route.abort()
        else:
            route.continue_()

    def _auto_scroll(self, page):
        last_height = 0
        for _ in range(self.max_scroll_attempts):
            height = page.evaluate(_SCROLL_STEP_JS)
            page.wait_for_timeout(self.scroll_delay * 1000)
            if height == last_height:
                break
            last_height = height
        page.evaluate("() => window.scrollTo(0, 0)")
        page.wait_for_timeout(self.settle_delay * 1000)

    def load(self, url, timeout):
        if self._context is None:
            raise RenderFailure("renderer is not open")
        if timeout <= 0:
            raise RenderFailure(f"no time left to load {url}")

        page = self._context.new_page()
        try:
            page.set_default_timeout(timeout * 1000)
            page.route("**/*", self._route)
            page.goto(url, wait_until="load", timeout=timeout * 1000)
            self._auto_scroll(page)

            final_url = page.url
            html = page.content()
            screenshot = page.screenshot(type="jpeg", quality=SCREENSHOT_QUALITY, full_page=True)
            self.log("info", f"[RENDER] captured {final_url} html={len(html)} chars screenshot={len(screenshot)} bytes")
            return RenderedPage(
                url=url,
                final_url=final_url,
                html=html,
                screenshot=screenshot,
                links=tuple(extract_hrefs(html, final_url)),
            )
        except PlaywrightTimeout as e:
            raise RenderFailure(f"timed out after {timeout:.0f}s loading {url}") from e
        except PlaywrightError as e:
            raise RenderFailure(f"browser error loading {url}: {e.message}") from e
        finally:
            if not page.is_closed():
                page.close()
