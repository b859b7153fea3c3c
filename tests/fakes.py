"""
In-memory collaborators for crawl tests.
"""

from snapcrawler.errors import RenderFailure, StorageFailure
from snapcrawler.models import RenderedPage
from snapcrawler.rendering.engine import PageRenderer
from snapcrawler.storage.blob_store import BlobStore


class FakeRenderer(PageRenderer):
    """
    Serves pages from a dict: url -> list of hrefs, or an Exception to raise.
    html / screenshot sizes can be overridden per URL.
    """

    def __init__(self, site, html_sizes=None, screenshot_sizes=None, on_load=None):
        self.site = site
        self.html_sizes = html_sizes or {}
        self.screenshot_sizes = screenshot_sizes or {}
        self.on_load = on_load
        self.loaded = []
        self.timeouts = []
        self.opened = 0
        self.closed = 0

    def open(self):
        self.opened += 1

    def close(self):
        self.closed += 1

    def load(self, url, timeout):
        self.loaded.append(url)
        self.timeouts.append(timeout)
        if self.on_load:
            self.on_load(url)
        entry = self.site.get(url, RenderFailure(f"404 for {url}"))
        if isinstance(entry, Exception):
            raise entry
        html = "x" * self.html_sizes.get(url, 100)
        screenshot = b"\xff" * self.screenshot_sizes.get(url, 200)
        return RenderedPage(url=url, final_url=url, html=html, screenshot=screenshot, links=tuple(entry))


class MemoryBlobStore(BlobStore):
    def __init__(self, fail_prefix=None):
        self.objects = {}
        self.content_types = {}
        self.fail_prefix = fail_prefix

    def put(self, key, data, content_type):
        if self.fail_prefix and key.startswith(self.fail_prefix):
            raise StorageFailure(f"bucket unavailable for {key}")
        self.objects[key] = data
        self.content_types[key] = content_type
        return f"https://files.test/{key}"

    def get(self, key):
        return self.objects.get(key)


class FakeClock:
    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds
