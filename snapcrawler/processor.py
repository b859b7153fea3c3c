"""
FILE DESCRIPTION: One page visit: render, enforce artifact caps, persist, extract links.
KEY FUNCTIONS/CLASSES: PageProcessor, filter_links

Every failure for a page is turned into a PageFailure or a recorded PageError
here; nothing raised by the renderer or the store reaches the supervisor.
"""

from datetime import datetime
from urllib.parse import urljoin, urlsplit

from snapcrawler.core import MAX_HTML_SIZE, MAX_SCREENSHOT_SIZE, logger
from snapcrawler.errors import ArtifactTooLarge, MalformedUrl, StorageFailure
from snapcrawler.models import ArtifactKind, PageArtifact, PageError, PageFailure, PageOutcome, PageSuccess
from snapcrawler.naming import artifact_key, page_stem, timestamp_suffix
from snapcrawler.url_utils import canonicalize

_SKIPPED_SCHEMES = ("mailto:", "tel:", "javascript:", "data:")


def filter_links(hrefs, page_url):
    """
    Canonical, http(s)-only, de-duplicated links in discovery order.
    Fragment-only links and links back to the page itself are dropped.
    """
    links = []
    seen = {page_url}
    for href in hrefs:
        href = (href or "").strip()
        if not href or href.startswith("#") or href.lower().startswith(_SKIPPED_SCHEMES):
            continue
        absolute = urljoin(page_url, href)
        if urlsplit(absolute).scheme.lower() not in ("http", "https"):
            continue
        try:
            canonical = canonicalize(absolute)
        except MalformedUrl:
            continue
        if canonical in seen:
            continue
        seen.add(canonical)
        links.append(canonical)
    return links


class PageProcessor:
    """
    FLOW: renderer.load -> drop HTML / screenshot over their caps ->
    put kept artifacts in the blob store -> filter discovered links -> PageSuccess.
    Renderer errors -> PageFailure. Store errors -> PageError on the success.
    """

    def __init__(self, renderer, store, max_html_size=MAX_HTML_SIZE,
                 max_screenshot_size=MAX_SCREENSHOT_SIZE, clock=datetime.now):
        self.renderer = renderer
        self.store = store
        self.max_html_size = max_html_size
        self.max_screenshot_size = max_screenshot_size
        self.clock = clock

    def log(self, level, msg):
        getattr(logger, level)(msg, extra={'context': 'processor'})

    def _check_size(self, kind, url, size, cap):
        if size > cap:
            raise ArtifactTooLarge(f"{kind.name} for {url} is {size} bytes (cap {cap})")

    def process(self, url, timeout) -> PageOutcome:
        try:
            page = self.renderer.load(url, timeout)
        except Exception as e:
            # Any renderer failure is confined to this page
            self.log("error", f"render failed for {url}: {e}")
            return PageFailure(url, f"RenderFailure: {e}")

        captures = []
        html_bytes = (page.html or "").encode("utf-8")
        for kind, data, cap in (
            (ArtifactKind.HTML, html_bytes, self.max_html_size),
            (ArtifactKind.SCREENSHOT, page.screenshot or b"", self.max_screenshot_size),
        ):
            try:
                self._check_size(kind, url, len(data), cap)
            except ArtifactTooLarge as e:
                self.log("warning", f"dropped artifact: {e}")
                continue
            captures.append((kind, data))

        stem = page_stem(url)
        stamp = timestamp_suffix(self.clock())
        artifacts = []
        errors = []
        for kind, data in captures:
            key = artifact_key(kind, stem, stamp)
            try:
                public_ref = self.store.put(key, data, kind.content_type)
            except StorageFailure as e:
                self.log("error", f"could not store {key}: {e}")
                errors.append(PageError(url, f"StorageFailure: {e}"))
                continue
            artifacts.append(PageArtifact(
                source_url=url,
                kind=kind,
                size_bytes=len(data),
                storage_key=key,
                public_ref=public_ref,
            ))

        discovered = filter_links(page.links, url)
        self.log(
            "info",
            f"processed {url}: {len(artifacts)} artifact(s), {len(discovered)} link(s) discovered",
        )
        return PageSuccess(
            url=url,
            artifacts=tuple(artifacts),
            discovered=tuple(discovered),
            errors=tuple(errors),
        )
