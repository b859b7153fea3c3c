"""Site snapshot crawler: same-site crawl with rendered HTML and screenshot capture."""

__version__ = "0.1.0"
