"""
Anchor extraction from rendered HTML.
Returns absolute hrefs in document order; filtering is the processor's job.
"""

from bs4 import BeautifulSoup
from urllib.parse import urljoin


def extract_hrefs(html, base_url):
    """
    Resolve every <a href> against the page URL (or its <base href>).
    Empty and duplicate hrefs are dropped, first occurrence wins.
    """
    soup = BeautifulSoup(html or "", 'html.parser')

    base = soup.find('base', href=True)
    if base:
        base_url = urljoin(base_url, base['href'].strip())

    hrefs = []
    seen = set()
    for a in soup.find_all('a', href=True):
        href = a['href'].strip()
        if not href:
            continue
        # Keep fragment-only and scheme-only links as written so they can be recognized
        if not href.startswith(("#", "mailto:", "tel:", "javascript:")):
            href = urljoin(base_url, href)
        if href in seen:
            continue
        seen.add(href)
        hrefs.append(href)
    return hrefs
